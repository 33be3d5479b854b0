from .collector import MatchCollector as MatchCollector
from .scanners import (
    CompositeLiteralScanner as CompositeLiteralScanner,
)
from .scanners import (
    DefinitionScanner as DefinitionScanner,
)
from .scanners import (
    PlaneScanner as PlaneScanner,
)
from .scanners import (
    SelectionScanner as SelectionScanner,
)
from .scanners import (
    UseScanner as UseScanner,
)
from .scanners import (
    build_scanners as build_scanners,
)
