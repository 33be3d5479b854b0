from .grouping import group_matches as group_matches
from .grouping import sort_matches as sort_matches
from .paths import FilenameSimplifier as FilenameSimplifier
from .renderer import LineCache as LineCache
from .renderer import Renderer as Renderer
from .renderer import SourceReadError as SourceReadError
