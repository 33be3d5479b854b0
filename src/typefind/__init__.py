from .config import SearchConfig
from .matcher import TypeMatcher
from .models import DisplayRecord, HighlightSpan, Match
from .output import FilenameSimplifier, Renderer, SourceReadError, group_matches, sort_matches
from .query import MalformedQueryError, QueryDescriptor, parse_query
from .search import TypeSearcher
from .semantic import ExporterFrontEnd, ExportFileFrontEnd, FrontEndLoadError, SemanticFrontEnd

__all__ = [
    "TypeSearcher",
    "SearchConfig",
    "QueryDescriptor", "parse_query", "MalformedQueryError",
    "TypeMatcher",
    "Match", "HighlightSpan", "DisplayRecord",
    "sort_matches", "group_matches",
    "FilenameSimplifier", "Renderer", "SourceReadError",
    "SemanticFrontEnd", "ExporterFrontEnd", "ExportFileFrontEnd", "FrontEndLoadError",
]
