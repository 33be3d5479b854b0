from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class Match:
    """
    A syntax node confirmed by the Type Matcher.

    Positions follow the front end's conventions: `line` and `column` are 1-based
    (column counted in bytes), `offset` is the 0-based byte offset of the token
    start and `length` its byte length.
    """

    filename: str
    line: int
    column: int
    offset: int
    length: int

    @property
    def sort_key(self):
        return (self.filename, self.offset)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HighlightSpan:
    # 1-based byte columns, end exclusive
    start_column: int
    end_column: int


@dataclass
class DisplayRecord:
    """
    One output line.

    Several matches on the same file+line collapse into a single record; spans
    stay in column order because records are built from offset-sorted matches.
    """

    filename: str
    line: int
    spans: List[HighlightSpan] = field(default_factory=list)

    @property
    def column(self) -> int:
        return self.spans[0].start_column if self.spans else 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
