"""
In-memory Semantic Model of a type-checked package.

The front end (see `frontend.py`) does all parsing and type inference. What
arrives here is its result, flattened into four binding planes:

*   **selections**: `x.Sel` expressions with the receiver type and the selected field/method.
*   **uses**: identifiers that refer to an existing declaration.
*   **defs**: identifiers that introduce a new binding (object may be missing, e.g. `_`).
*   **types**: expression -> static type, used for composite literals.

Every syntax node carries the `SourceFile` it belongs to plus byte offsets, so
positions are resolved lazily and only for nodes that actually match.
"""

import bisect
import enum
from dataclasses import dataclass, field
from typing import List, Optional, Union

# ==============================================================================
#  RESOLVED TYPES
# ==============================================================================


@dataclass(eq=False)
class BasicType:
    name: str


@dataclass(eq=False)
class PointerType:
    elem: Optional["Type"] = None


@dataclass(eq=False)
class StructType:
    # Ordered declared field names (embedded fields use their type name)
    fields: List[str] = field(default_factory=list)


@dataclass(eq=False)
class SignatureType:
    pass


@dataclass(eq=False)
class OpaqueType:
    # Slices, maps, channels, interfaces, tuples... never matched directly
    description: str = ""


@dataclass(eq=False)
class NamedType:
    name: str
    # Declaring package path; None for predeclared (universe) types like `error`
    package: Optional[str] = None
    underlying: Optional["Type"] = None


Type = Union[BasicType, PointerType, StructType, SignatureType, OpaqueType, NamedType]


def strip_pointers(typ: Optional[Type]) -> Optional[Type]:
    """Follows pointer indirection (`**T` -> `T`)."""
    while isinstance(typ, PointerType):
        typ = typ.elem
    return typ


def underlying(typ: Optional[Type]) -> Optional[Type]:
    if isinstance(typ, NamedType):
        return typ.underlying
    return typ


# ==============================================================================
#  RESOLVED OBJECTS
# ==============================================================================


class ObjectKind(str, enum.Enum):
    VAR = "var"
    FUNC = "func"
    TYPE_NAME = "type_name"
    CONST = "const"
    PKG_NAME = "pkg_name"
    LABEL = "label"
    BUILTIN = "builtin"
    NIL = "nil"


@dataclass(eq=False)
class Object:
    """A declared entity: variable, field, function, method, type name..."""

    kind: ObjectKind
    name: str
    package: Optional[str] = None
    type: Optional[Type] = None


# ==============================================================================
#  SOURCE FILES & POSITIONS
# ==============================================================================


@dataclass(frozen=True)
class Position:
    filename: str
    line: int  # 1-based
    column: int  # 1-based, in bytes
    offset: int  # 0-based byte offset


class SourceFile:
    """
    Position resolver for one source file.

    `line_starts` holds the byte offset of each line start. The front end
    normally ships it; when it does not, it is computed from disk on first use.
    """

    def __init__(self, name: str, line_starts: Optional[List[int]] = None):
        self.name = name
        self._line_starts = line_starts

    @property
    def line_starts(self) -> List[int]:
        if self._line_starts is None:
            with open(self.name, "rb") as f:
                content = f.read()
            self._line_starts = [0] + [i + 1 for i, b in enumerate(content) if b == 10]
        return self._line_starts

    def position(self, offset: int) -> Position:
        starts = self.line_starts
        idx = bisect.bisect_right(starts, offset) - 1
        idx = max(idx, 0)
        return Position(filename=self.name, line=idx + 1, column=offset - starts[idx] + 1, offset=offset)

    def __repr__(self) -> str:
        return f"SourceFile({self.name!r})"


# ==============================================================================
#  SYNTAX NODES
# ==============================================================================


@dataclass(eq=False)
class Node:
    file: SourceFile
    pos: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.pos


@dataclass(eq=False)
class Expr(Node):
    """Any expression the scanners never look inside."""


@dataclass(eq=False)
class Ident(Node):
    name: str = ""


@dataclass(eq=False)
class SelectorExpr(Node):
    sel: Optional[Ident] = None


@dataclass(eq=False)
class KeyValueExpr(Node):
    key: Optional[Node] = None
    value: Optional[Node] = None


@dataclass(eq=False)
class CompositeLit(Node):
    elements: List[Node] = field(default_factory=list)


# ==============================================================================
#  BINDING PLANES
# ==============================================================================


@dataclass(eq=False)
class Selection:
    expr: SelectorExpr
    recv: Type
    obj: Object


@dataclass(eq=False)
class Binding:
    ident: Ident
    obj: Optional[Object]


@dataclass(eq=False)
class TypedExpr:
    expr: Node
    type: Type


@dataclass(eq=False)
class PackageInfo:
    """All bindings the front end produced for one package."""

    path: str
    files: List[SourceFile] = field(default_factory=list)
    selections: List[Selection] = field(default_factory=list)
    uses: List[Binding] = field(default_factory=list)
    defs: List[Binding] = field(default_factory=list)
    types: List[TypedExpr] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
