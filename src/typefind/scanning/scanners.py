"""
Plane Scanners.

One scanner per binding plane of a package. Scanners are independent: each one
reads a single plane, asks the `TypeMatcher` for a verdict and pushes matches
to a sink (normally `MatchCollector.put`). They never sort or group.
"""

import logging
from typing import Callable, List, Optional

from ..matcher import TypeMatcher
from ..models import Match
from ..semantic.model import (
    CompositeLit,
    Ident,
    KeyValueExpr,
    Node,
    ObjectKind,
    PackageInfo,
    StructType,
    strip_pointers,
    underlying,
)

logger = logging.getLogger(__name__)

MatchSink = Callable[[Match], None]


def node_match(node: Node) -> Match:
    """Resolves a syntax node to the position record reported to the user."""
    p = node.file.position(node.pos)
    return Match(filename=p.filename, line=p.line, column=p.column, offset=p.offset, length=node.length)


class PlaneScanner:
    plane = ""

    def __init__(self, matcher: TypeMatcher, sink: MatchSink):
        self.matcher = matcher
        self.sink = sink

    def scan(self, pkg: PackageInfo) -> int:
        """Scans one package and returns the number of matches emitted."""
        raise NotImplementedError

    def emit(self, node: Node):
        self.sink(node_match(node))


class SelectionScanner(PlaneScanner):
    """`recv.Field` and `recv.Method` selections; highlights only the selected name."""

    plane = "selections"

    def scan(self, pkg: PackageInfo) -> int:
        count = 0
        for sel in pkg.selections:
            if sel.obj.kind not in (ObjectKind.VAR, ObjectKind.FUNC):
                raise ValueError(
                    f"Selection '{sel.obj.name}' in {pkg.path} resolves to a {sel.obj.kind.value}, "
                    "expected a field or method"
                )
            if self.matcher.matches(sel.recv, sel.obj.name):
                self.emit(sel.expr.sel)
                count += 1
        return count


class UseScanner(PlaneScanner):
    plane = "uses"

    def scan(self, pkg: PackageInfo) -> int:
        count = 0
        for use in pkg.uses:
            obj = use.obj
            # do not include &TypeName{ ... } to simplify results
            if obj.kind is ObjectKind.TYPE_NAME:
                continue

            if self.matcher.matches_callable(obj) or self.matcher.matches(obj.type):
                self.emit(use.ident)
                count += 1
        return count


class DefinitionScanner(PlaneScanner):
    plane = "defs"

    def scan(self, pkg: PackageInfo) -> int:
        count = 0
        for d in pkg.defs:
            if d.obj is None:
                continue
            if self.matcher.matches(d.obj.type):
                self.emit(d.ident)
                count += 1
        return count


class CompositeLiteralScanner(PlaneScanner):
    """
    Struct fields set inside composite literals.

    Keyed literals highlight the key:

        Package{Name: pkgName, Imports: imports}   -> "Imports"

    Positional literals highlight the value sitting at the field's index:

        &ast.Package{pkgName, pkgScope, imports, files}   -> "imports"

    Only meaningful when the query has a selector.
    """

    plane = "composite_literals"

    def scan(self, pkg: PackageInfo) -> int:
        selector = self.matcher.query.selector_name
        count = 0
        for typed in pkg.types:
            comp = typed.expr
            if not isinstance(comp, CompositeLit) or not comp.elements:
                continue

            if not self.matcher.matches(typed.type, selector):
                continue

            st = underlying(strip_pointers(typed.type))
            if not isinstance(st, StructType):
                continue

            target = self._find_field_node(comp, st, selector)
            if target is not None:
                self.emit(target)
                count += 1
        return count

    @staticmethod
    def _find_field_node(comp: CompositeLit, st: StructType, selector: str) -> Optional[Node]:
        elements: List[Node] = comp.elements
        keyed = [isinstance(e, KeyValueExpr) for e in elements]

        if all(keyed):
            for kv in elements:
                if isinstance(kv.key, Ident) and kv.key.name == selector:
                    return kv.key
            return None

        if not any(keyed):
            # a fully positional literal sets every field, in declaration order
            if len(elements) != len(st.fields):
                return None
            for i, name in enumerate(st.fields):
                if name == selector:
                    return elements[i]
            return None

        logger.debug(f"Skipping composite literal with mixed elements at {comp.file.name}:{comp.pos}")
        return None


def build_scanners(matcher: TypeMatcher, sink: MatchSink) -> List[PlaneScanner]:
    """The scanners a query needs: three always, the literal scanner only with a selector."""
    scanners: List[PlaneScanner] = [
        SelectionScanner(matcher, sink),
        UseScanner(matcher, sink),
        DefinitionScanner(matcher, sink),
    ]
    if matcher.query.has_selector:
        scanners.append(CompositeLiteralScanner(matcher, sink))
    return scanners
