"""
JSON Export Decoder.

Turns one package document, as streamed by the semantic exporter, into a
`PackageInfo`. Type and object tables are decoded in two passes (allocate, then
link) because named types may refer to themselves through their fields.
"""

import logging
from typing import Any, Dict, List, Optional

from .model import (
    BasicType,
    Binding,
    CompositeLit,
    Expr,
    Ident,
    KeyValueExpr,
    NamedType,
    Node,
    Object,
    ObjectKind,
    OpaqueType,
    PackageInfo,
    PointerType,
    Selection,
    SelectorExpr,
    SignatureType,
    SourceFile,
    StructType,
    Type,
    TypedExpr,
)

logger = logging.getLogger(__name__)


class DocumentError(ValueError):
    """Raised when an export document does not follow the exchange format."""


class PackageDecoder:
    def __init__(self, document: Dict[str, Any]):
        if not isinstance(document, dict) or "path" not in document:
            raise DocumentError("Export document must be an object with a 'path' key")
        self.document = document
        self.path = document["path"]
        self.files: List[SourceFile] = []
        self.types: Dict[int, Type] = {}
        self.objects: Dict[int, Object] = {}

    def decode(self) -> PackageInfo:
        doc = self.document
        try:
            self.files = [SourceFile(f["name"], f.get("lines")) for f in doc.get("files", [])]
            self._decode_types(doc.get("types", []))
            self._decode_objects(doc.get("objects", []))

            pkg = PackageInfo(path=self.path, files=self.files, errors=list(doc.get("errors") or []))
            for s in doc.get("selections", []):
                expr = self._node(s["expr"])
                if not isinstance(expr, SelectorExpr):
                    raise DocumentError(f"Selection expression is a '{s['expr'].get('kind')}', not a selector")
                pkg.selections.append(Selection(expr=expr, recv=self._type(s["recv"]), obj=self._object(s["obj"])))

            for u in doc.get("uses", []):
                pkg.uses.append(Binding(ident=self._ident(u["ident"]), obj=self._object(u["obj"])))

            for d in doc.get("defs", []):
                obj_id = d.get("obj")
                obj = self._object(obj_id) if obj_id is not None else None
                pkg.defs.append(Binding(ident=self._ident(d["ident"]), obj=obj))

            for t in doc.get("types_info", []):
                pkg.types.append(TypedExpr(expr=self._node(t["expr"]), type=self._type(t["type"])))
        except (KeyError, TypeError, IndexError, AttributeError) as e:
            raise DocumentError(f"Malformed export document for package '{self.path}': {e!r}") from e

        logger.debug(
            f"Decoded {self.path}: {len(pkg.selections)} selections, {len(pkg.uses)} uses, "
            f"{len(pkg.defs)} defs, {len(pkg.types)} typed exprs"
        )
        return pkg

    # --- TABLES ---

    def _decode_types(self, entries: List[Dict[str, Any]]):
        # Pass 1: allocate
        for e in entries:
            kind = e["kind"]
            if kind == "basic":
                typ = BasicType(e["name"])
            elif kind == "pointer":
                typ = PointerType()
            elif kind == "named":
                typ = NamedType(e["name"], package=e.get("package"))
            elif kind == "struct":
                typ = StructType(list(e.get("fields", [])))
            elif kind == "signature":
                typ = SignatureType()
            else:
                typ = OpaqueType(e.get("description", kind))
            self.types[e["id"]] = typ

        # Pass 2: link
        for e in entries:
            typ = self.types[e["id"]]
            if isinstance(typ, PointerType):
                typ.elem = self._type(e["elem"])
            elif isinstance(typ, NamedType) and e.get("underlying") is not None:
                typ.underlying = self._type(e["underlying"])

    def _decode_objects(self, entries: List[Dict[str, Any]]):
        for e in entries:
            try:
                kind = ObjectKind(e["kind"])
            except ValueError as ex:
                raise DocumentError(f"Unknown object kind '{e['kind']}'") from ex
            type_id = e.get("type")
            self.objects[e["id"]] = Object(
                kind=kind,
                name=e["name"],
                package=e.get("package"),
                type=self._type(type_id) if type_id is not None else None,
            )

    def _type(self, type_id: int) -> Type:
        try:
            return self.types[type_id]
        except KeyError:
            raise DocumentError(f"Unknown type id {type_id} in package '{self.path}'") from None

    def _object(self, obj_id: int) -> Object:
        try:
            return self.objects[obj_id]
        except KeyError:
            raise DocumentError(f"Unknown object id {obj_id} in package '{self.path}'") from None

    # --- NODES ---

    def _ident(self, raw: Dict[str, Any]) -> Ident:
        node = self._node(raw)
        if not isinstance(node, Ident):
            raise DocumentError(f"Expected an identifier, got '{raw.get('kind')}'")
        return node

    def _node(self, raw: Optional[Dict[str, Any]]) -> Optional[Node]:
        if raw is None:
            return None
        if not isinstance(raw, dict):
            raise DocumentError(f"Expected a syntax node object, got {raw!r}")

        kind = raw.get("kind", "expr")
        base = dict(file=self.files[raw["file"]], pos=raw["pos"], end=raw["end"])

        if kind == "ident":
            return Ident(name=raw["name"], **base)
        if kind == "selector":
            return SelectorExpr(sel=self._ident(raw["sel"]), **base)
        if kind == "key_value":
            return KeyValueExpr(key=self._node(raw["key"]), value=self._node(raw.get("value")), **base)
        if kind == "composite_lit":
            return CompositeLit(elements=[self._node(elt) for elt in raw.get("elts", [])], **base)
        return Expr(**base)


def decode_package(document: Dict[str, Any]) -> PackageInfo:
    return PackageDecoder(document).decode()
