import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

from typefind.query import QueryDescriptor
from typefind.semantic.model import (
    CompositeLit,
    Expr,
    Ident,
    KeyValueExpr,
    NamedType,
    PointerType,
    SelectorExpr,
    SourceFile,
    StructType,
)


class GoFile:
    """
    A Go source file written to disk plus helpers to build nodes by token text.

    Offsets are found with `bytes.find`, so fixtures stay readable: `ident("c", 2)`
    is the third `c` token in the file.
    """

    def __init__(self, path: Path, text: str):
        self.path = path
        self.text = text
        self.data = text.encode("utf-8")
        self.source = SourceFile(str(path))

    def span(self, token: str, nth: int = 0):
        needle = token.encode("utf-8")
        pos = -1
        for _ in range(nth + 1):
            pos = self.data.find(needle, pos + 1)
            if pos < 0:
                raise AssertionError(f"token {token!r} #{nth} not found in {self.path.name}")
        return pos, pos + len(needle)

    def ident(self, name: str, nth: int = 0) -> Ident:
        pos, end = self.span(name, nth)
        return Ident(file=self.source, pos=pos, end=end, name=name)

    def ident_in(self, context: str, name: str, nth: int = 0) -> Ident:
        """The first `name` token inside the `nth` occurrence of `context`."""
        ctx_pos, _ = self.span(context, nth)
        pos = self.data.find(name.encode("utf-8"), ctx_pos)
        return Ident(file=self.source, pos=pos, end=pos + len(name.encode("utf-8")), name=name)

    def expr(self, text: str, nth: int = 0) -> Expr:
        pos, end = self.span(text, nth)
        return Expr(file=self.source, pos=pos, end=end)

    def selector(self, text: str, sel: str, nth: int = 0) -> SelectorExpr:
        pos, end = self.span(text, nth)
        sel_pos = self.data.rfind(sel.encode("utf-8"), pos, end)
        return SelectorExpr(
            file=self.source, pos=pos, end=end, sel=Ident(file=self.source, pos=sel_pos, end=sel_pos + len(sel), name=sel)
        )

    def key_value(self, key: str, value: str, nth: int = 0) -> KeyValueExpr:
        k = self.ident(key, nth)
        v_pos = self.data.find(value.encode("utf-8"), k.end)
        v = Expr(file=self.source, pos=v_pos, end=v_pos + len(value))
        return KeyValueExpr(file=self.source, pos=k.pos, end=v.end, key=k, value=v)

    def composite(self, text: str, elements: List, nth: int = 0) -> CompositeLit:
        pos, end = self.span(text, nth)
        return CompositeLit(file=self.source, pos=pos, end=end, elements=elements)

    # --- JSON export helpers (same shapes the exporter writes) ---

    def ident_json(self, file_index: int, name: str, nth: int = 0) -> Dict[str, Any]:
        pos, end = self.span(name, nth)
        return {"kind": "ident", "file": file_index, "pos": pos, "end": end, "name": name}

    def expr_json(self, file_index: int, text: str, nth: int = 0) -> Dict[str, Any]:
        pos, end = self.span(text, nth)
        return {"kind": "expr", "file": file_index, "pos": pos, "end": end}


@pytest.fixture
def go_file(tmp_path):
    def _make(name: str, text: str) -> GoFile:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return GoFile(path, text)

    return _make


@pytest.fixture
def write_export(tmp_path):
    def _write(docs: List[Dict[str, Any]], name: str = "export.jsonl") -> str:
        path = tmp_path / name
        path.write_text("\n".join(json.dumps(d) for d in docs) + "\n", encoding="utf-8")
        return str(path)

    return _write


# ==============================================================================
#  SHARED TYPE FIXTURES: net/http.Client
# ==============================================================================


@pytest.fixture
def client_types():
    """`net/http.Client` (struct {Transport; Timeout}) and `*Client`."""
    struct = StructType(["Transport", "Timeout"])
    named = NamedType("Client", package="net/http", underlying=struct)
    return {"struct": struct, "named": named, "ptr": PointerType(named)}


@pytest.fixture
def client_query():
    return QueryDescriptor("net/http", "Client")


@pytest.fixture
def timeout_query():
    return QueryDescriptor("net/http", "Client", "Timeout")
