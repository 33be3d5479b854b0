import logging
from typing import Dict, Generator, Iterable, List

from opentelemetry import trace

from ..models import DisplayRecord
from .paths import FilenameSimplifier

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

HIGHLIGHT_START = "\x1b[31m"
HIGHLIGHT_END = "\x1b[0m"


class SourceReadError(RuntimeError):
    """A matched file (or line) could not be read back for display."""


class LineCache:
    """
    Per-run cache of source lines, one disk read per file.

    Lines are kept as bytes because match columns are byte offsets. Only the
    sequential rendering phase touches the cache, so it takes no lock.
    """

    def __init__(self):
        self._files: Dict[str, List[bytes]] = {}

    def line(self, filename: str, lineno: int) -> bytes:
        lines = self._files.get(filename)
        if lines is None:
            try:
                with open(filename, "rb") as f:
                    lines = f.read().split(b"\n")
            except OSError as e:
                raise SourceReadError(f"Cannot read {filename}: {e}") from e
            self._files[filename] = lines

        if lineno < 1 or lineno > len(lines):
            raise SourceReadError(f"{filename} has no line {lineno}")
        return lines[lineno - 1]

    def __len__(self) -> int:
        return len(self._files)


class Renderer:
    """
    Turns Display Records into grep-like lines:

        <filename>:<line>:[<column>:]<text with matched tokens highlighted>
    """

    def __init__(
        self,
        simplifier: FilenameSimplifier,
        show_column: bool = True,
        color: bool = True,
        cache: LineCache = None,
    ):
        self.simplifier = simplifier
        self.show_column = show_column
        self.color = color
        self.cache = cache if cache is not None else LineCache()

    def annotate(self, line: bytes, record: DisplayRecord) -> str:
        start_mark = HIGHLIGHT_START.encode() if self.color else b""
        end_mark = HIGHLIGHT_END.encode() if self.color else b""

        out = bytearray()
        cursor = 0
        for span in record.spans:
            s = max(span.start_column - 1, cursor)
            t = max(span.end_column - 1, s)
            if t == s:
                continue
            out += line[cursor:s]
            out += start_mark + line[s:t] + end_mark
            cursor = t
        out += line[cursor:]

        return out.decode("utf-8", errors="replace")

    def render(self, record: DisplayRecord) -> str:
        line = self.cache.line(record.filename, record.line).rstrip(b"\r")
        prefix = f"{self.simplifier.display(record.filename)}:{record.line}:"
        if self.show_column:
            prefix += f"{record.column}:"
        return prefix + self.annotate(line, record)

    def render_all(self, records: Iterable[DisplayRecord]) -> Generator[str, None, None]:
        with tracer.start_as_current_span("render.records") as span:
            count = 0
            for record in records:
                yield self.render(record)
                count += 1
            span.set_attribute("render.lines", count)
            span.set_attribute("render.files_read", len(self.cache))

    def render_filenames(self, records: Iterable[DisplayRecord]) -> Generator[str, None, None]:
        """Distinct display filenames, in record order (grep -l)."""
        seen = set()
        for record in records:
            name = self.simplifier.display(record.filename)
            if name not in seen:
                seen.add(name)
                yield name
