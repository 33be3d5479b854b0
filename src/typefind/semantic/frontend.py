import json
import logging
import shutil
import subprocess
import sys
import tempfile
from abc import ABC, abstractmethod
from typing import Generator, Iterable, List

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from .decoder import DocumentError, decode_package
from .model import PackageInfo

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

DEFAULT_EXPORTER = "typefind-export"


class FrontEndLoadError(RuntimeError):
    """The requested packages could not be loaded at all. Always fatal."""


class SemanticFrontEnd(ABC):
    """
    Base class for semantic front ends.

    A front end turns the user's package arguments into type-checked
    `PackageInfo` objects. Packages that fail to type-check are still returned,
    carrying their `errors`, so the caller can isolate them.
    """

    @abstractmethod
    def stream_documents(self, args: List[str], allow_errors: bool) -> Iterable[dict]:
        """Yields one raw export document per package."""

    def load(self, args: List[str], allow_errors: bool = True) -> List[PackageInfo]:
        """
        Loads and decodes every package named by `args`.

        Raises:
            FrontEndLoadError: the arguments could not be resolved, a document is
                malformed, or (with `allow_errors=False`) a package has type errors.
        """
        with tracer.start_as_current_span("frontend.load") as span:
            span.set_attribute("frontend.args_count", len(args))
            packages = []
            try:
                for doc in self.stream_documents(args, allow_errors):
                    pkg = decode_package(doc)
                    if pkg.has_errors and not allow_errors:
                        raise FrontEndLoadError(f"Package {pkg.path} has type errors:\n" + "\n".join(pkg.errors))
                    packages.append(pkg)
            except DocumentError as e:
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR))
                raise FrontEndLoadError(str(e)) from e

            span.set_attribute("frontend.packages_count", len(packages))
            logger.debug(f"Loaded {len(packages)} packages from {len(args)} arguments")
            return packages


def _iter_json_lines(lines: Iterable[str], source: str) -> Generator[dict, None, None]:
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            payload = json.loads(line)
        except ValueError as e:
            raise FrontEndLoadError(f"{source}:{lineno}: invalid JSON: {e}") from e
        # A single line may also hold a list of package documents
        if isinstance(payload, list):
            yield from payload
        else:
            yield payload


class ExporterFrontEnd(SemanticFrontEnd):
    """
    Runs the external semantic exporter and streams its output.

    The exporter is invoked as `<command> -json [-allow-errors] ARGS...` and
    writes one package document per line on stdout. Output is decoded as it
    arrives, so very large programs never have to sit in memory as raw text.
    """

    def __init__(self, command: str = DEFAULT_EXPORTER):
        self.command = command

    def build_argv(self, args: List[str], allow_errors: bool) -> List[str]:
        argv = [self.command, "-json"]
        if allow_errors:
            argv.append("-allow-errors")
        return argv + list(args)

    def stream_documents(self, args: List[str], allow_errors: bool) -> Generator[dict, None, None]:
        if not shutil.which(self.command):
            raise FrontEndLoadError(f"Semantic exporter '{self.command}' not found in PATH")

        argv = self.build_argv(args, allow_errors)
        logger.debug(f"Running exporter: {' '.join(argv)}")

        with tracer.start_as_current_span("frontend.exporter") as span:
            span.set_attribute("exporter.command", self.command)
            # stderr goes to a spool file so a chatty exporter cannot block on a full pipe
            with tempfile.TemporaryFile(mode="w+") as err_file:
                with subprocess.Popen(argv, stdout=subprocess.PIPE, stderr=err_file, text=True) as proc:
                    yield from _iter_json_lines(proc.stdout, self.command)
                    proc.wait()
                err_file.seek(0)
                stderr = err_file.read()

            span.set_attribute("exporter.exit_code", proc.returncode)
            if proc.returncode != 0:
                span.set_status(Status(StatusCode.ERROR))
                logger.error(f"❌ Exporter exited with code {proc.returncode}")
                raise FrontEndLoadError(stderr.strip() or f"{self.command} exited with code {proc.returncode}")


class ExportFileFrontEnd(SemanticFrontEnd):
    """
    Reads previously exported documents instead of running the exporter.

    Each argument is the path of a JSON-lines export file; `-` reads stdin.
    """

    def stream_documents(self, args: List[str], allow_errors: bool) -> Generator[dict, None, None]:
        for path in args:
            if path == "-":
                yield from _iter_json_lines(sys.stdin, "<stdin>")
                continue
            try:
                with open(path, "r", encoding="utf-8") as f:
                    yield from _iter_json_lines(f, path)
            except OSError as e:
                raise FrontEndLoadError(f"Cannot read export file {path}: {e}") from e
