import concurrent.futures
import logging
from typing import List, Optional

from opentelemetry import context, trace

from .config import SearchConfig
from .matcher import TypeMatcher
from .models import Match
from .output.grouping import sort_matches
from .query import QueryDescriptor
from .scanning.collector import MatchCollector
from .scanning.scanners import PlaneScanner, build_scanners
from .semantic.frontend import SemanticFrontEnd
from .semantic.model import PackageInfo

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class TypeSearcher:
    """
    Type-directed search over a set of packages.

    **Pipeline**:
    1.  **Load**: the front end type-checks the package arguments.
    2.  **Isolate**: packages with type errors are dropped (logged unless suppressed).
    3.  **Fan-out**: every plane scanner of every remaining package runs as its own task.
    4.  **Fan-in**: all tasks feed one `MatchCollector`; once every task is done
        (barrier) the collector is closed and drained.
    5.  **Order**: matches are sorted by (filename, offset) so the output never
        depends on scheduling.
    """

    def __init__(
        self,
        query: QueryDescriptor,
        front_end: SemanticFrontEnd,
        config: Optional[SearchConfig] = None,
        max_workers: Optional[int] = None,
    ):
        self.query = query
        self.front_end = front_end
        self.config = config or SearchConfig()
        self.matcher = TypeMatcher(query)
        self.max_workers = max_workers

    def search(self, args: List[str]) -> List[Match]:
        with tracer.start_as_current_span("typefind.search") as span:
            span.set_attribute("query", str(self.query))

            packages = self.front_end.load(args, allow_errors=not self.config.strict)
            checked = [pkg for pkg in packages if self._accept(pkg)]
            span.set_attribute("search.packages_loaded", len(packages))
            span.set_attribute("search.packages_scanned", len(checked))

            matches = self.scan_packages(checked)
            span.set_attribute("search.matches", len(matches))
            return sort_matches(matches)

    def scan_packages(self, packages: List[PackageInfo]) -> List[Match]:
        """Runs all scanners of all packages concurrently and returns matches in arrival order."""
        collector = MatchCollector().start()
        scanners = build_scanners(self.matcher, collector.put)
        current_ctx = context.get_current()

        try:
            with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [
                    executor.submit(self._run_scanner, scanner, pkg, current_ctx)
                    for pkg in packages
                    for scanner in scanners
                ]
                concurrent.futures.wait(futures)
                # surface the first scanner failure; it aborts the whole run
                for future in futures:
                    future.result()
        finally:
            collector.close()

        return collector.wait()

    def _accept(self, pkg: PackageInfo) -> bool:
        if not pkg.has_errors:
            return True
        if not self.config.suppress_errors:
            for err in pkg.errors:
                logger.warning(f"{pkg.path}: {err}")
            logger.warning(f"⚠️ Skipping package {pkg.path}: {len(pkg.errors)} type error(s)")
        return False

    @staticmethod
    def _run_scanner(scanner: PlaneScanner, pkg: PackageInfo, ctx) -> int:
        token = context.attach(ctx)
        try:
            with tracer.start_as_current_span("typefind.scan_plane") as span:
                span.set_attribute("package", pkg.path)
                span.set_attribute("plane", scanner.plane)
                count = scanner.scan(pkg)
                span.set_attribute("matches", count)
                logger.debug(f"[{pkg.path}] {scanner.plane}: {count} matches")
                return count
        finally:
            context.detach(token)
