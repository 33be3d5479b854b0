import os
from typing import Iterable, List

from ..config import FilenameMode


class FilenameSimplifier:
    """
    Chooses how a matched file's path is printed.

    *   `shortest`: shortest path relative to any known source root that does
        not climb out of it; the absolute path when no root applies.
    *   `full`: always the absolute path.
    *   `simple`: only the base name.
    """

    def __init__(self, roots: Iterable[str] = (), mode: FilenameMode = "shortest"):
        self.mode = mode
        self.roots: List[str] = [os.path.abspath(r) for r in roots]
        self._cache = {}

    def display(self, filename: str) -> str:
        if filename not in self._cache:
            self._cache[filename] = self._simplify(filename)
        return self._cache[filename]

    def _simplify(self, filename: str) -> str:
        if self.mode == "simple":
            return os.path.basename(filename)

        abs_path = os.path.abspath(filename)
        if self.mode == "full":
            return abs_path

        best = abs_path
        for root in self.roots:
            try:
                rel = os.path.relpath(abs_path, root)
            except ValueError:
                # different drive on Windows
                continue
            if rel == ".." or rel.startswith(".." + os.sep):
                continue
            if len(rel) < len(best):
                best = rel
        return best
