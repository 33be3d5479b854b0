import logging
import os
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

from .semantic.frontend import DEFAULT_EXPORTER

logger = logging.getLogger(__name__)

# ==============================================================================
#  RUNTIME CONFIGURATION
# ==============================================================================

"""
Environment variables (a `.env` in the working directory is loaded by the CLI first):

*   `TYPEFIND_DEBUG`: any truthy value ("1", "true", "yes") turns on debug logging.
*   `TYPEFIND_EXPORTER`: semantic exporter command (default `typefind-export`).
*   `TYPEFIND_SOURCE_ROOTS`: extra `os.pathsep`-separated roots for filename display.
*   `GOROOT` / `GOPATH`: language installation roots; `<root>/src` is used for display.
    When unset they are asked from `go env`, and GOPATH falls back to `~/go`.
"""

FilenameMode = Literal["shortest", "full", "simple"]

TRUTHY = {"1", "true", "yes", "on"}


def env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in TRUTHY


def go_env(*names: str) -> Dict[str, str]:
    """Variables the go toolchain derives on its own (`go env NAME...`); empty when unavailable."""
    if not shutil.which("go"):
        return {}
    try:
        result = subprocess.run(["go", "env", *names], check=False, capture_output=True, text=True, timeout=10)
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"go env failed: {e}")
        return {}
    if result.returncode != 0:
        logger.debug(f"go env exited {result.returncode}: {result.stderr.strip()}")
        return {}
    return {name: value for name, value in zip(names, result.stdout.splitlines()) if value}


def installation_roots() -> List[str]:
    """`$GOROOT/src` and `<entry>/src` for every `$GOPATH` entry, plus `TYPEFIND_SOURCE_ROOTS`."""
    goroot = os.getenv("GOROOT")
    gopath = os.getenv("GOPATH")
    if not goroot or not gopath:
        derived = go_env("GOROOT", "GOPATH")
        goroot = goroot or derived.get("GOROOT")
        gopath = gopath or derived.get("GOPATH") or os.path.join(os.path.expanduser("~"), "go")

    roots = []
    if goroot:
        roots.append(os.path.join(goroot, "src"))
    for entry in gopath.split(os.pathsep):
        if entry:
            roots.append(os.path.join(entry, "src"))
    for entry in os.getenv("TYPEFIND_SOURCE_ROOTS", "").split(os.pathsep):
        if entry:
            roots.append(entry)
    return [os.path.abspath(r) for r in roots]


def is_local_argument(arg: str) -> bool:
    """`.`, `./x`, `../x` and relative file paths refer to the working directory."""
    if arg == "." or arg == "..":
        return True
    if arg.startswith("./") or arg.startswith("../"):
        return True
    return not os.path.isabs(arg) and os.path.isfile(arg)


@dataclass
class SearchConfig:
    """
    Explicit run configuration, built once by the CLI and passed down.

    Nothing in the package reads process-wide mutable state; tests build this
    directly.
    """

    filename_mode: FilenameMode = "shortest"
    suppress_errors: bool = False
    strict: bool = False
    show_column: bool = True
    color: bool = True
    files_only: bool = False
    debug: bool = False
    exporter: str = DEFAULT_EXPORTER
    source_roots: List[str] = field(default_factory=list)

    @classmethod
    def from_env(cls, package_args: Optional[List[str]] = None, **overrides) -> "SearchConfig":
        roots = installation_roots()
        if package_args and any(is_local_argument(a) for a in package_args):
            roots.append(os.getcwd())

        config = cls(
            debug=env_flag("TYPEFIND_DEBUG"),
            exporter=os.getenv("TYPEFIND_EXPORTER") or DEFAULT_EXPORTER,
            source_roots=roots,
        )
        for key, value in overrides.items():
            if not hasattr(config, key):
                raise TypeError(f"Unknown configuration option '{key}'")
            setattr(config, key, value)
        return config
