"""Process helpers for the JDK tools used by the build environment."""
from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from common.logging import get_logger
from common.sink import ErrorSink

LOGGER = get_logger(__name__)


class BuildError(RuntimeError):
    def __init__(self, message: str, returncode: int | None = None):
        super().__init__(message)
        self.returncode = returncode


def find_tool(name: str) -> str:
    """Resolve a JDK executable, honouring ``JAVA_HOME`` before ``PATH``."""

    if os.path.sep in name or (os.path.altsep and os.path.altsep in name):
        if Path(name).exists():
            return name
        raise BuildError(f"Tool not found: {name}")
    java_home = os.environ.get("JAVA_HOME")
    if java_home:
        candidate = Path(java_home) / "bin" / name
        for path in (candidate, candidate.with_suffix(".exe")):
            if path.exists():
                return str(path)
    found = shutil.which(name)
    if found is None:
        raise BuildError(f"{name} binary not available")
    return found


def format_classpath(entries: Sequence[Path]) -> str:
    return os.pathsep.join(str(entry) for entry in entries)


def run_command(
    cmd: List[str],
    sink: ErrorSink | None,
    check: bool = True,
    cwd: Path | None = None,
) -> subprocess.CompletedProcess:
    LOGGER.info("Running command: %s", " ".join(cmd))
    proc = subprocess.run(
        cmd,
        cwd=cwd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        check=False,
    )
    for line in (proc.stdout or "").splitlines():
        if sink is not None:
            sink.write_line(line)
        else:
            LOGGER.debug("%s", line)
    if check and proc.returncode != 0:
        raise BuildError(
            f"Command failed ({proc.returncode}): {' '.join(cmd)}",
            returncode=proc.returncode,
        )
    return proc


def run_java(
    java: str,
    main_class: str,
    classpath: Sequence[Path],
    args: Sequence[str] = (),
    cwd: Optional[Path] = None,
) -> int:
    """Run ``main_class`` in a child JVM with inherited stdio; return its exit code."""

    cmd = [find_tool(java), "-cp", format_classpath(classpath), main_class, *args]
    LOGGER.info("Launching %s", main_class)
    proc = subprocess.run(cmd, cwd=cwd, check=False)
    return proc.returncode


__all__ = ["BuildError", "find_tool", "format_classpath", "run_command", "run_java"]
