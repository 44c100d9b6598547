"""
Native toolchain glue: write the assembly file and hand it to the
system C compiler driver (gcc by default) to assemble and link.
"""

from __future__ import annotations
import logging
import subprocess
from pathlib import Path
from typing import Union

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ToolchainError(Exception):
    def __init__(self, message: str, stderr: str = ""):
        self.stderr = stderr
        if stderr:
            message = f"{message}\n{stderr.rstrip()}"
        super().__init__(message)


def write_assembly(path: PathLike, asm_text: str) -> Path:
    """Write assembly text to path, making sure it ends with a newline."""
    path = Path(path)
    if not asm_text.endswith("\n"):
        asm_text += "\n"
    path.write_text(asm_text, encoding="utf-8")
    log.info("Wrote %s", path)
    return path


def assemble(asm_path: PathLike, exe_path: PathLike, cc: str = "gcc") -> Path:
    """Assemble and link asm_path into the executable exe_path.

    Raises ToolchainError with the driver's stderr if it cannot be run
    or exits non-zero.
    """
    cmd = [cc, str(asm_path), "-o", str(exe_path)]
    log.info("%s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise ToolchainError(f"C compiler driver not found: {cc}") from e

    if result.returncode != 0:
        raise ToolchainError(f"{cc} exited with status {result.returncode}", result.stderr)
    if result.stderr.strip():
        log.warning("%s: %s", cc, result.stderr.strip())
    return Path(exe_path)
