"""Compile and run generated programs with an external C++ compiler."""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Optional

from ..config_manager import ExecutionConfig
from ..error_handler import global_error_handler, with_error_handling
from ..exceptions import ExecutionError

logger = logging.getLogger(__name__)


class CompilerRunner:
    """Build a program in a scratch directory and capture its stdout.

    Every run gets its own temporary directory, removed afterwards.
    """

    def __init__(self, config: Optional[ExecutionConfig] = None) -> None:
        self.config = config or ExecutionConfig()

    def is_available(self) -> bool:
        return shutil.which(self.config.compiler) is not None

    @with_error_handling(global_error_handler, reraise=True)
    def run(self, code: str) -> str:
        compiler = shutil.which(self.config.compiler)
        if compiler is None:
            raise ExecutionError(
                f"Compiler not found: {self.config.compiler}",
                "COMPILER_NOT_FOUND",
            )

        with tempfile.TemporaryDirectory(prefix="gridsynth_") as work_dir:
            source = Path(work_dir) / "pattern.cpp"
            binary = Path(work_dir) / "pattern"
            source.write_text(code, encoding="utf-8")

            start = time.perf_counter()
            self._invoke(
                [compiler, *self.config.compiler_flags, "-o", str(binary), str(source)],
                "COMPILE_FAILED",
            )
            completed = self._invoke([str(binary)], "RUN_FAILED")
            logger.debug(
                "Compiled and ran program in %.0f ms",
                (time.perf_counter() - start) * 1000,
            )
            return completed.stdout

    def _invoke(self, command, error_code: str) -> subprocess.CompletedProcess:
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.config.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise ExecutionError(
                f"Timed out after {self.config.timeout}s: {command[0]}",
                "TIMEOUT",
            ) from exc
        except OSError as exc:
            raise ExecutionError(
                f"Could not execute {command[0]}: {exc}", error_code
            ) from exc

        if completed.returncode != 0:
            raise ExecutionError(
                f"{Path(command[0]).name} exited with status {completed.returncode}",
                error_code,
                {"stderr": completed.stderr.strip()},
            )
        return completed
