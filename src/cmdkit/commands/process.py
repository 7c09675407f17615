"""Run an external program and relay its output through a CommandLog.

stdout lines go to ``log.info`` and stderr lines to ``log.error``, each with
an optional prefix.  A non-zero exit is logged and, with ``check=True`` (the
default), raised as :class:`CommandProcessError` so the lifecycle reports it.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from cmdkit.domain.errors import CommandProcessError

if TYPE_CHECKING:
    from cmdkit.commands.log import CommandLog

logger = logging.getLogger(__name__)

# Exit code reported when the program cannot be started at all.
NOT_FOUND_CODE = 127


@dataclass(frozen=True)
class ProcessResult:
    code: int

    @property
    def success(self) -> bool:
        return self.code == 0


def run_command_with_logs(
    argv: Sequence[str],
    log: CommandLog,
    *,
    prefix: str = "",
    cwd: Path | str | None = None,
    check: bool = True,
) -> ProcessResult:
    """Run *argv*, wait for it and relay its output line by line.

    Raises:
        CommandProcessError: the process failed and *check* is set.
    """
    command = list(argv)
    logger.debug("Running %s", command)
    try:
        completed = subprocess.run(command, cwd=cwd, capture_output=True, text=True, check=False)
    except OSError as exc:
        log.error(f"{prefix}{exc}")
        code = NOT_FOUND_CODE
    else:
        for line in completed.stdout.splitlines():
            log.info(f"{prefix}{line}")
        for line in completed.stderr.splitlines():
            log.error(f"{prefix}{line}")
        code = completed.returncode

    result = ProcessResult(code=code)
    if not result.success:
        log.error(f"❌ {command[0] if command else 'process'} failed with exit code {code}")
        if check:
            raise CommandProcessError(command, code)
    return result
