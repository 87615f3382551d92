"""Utility functions for running the nordvpn CLI."""

from dataclasses import dataclass
import subprocess
from typing import Callable, Optional

from .exceptions import BadEncoding, CommandTimeout, IoError
from ..logging_utility import logger


@dataclass
class CommandResult:
    """Outcome of one finished command."""
    command: list[str]
    returncode: int
    stdout: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


# Anything that turns an argv into a CommandResult can stand in for run_command.
CommandRunner = Callable[[list[str]], CommandResult]


def run_command(cmd: list[str], timeout: Optional[float] = None) -> CommandResult:
    """
    Run a command to completion and return its decoded output.

    Args:
        cmd: Command as list of strings
        timeout: Seconds to wait before killing the process, None waits forever

    Returns:
        CommandResult with exit status and UTF-8 decoded stdout

    Raises:
        IoError: the process could not be spawned
        CommandTimeout: the process did not finish within timeout
        BadEncoding: stdout is not valid UTF-8
    """
    logger.info(f"Running command: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, timeout=timeout, check=False)
    except subprocess.TimeoutExpired:
        logger.error(f"Command timed out after {timeout}s: {' '.join(cmd)}")
        raise CommandTimeout(cmd)
    except OSError as e:
        logger.error(f"Could not start command {' '.join(cmd)}: {e}")
        raise IoError(cmd, f"unable to create command ({e})")

    try:
        stdout = result.stdout.decode("utf-8")
    except UnicodeDecodeError:
        logger.error(f"Command produced non UTF-8 output: {' '.join(cmd)}")
        raise BadEncoding(cmd)

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        logger.warning(f"Command exited with {result.returncode}: {' '.join(cmd)}\n{stderr}")

    return CommandResult(command=list(cmd), returncode=result.returncode, stdout=stdout)
