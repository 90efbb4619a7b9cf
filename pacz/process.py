import logging
import subprocess
from typing import Optional, Sequence

from .errors import SpawnError


class ProcessSupervisor:
    """Starts the watched command and kills it again, one child at a time.

    The caller owns the handle; the supervisor keeps no state of its own.
    """

    def start(self, command: Sequence[str], cwd: str) -> subprocess.Popen:
        # stdout/stderr are inherited so the child's output shows up live
        try:
            process = subprocess.Popen(list(command), cwd=cwd)
        except OSError as e:
            raise SpawnError(f"Error starting command: {e}")
        logging.info(f"Started {' '.join(command)} (pid {process.pid}) in {cwd}")
        return process

    def kill(self, process: Optional[subprocess.Popen]) -> None:
        if process is None:
            return
        # Fire and forget: the replacement may start before this one is gone
        try:
            process.kill()
        except ProcessLookupError:
            logging.debug(f"Process {process.pid} already exited")
            return
        logging.info(f"Killed pid {process.pid}")
