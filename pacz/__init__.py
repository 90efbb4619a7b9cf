"""pacz: rerun a command whenever files in a directory change.

Exports:
- app, main, run: Typer CLI entrypoints (from pacz.cli)
- Config, parse_args: command-line scanning (from pacz.config)
- Dispatcher: the restart loop (from pacz.dispatcher)
- ChangeForwarder: watchdog event handler (from pacz.handlers)
- ProcessSupervisor: child process start/kill (from pacz.process)
"""

from .cli import app, main, run  # noqa: F401
from .config import Config, parse_args  # noqa: F401
from .dispatcher import Dispatcher  # noqa: F401
from .handlers import ChangeForwarder  # noqa: F401
from .process import ProcessSupervisor  # noqa: F401

__all__ = [
    "app",
    "main",
    "run",
    "Config",
    "parse_args",
    "Dispatcher",
    "ChangeForwarder",
    "ProcessSupervisor",
]
