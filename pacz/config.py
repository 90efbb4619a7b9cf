import re
from typing import List, NamedTuple, Pattern, Sequence, Tuple

from .errors import UsageError


USAGE = (
    "Usage: pacz [-d <directory>] [-f <filename-regex>] "
    "[-w <command-cwd>] -- <command>"
)
TERMINATOR = "--"


class Config(NamedTuple):
    pattern: Pattern[str]
    watch_dir: str
    cwd: str
    command: Tuple[str, ...]


def _value_after(args: Sequence[str], i: int, message: str) -> str:
    if i == len(args) - 1:
        raise UsageError(message)
    return args[i + 1]


def parse_args(argv: Sequence[str]) -> Config:
    """Scan ``argv`` (program name excluded) into a :class:`Config`.

    Flags are matched by prefix and always take the next argument as their
    value. Everything after ``--`` is the command, verbatim.
    """
    args: List[str] = list(argv)
    pattern = re.compile(".*")
    watch_dir = "."
    cwd = "."
    command: Tuple[str, ...] = ()

    i = 0
    while i < len(args):
        arg = args[i]
        if arg.startswith("-f"):
            raw = _value_after(args, i, "Expected filename regex to follow -f flag")
            try:
                pattern = re.compile(raw)
            except re.error as e:
                raise UsageError(f"Invalid filename regex {raw!r}: {e}")
            i += 2
        elif arg.startswith("-d"):
            watch_dir = _value_after(args, i, "Expected directory to follow -d flag")
            i += 2
        elif arg.startswith("-w"):
            cwd = _value_after(args, i, "Expected directory to follow -w flag")
            i += 2
        elif arg == TERMINATOR:
            _value_after(args, i, "Expected command to run to follow --")
            command = tuple(args[i + 1 :])
            break
        else:
            i += 1

    if not command:
        raise UsageError(USAGE)

    return Config(pattern=pattern, watch_dir=watch_dir, cwd=cwd, command=command)
