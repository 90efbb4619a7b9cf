import enum
from typing import NamedTuple, Union


class Op(enum.Enum):
    CREATE = "create"
    WRITE = "write"
    REMOVE = "remove"
    RENAME = "rename"
    CHMOD = "chmod"
    OTHER = "other"


# Operation kinds that trigger a restart; renames only count through the
# create reported for the new name.
RESTART_OPS = frozenset({Op.CREATE, Op.WRITE, Op.REMOVE})


class FileChange(NamedTuple):
    path: str
    op: Op


class WatchFailure(NamedTuple):
    error: BaseException


class Shutdown(NamedTuple):
    signum: int


Message = Union[FileChange, WatchFailure, Shutdown]
