import os
import logging
from typing import Dict, Optional, Tuple

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)

from .errors import WatchError
from .events import FileChange, Op, WatchFailure
from .utils import is_within, same_path


OPS: Dict[str, Op] = {
    EVENT_TYPE_CREATED: Op.CREATE,
    EVENT_TYPE_MODIFIED: Op.WRITE,
    EVENT_TYPE_DELETED: Op.REMOVE,
}

Signature = Tuple[int, int]


def event_path(raw) -> str:
    """Decode a watchdog path and clean it the way the user spelled the directory."""
    return os.path.normpath(os.fsdecode(raw))


def content_signature(path: str) -> Optional[Signature]:
    try:
        st = os.stat(path)
    except OSError:
        return None
    return st.st_mtime_ns, st.st_size


class ChangeForwarder(FileSystemEventHandler):
    """Turns watchdog events into inbox messages.

    Runs on the observer thread, so it never touches the child process; the
    dispatcher decides what to do with every message.

    watchdog reports attribute changes (chmod, chown) as ``modified``. A
    ``(mtime_ns, size)`` signature per entry tells those apart from writes:
    a ``modified`` event that leaves the signature unchanged is a ``CHMOD``.
    """

    def __init__(self, watch_dir: str, inbox) -> None:
        super().__init__()
        self.watch_dir = watch_dir
        self.inbox = inbox
        self._signatures: Dict[str, Signature] = {}
        self._scan()

    def _scan(self) -> None:
        try:
            entries = list(os.scandir(self.watch_dir))
        except OSError:
            # Scheduling the observer reports an unwatchable directory
            return
        for entry in entries:
            path = event_path(entry.path)
            signature = content_signature(path)
            if signature is not None:
                self._signatures[path] = signature

    def _remember(self, path: str) -> None:
        signature = content_signature(path)
        if signature is None:
            self._signatures.pop(path, None)
        else:
            self._signatures[path] = signature

    def _modified_op(self, path: str) -> Op:
        signature = content_signature(path)
        if signature is None:
            # Gone already; cannot prove it was only an attribute change
            self._signatures.pop(path, None)
            return Op.WRITE
        previous = self._signatures.get(path)
        self._signatures[path] = signature
        if previous == signature:
            return Op.CHMOD
        return Op.WRITE

    def on_any_event(self, event: FileSystemEvent) -> None:
        src = event_path(event.src_path)

        # The watched directory itself: parent "modified" noise, or its removal
        if same_path(src, self.watch_dir):
            if event.event_type == EVENT_TYPE_DELETED:
                self.inbox.put(
                    WatchFailure(WatchError(f"Watched directory was removed: {src}"))
                )
            return

        if event.event_type == EVENT_TYPE_MOVED:
            self._signatures.pop(src, None)
            self.inbox.put(FileChange(src, Op.RENAME))
            raw_dest = getattr(event, "dest_path", "") or ""
            if raw_dest:
                dest = event_path(raw_dest)
                if is_within(dest, self.watch_dir):
                    self._remember(dest)
                    self.inbox.put(FileChange(dest, Op.CREATE))
            return

        if event.event_type == EVENT_TYPE_MODIFIED:
            op = self._modified_op(src)
        else:
            op = OPS.get(event.event_type, Op.OTHER)
            if op is Op.CREATE:
                self._remember(src)
            elif op is Op.REMOVE:
                self._signatures.pop(src, None)

        logging.debug(f"{op.value}: {src}")
        self.inbox.put(FileChange(src, op))
