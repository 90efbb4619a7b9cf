import logging
import queue
import signal
import subprocess
import threading
from typing import Dict, Optional

from .config import Config
from .errors import WatchError
from .events import RESTART_OPS, FileChange, Message, Shutdown, WatchFailure
from .process import ProcessSupervisor
from .utils import clear_screen


SHUTDOWN_SIGNALS = [signal.SIGINT, signal.SIGTERM]
if hasattr(signal, "SIGQUIT"):
    SHUTDOWN_SIGNALS.append(signal.SIGQUIT)


class Dispatcher:
    """The control loop: one inbox, one current child process.

    Filesystem changes, watcher failures and termination signals all arrive
    as messages on ``inbox``. Only :meth:`run` (on the main thread) reads the
    inbox or touches ``current``, so messages are handled strictly one at a
    time in the order they were delivered.
    """

    def __init__(
        self,
        config: Config,
        supervisor: Optional[ProcessSupervisor] = None,
        inbox: Optional["queue.SimpleQueue[Message]"] = None,
    ) -> None:
        self.config = config
        self.supervisor = supervisor or ProcessSupervisor()
        self.inbox = inbox if inbox is not None else queue.SimpleQueue()
        self.current: Optional[subprocess.Popen] = None
        self._previous_handlers: Dict[int, object] = {}
        self._previous_excepthook = None

    def install(self) -> None:
        """Route termination signals and watcher thread crashes to the inbox."""
        for signum in SHUTDOWN_SIGNALS:
            self._previous_handlers[signum] = signal.signal(signum, self._on_signal)
        self._previous_excepthook = threading.excepthook
        threading.excepthook = self._on_thread_error

    def uninstall(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers = {}
        if self._previous_excepthook is not None:
            threading.excepthook = self._previous_excepthook
            self._previous_excepthook = None

    def _on_signal(self, signum, frame) -> None:
        # SimpleQueue.put is reentrant, so this is safe inside a signal handler
        self.inbox.put(Shutdown(signum))

    def _on_thread_error(self, args: threading.ExceptHookArgs) -> None:
        if issubclass(args.exc_type, SystemExit):
            return
        name = args.thread.name if args.thread is not None else "unknown"
        error = args.exc_value or args.exc_type()
        self.inbox.put(WatchFailure(WatchError(f"Watcher thread {name} failed: {error}")))

    def start(self) -> None:
        self.current = self.supervisor.start(self.config.command, self.config.cwd)

    def restart(self) -> None:
        self.supervisor.kill(self.current)
        clear_screen()
        self.start()

    def handle(self, message: Message) -> Optional[int]:
        """Handle one message; return an exit status once the loop should stop."""
        if isinstance(message, FileChange):
            if message.op in RESTART_OPS and self.config.pattern.search(message.path):
                logging.info(f"{message.op.value}: {message.path}, restarting")
                self.restart()
            return None

        if isinstance(message, WatchFailure):
            if isinstance(message.error, WatchError):
                raise message.error
            raise WatchError(str(message.error)) from message.error

        if isinstance(message, Shutdown):
            # The current child is left alone; it goes down with the session
            logging.info(f"Received signal {message.signum}, exiting")
            clear_screen()
            return 0

        raise TypeError(f"Unexpected message: {message!r}")

    def run(self) -> int:
        while True:
            status = self.handle(self.inbox.get())
            if status is not None:
                return status
