import sys
import logging
from typing import List, Optional

import typer
from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

from .config import Config, parse_args
from .dispatcher import Dispatcher
from .errors import PaczError, WatchError
from .handlers import ChangeForwarder
from .utils import clear_screen


app = typer.Typer(add_completion=False)


def watch(config: Config, use_polling: bool = False) -> int:
    """Run the command, restart it on matching changes, return the exit status."""
    dispatcher = Dispatcher(config)
    dispatcher.install()
    observer = PollingObserver() if use_polling else Observer()
    try:
        dispatcher.start()

        handler = ChangeForwarder(config.watch_dir, dispatcher.inbox)
        try:
            observer.schedule(handler, config.watch_dir, recursive=False)
            observer.start()
        except OSError as e:
            raise WatchError(f"Unable to watch {config.watch_dir}: {e}")
        logging.info(
            f"Watching: {config.watch_dir} ({'Polling' if use_polling else 'Native'})"
        )

        clear_screen()
        return dispatcher.run()
    finally:
        if observer.is_alive():
            observer.stop()
            observer.join()
        dispatcher.uninstall()


@app.command()
def main(
    args: Optional[List[str]] = typer.Argument(None),
    loglevel: str = typer.Option(
        "WARNING",
        "--loglevel",
        envvar="PACZ_LOGLEVEL",
        hidden=True,
    ),
    use_polling: bool = typer.Option(
        False,
        "--poll/--no-poll",
        envvar="PACZ_POLL",
        hidden=True,
    ),
):
    """Rerun a command whenever a file in a directory changes."""
    logging.basicConfig(
        level=getattr(logging, loglevel.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        config = parse_args(args or [])
        status = watch(config, use_polling)
    except PaczError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    raise typer.Exit(code=status)


def run(argv: Optional[List[str]] = None) -> None:
    # The leading "--" hands every argument, the user's own "--" included,
    # to parse_args untouched.
    argv = sys.argv[1:] if argv is None else argv
    app(args=["--", *argv], prog_name="pacz")


if __name__ == "__main__":
    run()
