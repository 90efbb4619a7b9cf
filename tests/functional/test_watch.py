import os
import queue
import time

import pytest
from watchdog.observers import Observer

from pacz.config import parse_args
from pacz.dispatcher import Dispatcher
from pacz.events import FileChange
from pacz.handlers import ChangeForwarder


MAX_TIMEOUT = 5.0


@pytest.fixture
def observe():
    observers = []

    def factory(watch_dir):
        inbox = queue.SimpleQueue()
        observer = Observer()
        observer.schedule(ChangeForwarder(watch_dir, inbox), watch_dir, recursive=False)
        observer.start()
        observers.append(observer)
        return inbox

    yield factory
    for observer in observers:
        observer.stop()
        observer.join()


def collect_until(inbox, predicate, timeout=MAX_TIMEOUT):
    messages = []
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            message = inbox.get(timeout=0.1)
        except queue.Empty:
            continue
        messages.append(message)
        if predicate(message):
            break
    return messages


def feed(config, supervisor, messages):
    dispatcher = Dispatcher(config, supervisor=supervisor)
    dispatcher.start()
    for message in messages:
        dispatcher.handle(message)


def test_chmod_does_not_restart(tmp_path, observe, supervisor):
    target = tmp_path / "main.go"
    target.write_text("package main\n")
    marker = tmp_path / "marker.txt"
    inbox = observe(str(tmp_path))

    os.chmod(str(target), 0o600)
    # Anything the chmod produced is delivered before the marker's create
    marker.write_text("done")
    messages = collect_until(
        inbox,
        lambda m: isinstance(m, FileChange) and m.path == str(marker),
    )

    assert any(isinstance(m, FileChange) and m.path == str(marker) for m in messages)
    config = parse_args(["-f", r"main\.go$", "-d", str(tmp_path), "--", "app"])
    feed(config, supervisor, messages)
    assert supervisor.start.call_count == 1
    supervisor.kill.assert_not_called()


def test_write_restarts(tmp_path, observe, supervisor):
    target = tmp_path / "main.go"
    target.write_text("package main\n")
    inbox = observe(str(tmp_path))

    target.write_text("package main\n\nfunc main() {}\n")
    messages = collect_until(
        inbox,
        lambda m: isinstance(m, FileChange) and m.path == str(target),
    )

    config = parse_args(["-f", r"main\.go$", "-d", str(tmp_path), "--", "app"])
    feed(config, supervisor, messages)
    assert supervisor.start.call_count >= 2


def test_anchored_filter_matches_in_current_directory(
    tmp_path, monkeypatch, observe, supervisor
):
    monkeypatch.chdir(tmp_path)
    inbox = observe(".")

    (tmp_path / "main.go").write_text("package main\n")
    messages = collect_until(
        inbox,
        lambda m: isinstance(m, FileChange) and m.path == "main.go",
    )

    config = parse_args(["-f", r"^main\.go$", "--", "app"])
    feed(config, supervisor, messages)
    assert supervisor.start.call_count >= 2
