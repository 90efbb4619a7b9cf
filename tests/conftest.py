import sys

import mock
import pytest

from pacz.config import parse_args


posix_only = pytest.mark.skipif(
    sys.platform == "win32", reason="Requires POSIX signals"
)


@pytest.fixture
def config(tmp_path):
    return parse_args(["-d", str(tmp_path), "--", "app", "--serve"])


@pytest.fixture
def supervisor():
    from pacz.process import ProcessSupervisor

    fake = mock.Mock(spec=ProcessSupervisor)
    fake.start.side_effect = lambda command, cwd: mock.Mock(name="process")
    return fake
