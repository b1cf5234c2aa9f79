"""pytest global setup: make ``src/`` and the shared helpers importable."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest

_REPO_ROOT = Path(__file__).resolve().parent.parent
for _path in (_REPO_ROOT, _REPO_ROOT / "src"):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

from tests.executor_helpers import CallRecorder, RecordingLogger  # noqa: E402


@pytest.fixture
def event_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def messages() -> CallRecorder:
    return CallRecorder()
