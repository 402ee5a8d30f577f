from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, List, Tuple

import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class Recorder:
    """Listener that keeps the arguments of every call."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Any, ...]] = []

    def __call__(self, *args: Any) -> None:
        self.calls.append(args)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def emitter_logs(caplog):
    """Capture DEBUG records of every emitter logger."""

    import podium_events  # noqa: F401  module loggers exist once imported

    caplog.set_level(logging.DEBUG)
    for name in list(logging.root.manager.loggerDict):
        if name.startswith("podium_events"):
            caplog.set_level(logging.DEBUG, logger=name)
    return caplog


def pytest_collection_modifyitems(config, items):
    """Mark tests 'unit' unless they carry another marker."""
    for item in items:
        marks = {m.name for m in item.iter_markers()}
        if not ("integ" in marks or "unit" in marks):
            item.add_marker(pytest.mark.unit)
