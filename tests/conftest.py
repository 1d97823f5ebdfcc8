from __future__ import annotations

from typing import Any, Iterator

import pytest
from loguru import logger


@pytest.fixture()
def log_records() -> Iterator[list[dict[str, Any]]]:
    """Collect loguru records (level, message, bound extra) emitted during the test."""
    records: list[dict[str, Any]] = []

    def sink(message: Any) -> None:
        record = message.record
        records.append(
            {
                "level": record["level"].name,
                "message": record["message"],
                "extra": dict(record["extra"]),
            }
        )

    handler_id = logger.add(sink, level="DEBUG")
    try:
        yield records
    finally:
        logger.remove(handler_id)


class SignalRecorder:
    """Replaces signal.signal/getsignal; remembers every install in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[int, Any]] = []

    def signal(self, sig: int, handler: Any) -> Any:
        self.calls.append((sig, handler))
        return None

    def getsignal(self, sig: int) -> Any:
        return "previous-handler"

    def installed(self, sig: int) -> Any:
        """The most recently installed callable handler for sig."""
        return [h for s, h in self.calls if s == sig and callable(h)][-1]

    def current(self, sig: int) -> Any:
        return [h for s, h in self.calls if s == sig][-1]


@pytest.fixture()
def signal_recorder(monkeypatch) -> SignalRecorder:
    import signal

    recorder = SignalRecorder()
    monkeypatch.setattr(signal, "signal", recorder.signal)
    monkeypatch.setattr(signal, "getsignal", recorder.getsignal)
    return recorder
