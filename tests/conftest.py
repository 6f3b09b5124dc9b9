from pathlib import Path
from typing import Iterable, List

import pytest

from fedora_setup.logging.log import LogSink, Severity


class ScriptedInput:
    """Stand-in for ``input()`` that replays a fixed list of answers."""

    def __init__(self, answers: Iterable[str]):
        self.answers: List[str] = list(answers)
        self.reads = 0

    def __call__(self) -> str:
        if not self.answers:
            raise EOFError
        self.reads += 1
        return self.answers.pop(0)


def messages(sink: LogSink, severity: Severity = None) -> List[str]:
    return [e.message for e in sink.entries if severity is None or e.severity is severity]


@pytest.fixture
def sink(tmp_path: Path):
    s = LogSink(tmp_path / "logs", prefix="test", console=False)
    s.open("20260101_120000")
    yield s
    s.close()
