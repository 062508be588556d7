import pytest

from display import RecordingDisplay
from interpreter import Interpreter
from parser import parse


@pytest.fixture
def make_interpreter():
    def _make(source, limits=None):
        display = RecordingDisplay()
        return Interpreter(parse(source, limits), display, limits), display
    return _make


@pytest.fixture
def run_source(make_interpreter):
    def _run(source, limits=None):
        interpreter, display = make_interpreter(source, limits)
        interpreter.run()
        return interpreter, display
    return _run
