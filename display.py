import logging
import sys
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class DisplaySink:
    """
    Superfície de saída usada pelo comando `print`.

    O interpretador só conhece `render(row, col, text)`; falhas de desenho são
    problema de quem implementa a superfície.
    """
    def render(self, row, col, text):
        raise NotImplementedError


@dataclass(frozen=True)
class Render:
    row: int
    col: int
    text: str


class RecordingDisplay(DisplaySink):
    def __init__(self):
        self.calls = []

    def render(self, row, col, text):
        self.calls.append(Render(row, col, text))


class TranscriptDisplay(DisplaySink):
    """Saída sequencial em texto puro, uma linha `row col text` por chamada."""
    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdout

    def render(self, row, col, text):
        self.stream.write(f"{row} {col} {text}\n")


class GridDisplay(DisplaySink):
    """Grade de caracteres em memória. O que cai fora da grade é descartado."""
    def __init__(self, rows=24, cols=80):
        self.rows = rows
        self.cols = cols
        self.cells = [[' '] * cols for _ in range(rows)]

    def render(self, row, col, text):
        if not 0 <= row < self.rows or col >= self.cols:
            logger.debug("render at (%d, %d) is outside the %dx%d grid", row, col, self.rows, self.cols)
            return
        for offset, char in enumerate(text):
            x = col + offset
            if 0 <= x < self.cols:
                self.cells[row][x] = char

    def lines(self):
        return [''.join(cells).rstrip() for cells in self.cells]

    def __str__(self):
        return '\n'.join(self.lines()).rstrip('\n')


class CursesDisplay(DisplaySink):
    """Superfície interativa sobre uma janela do curses."""
    def __init__(self, window):
        self.window = window

    def render(self, row, col, text):
        import curses
        try:
            self.window.addstr(row, col, text)
        except (curses.error, ValueError, OverflowError) as e:
            # mvprintw também ignora coordenadas fora da janela
            logger.debug("curses could not draw %r at (%d, %d): %s", text, row, col, e)
        self.window.refresh()

    def wait_for_quit(self, key='q'):
        self.window.timeout(-1)
        while self.window.getch() != ord(key):
            pass
