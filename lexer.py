from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    WORD = auto()
    NEWLINE = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    line: int
    column: int


class Lexer:
    """
    Quebra o texto do programa em palavras separadas por espaço em branco.

    A linguagem não tem aspas nem operadores: cada operando é uma palavra, e o
    significado de cada palavra só é decidido pelo Parser.
    """
    def __init__(self, source):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.current_char = self.source[0] if source else None

    def advance(self):
        if self.current_char == '\n':
            self.line += 1
            self.column = 0
        self.pos += 1
        self.column += 1
        if self.pos < len(self.source):
            self.current_char = self.source[self.pos]
        else:
            self.current_char = None

    def skip_whitespace(self):
        while self.current_char and self.current_char != '\n' and self.current_char.isspace():
            self.advance()

    def word(self):
        start_pos = self.pos
        while self.current_char and not self.current_char.isspace():
            self.advance()
        return self.source[start_pos:self.pos]

    def tokenize(self):
        tokens = []

        while self.current_char:
            start_line = self.line
            start_column = self.column

            if self.current_char == '\n':
                # Linhas em branco não geram NEWLINE repetidos
                if tokens and tokens[-1].type == TokenType.WORD:
                    tokens.append(Token(TokenType.NEWLINE, '\n', start_line, start_column))
                self.advance()
                continue

            if self.current_char.isspace():
                self.skip_whitespace()
                continue

            tokens.append(Token(TokenType.WORD, self.word(), start_line, start_column))

        if tokens and tokens[-1].type == TokenType.WORD:
            tokens.append(Token(TokenType.NEWLINE, '\n', self.line, self.column))
        tokens.append(Token(TokenType.EOF, '', self.line, self.column))
        return tokens
