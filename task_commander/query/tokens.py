"""Tokenizer for the task filter query language."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from task_commander.exceptions import QueryLexError

logger = logging.getLogger(__name__)


class TokenKind(enum.Enum):
    FIELD = "field"
    VALUE = "value"
    COLON = ":"
    GT = ">"
    LT = "<"
    EQ = "="
    NE = "!="
    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    LPAREN = "("
    RPAREN = ")"
    EOF = "EOF"


COMPARISON_KINDS: frozenset[TokenKind] = frozenset(
    {TokenKind.COLON, TokenKind.GT, TokenKind.LT, TokenKind.EQ, TokenKind.NE}
)

_SINGLE_CHAR: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ":": TokenKind.COLON,
    ">": TokenKind.GT,
    "<": TokenKind.LT,
    "=": TokenKind.EQ,
}

_KEYWORDS: dict[str, TokenKind] = {
    "AND": TokenKind.AND,
    "OR": TokenKind.OR,
    "NOT": TokenKind.NOT,
}

# Characters that end a bare word. "!" is included so a lone "!" is a lex error
_WORD_BREAK = frozenset("():><=!")

_QUOTE = '"'


@dataclass(frozen=True)
class Token:
    """A lexical token and its offset in the query string."""

    kind: TokenKind
    text: str
    offset: int

    def __str__(self) -> str:
        if self.kind is TokenKind.FIELD:
            return f"FIELD({self.text})"
        if self.kind is TokenKind.VALUE:
            return f"VALUE({self.text})"
        return self.kind.value


def tokenize(query: str) -> list[Token]:
    """Split *query* into tokens, ending with an EOF token.

    Bare words become keywords (``AND``/``OR``/``NOT``, any case) unless they
    directly follow a comparison operator, in which case they are values.
    Other words are fields. Double-quoted words are never keywords.

    Raises:
        QueryLexError: On a character that cannot start a token, or an
            unterminated quoted string.
    """
    tokens: list[Token] = []
    pos = 0
    length = len(query)

    while pos < length:
        char = query[pos]

        if char.isspace():
            pos += 1
            continue

        if char in _SINGLE_CHAR:
            tokens.append(Token(_SINGLE_CHAR[char], char, pos))
            pos += 1
            continue

        if char == "!" and query.startswith("!=", pos):
            tokens.append(Token(TokenKind.NE, "!=", pos))
            pos += 2
            continue

        after_operator = bool(tokens) and tokens[-1].kind in COMPARISON_KINDS
        word_kind = TokenKind.VALUE if after_operator else TokenKind.FIELD

        if char == _QUOTE:
            word, pos_end = _read_quoted(query, pos)
            tokens.append(Token(word_kind, word, pos))
            pos = pos_end
            continue

        start = pos
        while pos < length and not query[pos].isspace() and query[pos] not in _WORD_BREAK:
            pos += 1

        if pos == start:
            raise QueryLexError(char, pos)

        word = query[start:pos]
        keyword = _KEYWORDS.get(word.upper())
        if keyword is not None and not after_operator:
            tokens.append(Token(keyword, word, start))
        else:
            tokens.append(Token(word_kind, word, start))

    tokens.append(Token(TokenKind.EOF, "", pos))
    logger.debug("Tokenized %r into %d tokens", query, len(tokens))
    return tokens


def _read_quoted(query: str, start: int) -> tuple[str, int]:
    """Read a double-quoted word starting at *start*.

    Returns the unescaped text and the offset just past the closing quote.
    """
    chars: list[str] = []
    pos = start + 1
    while pos < len(query):
        char = query[pos]
        if char == "\\" and pos + 1 < len(query) and query[pos + 1] in (_QUOTE, "\\"):
            chars.append(query[pos + 1])
            pos += 2
            continue
        if char == _QUOTE:
            return "".join(chars), pos + 1
        chars.append(char)
        pos += 1
    raise QueryLexError(_QUOTE, start, "unterminated quoted string")
