"""Recursive-descent parser for the task filter query language.

Grammar, loosest binding first::

    expression := term (OR term)*
    term       := factor (AND factor)*
    factor     := NOT factor | "(" expression ")" | comparison
    comparison := FIELD (":" | ">" | "<" | "=" | "!=") VALUE
"""

from __future__ import annotations

import logging

from task_commander.exceptions import QueryParseError
from task_commander.query.ast_nodes import BooleanOp, Comparison, Node
from task_commander.query.tokens import COMPARISON_KINDS, Token, TokenKind, tokenize

logger = logging.getLogger(__name__)


class _Parser:
    """Consumes a token list produced by :func:`tokenize`."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    @property
    def current(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self.current
        if token.kind is not TokenKind.EOF:
            self._pos += 1
        return token

    def _match(self, kind: TokenKind) -> bool:
        if self.current.kind is kind:
            self._advance()
            return True
        return False

    def _fail(self, message: str) -> QueryParseError:
        token = self.current
        return QueryParseError(message, token.offset, str(token))

    def parse(self) -> Node:
        node = self.expression()
        if self.current.kind is not TokenKind.EOF:
            raise self._fail("unexpected token")
        return node

    def expression(self) -> Node:
        node = self.term()
        while self._match(TokenKind.OR):
            node = BooleanOp("OR", node, self.term())
        return node

    def term(self) -> Node:
        node = self.factor()
        while self._match(TokenKind.AND):
            node = BooleanOp("AND", node, self.factor())
        return node

    def factor(self) -> Node:
        if self._match(TokenKind.NOT):
            return BooleanOp("NOT", self.factor())

        if self._match(TokenKind.LPAREN):
            node = self.expression()
            if not self._match(TokenKind.RPAREN):
                raise self._fail("expected )")
            return node

        return self.comparison()

    def comparison(self) -> Comparison:
        if self.current.kind is not TokenKind.FIELD:
            raise self._fail("expected field name")
        field = self._advance()

        if self.current.kind not in COMPARISON_KINDS:
            raise self._fail("expected operator (:, >, <, =, !=)")
        operator = self._advance()

        if self.current.kind is not TokenKind.VALUE:
            raise self._fail("expected value")
        value = self._advance()

        return Comparison(field.text, operator.kind.value, value.text)


def parse_query(query_string: str) -> Node:
    """Parse a filter query string into an AST.

    Args:
        query_string: The query to parse, e.g. ``status:open AND priority:p1``.

    Returns:
        The root node of the parsed query.

    Raises:
        QueryLexError: If the query contains an unlexable character.
        QueryParseError: If the tokens do not form a complete query.
    """
    tokens = tokenize(query_string)
    node = _Parser(tokens).parse()
    logger.debug("Parsed query %r as %s", query_string, node)
    return node
