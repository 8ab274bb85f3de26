"""Filter query language: tokenizer, parser and evaluator."""

from task_commander.exceptions import QueryError, QueryLexError, QueryParseError
from task_commander.query.ast_nodes import BooleanOp, Comparison, Node
from task_commander.query.evaluator import evaluate, filter_tasks
from task_commander.query.parser import parse_query
from task_commander.query.tokens import Token, TokenKind, tokenize

__all__ = [
    "BooleanOp",
    "Comparison",
    "Node",
    "QueryError",
    "QueryLexError",
    "QueryParseError",
    "Token",
    "TokenKind",
    "evaluate",
    "filter_tasks",
    "parse_query",
    "tokenize",
]
