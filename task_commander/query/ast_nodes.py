"""AST data classes for parsed filter queries.

A query is either a single :class:`Comparison` or a :class:`BooleanOp`
combining other nodes. Nodes are frozen, so one parsed query can be
evaluated against any number of tasks.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Literal, TypeAlias

if TYPE_CHECKING:
    from task_commander.config import Config
    from task_commander.models import Task

Operator = Literal[":", ">", "<", "=", "!="]
BoolOperator = Literal["AND", "OR", "NOT"]


@dataclass(frozen=True)
class Comparison:
    """A field comparison like ``status:open`` or ``estimate>3``."""

    field: str
    operator: Operator
    value: str

    def __str__(self) -> str:
        return f"{self.field}{self.operator}{self.value}"

    def evaluate(self, task: Task, config: Config, today: date | None = None) -> bool:
        from task_commander.query.evaluator import evaluate

        return evaluate(self, task, config, today=today)


@dataclass(frozen=True)
class BooleanOp:
    """``AND``/``OR`` of two nodes, or ``NOT`` of ``left`` (``right`` is None)."""

    op: BoolOperator
    left: Node
    right: Node | None = None

    def __str__(self) -> str:
        if self.op == "NOT":
            return f"NOT {self.left}"
        return f"({self.left} {self.op} {self.right})"

    def evaluate(self, task: Task, config: Config, today: date | None = None) -> bool:
        from task_commander.query.evaluator import evaluate

        return evaluate(self, task, config, today=today)


Node: TypeAlias = Comparison | BooleanOp
