"""task-commander: filter queries and recurring tasks for plain-file task lists."""

__version__ = "0.3.0"
