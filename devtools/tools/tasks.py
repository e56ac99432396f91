"""Task tools — session todo list, task delegation stub, plan-mode exit.

The todo list lives in a TodoStore owned by the server session (see
devtools.server); each TodoWrite replaces its contents wholesale.
"""

import logging
import uuid
from collections import Counter
from typing import Annotated, Literal

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

STATUSES = ("pending", "in_progress", "completed")


class TodoItem(BaseModel):
    id: str
    content: str = Field(min_length=1)
    status: Literal["pending", "in_progress", "completed"]
    priority: Literal["high", "medium", "low"]


class TodoStore:
    """Current todo list for one session."""

    def __init__(self):
        self._todos: tuple[TodoItem, ...] = ()

    @property
    def todos(self) -> tuple[TodoItem, ...]:
        return self._todos

    def replace(self, todos) -> None:
        self._todos = tuple(todos)

    def summary(self) -> dict:
        counts = Counter(todo.status for todo in self._todos)
        return {"total": len(self._todos), **{status: counts[status] for status in STATUSES}}


def todo_write(todos: list[TodoItem], store: TodoStore) -> str:
    """Use this tool to create and manage a structured task list for your current coding session."""
    store.replace(todos)
    s = store.summary()
    logger.info(f"Todo list updated: {s}")
    return (
        "Todos have been modified successfully. Ensure that you continue to use the todo list "
        "to track your progress. Please proceed with the current tasks if applicable\n\n"
        f"Summary: {s['total']} total tasks ({s['pending']} pending, "
        f"{s['in_progress']} in progress, {s['completed']} completed)"
    )


def task(
    description: Annotated[str, Field(description="A short (3-5 word) description of the task")],
    prompt: Annotated[str, Field(description="The task for the agent to perform")],
) -> str:
    """Launch a new agent that has access to various tools for autonomous task execution.

    Placeholder: the task is recorded and given an id, but no agent is started.
    """
    task_id = str(uuid.uuid4())
    logger.info(f"Task {task_id} queued: {description}")
    return (
        f'Task "{description}" (ID: {task_id}) has been queued for execution.\n\n'
        f"Prompt: {prompt}\n\n"
        "Note: no autonomous agent is available in this server. "
        "The task details are recorded only."
    )


def exit_plan_mode(
    plan: Annotated[str, Field(description="The plan you came up with, that you want to run by the user for approval. Supports markdown.")],
) -> str:
    """Use this tool when you are in plan mode and have finished presenting your plan and are ready to code."""
    return (
        f"Exiting plan mode. Here's the plan for approval:\n\n{plan}\n\n"
        "Ready to begin implementation when you give the go-ahead."
    )
