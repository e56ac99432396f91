"""devtools-mcp — developer tools MCP server.

Run:   uv run python -m devtools.server
Test:  uv run mcp dev devtools/server.py
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from mcp.server.fastmcp import Context, FastMCP

from devtools.core import SERVER_INSTRUCTIONS, SERVER_NAME, setup_logging
from devtools.tools.files import (
    edit_file,
    glob_files,
    grep_files,
    list_directory,
    multi_edit,
    read_file,
    write_file,
)
from devtools.tools.guidance import (
    get_error_help,
    get_quick_start,
    get_tool_guidance,
    get_workflow_guidance,
)
from devtools.tools.notebook import notebook_edit, notebook_read
from devtools.tools.shell import run_bash
from devtools.tools.tasks import TodoItem, TodoStore, exit_plan_mode, task, todo_write
from devtools.tools.web import web_fetch, web_search

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    todos: TodoStore = field(default_factory=TodoStore)


@asynccontextmanager
async def session_lifespan(server: FastMCP):
    logger.info("Session started")
    try:
        yield SessionState()
    finally:
        logger.info("Session ended")


mcp = FastMCP(
    name=SERVER_NAME,
    instructions=SERVER_INSTRUCTIONS,
    lifespan=session_lifespan,
)

# Register tools under their catalog names
TOOLS = {
    "Read": read_file,
    "Write": write_file,
    "Edit": edit_file,
    "MultiEdit": multi_edit,
    "Glob": glob_files,
    "Grep": grep_files,
    "LS": list_directory,
    "Bash": run_bash,
    "NotebookRead": notebook_read,
    "NotebookEdit": notebook_edit,
    "WebFetch": web_fetch,
    "WebSearch": web_search,
    "Task": task,
    "exit_plan_mode": exit_plan_mode,
    "GetToolGuidance": get_tool_guidance,
    "GetWorkflowGuidance": get_workflow_guidance,
    "GetErrorHelp": get_error_help,
    "GetQuickStart": get_quick_start,
}

for _name, _fn in TOOLS.items():
    mcp.tool(name=_name)(_fn)


@mcp.tool(name="TodoWrite", description=todo_write.__doc__)
def todo_write_tool(todos: list[TodoItem], ctx: Context) -> str:
    return todo_write(todos, ctx.request_context.lifespan_context.todos)


def main():
    setup_logging()
    logger.info(f"Starting {SERVER_NAME} with {len(TOOLS) + 1} tools")
    mcp.run()


if __name__ == "__main__":
    main()
