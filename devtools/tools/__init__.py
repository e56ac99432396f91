from .files import read_file, write_file, edit_file, multi_edit, glob_files, grep_files, list_directory
from .shell import run_bash
from .notebook import notebook_read, notebook_edit
from .web import web_fetch, web_search
from .tasks import todo_write, task, exit_plan_mode
from .guidance import get_tool_guidance, get_workflow_guidance, get_error_help, get_quick_start

__all__ = [
    "read_file", "write_file", "edit_file", "multi_edit", "glob_files", "grep_files", "list_directory",
    "run_bash",
    "notebook_read", "notebook_edit",
    "web_fetch", "web_search",
    "todo_write", "task", "exit_plan_mode",
    "get_tool_guidance", "get_workflow_guidance", "get_error_help", "get_quick_start",
]
