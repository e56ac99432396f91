"""Guidance tools — static reference text about the other tools.

Lookups go through GUIDANCE, a read-only name -> GuidanceRecord mapping
built once from devtools.guidance_data.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Annotated, Literal, Optional

from pydantic import Field

from devtools.guidance_data import (
    COMMON_ERRORS,
    COMMON_WORKFLOWS,
    DECISION_MAKING,
    QUICK_STARTS,
    TOOL_GUIDANCE,
)

GUIDANCE_TYPES = {"all", "best_practices", "patterns", "examples", "security"}
WORKFLOW_TYPES = {"all", "common_workflows", "decision_making"}


@dataclass(frozen=True)
class GuidanceRecord:
    category: str
    best_practices: tuple = ()
    common_patterns: tuple = ()
    examples: tuple = ()  # (description, code) pairs
    security_notes: tuple = ()
    limitations: tuple = ()


def build_guidance_index(tables: dict) -> MappingProxyType:
    """Flatten ``{category: {tool: fields}}`` into ``{tool: GuidanceRecord}``."""
    index = {}
    for category, tools in tables.items():
        for name, fields in tools.items():
            if name in index:
                raise ValueError(f"Duplicate guidance for tool '{name}'")
            index[name] = GuidanceRecord(
                category=category,
                **{key: tuple(value) for key, value in fields.items()},
            )
    return MappingProxyType(index)


GUIDANCE = build_guidance_index(TOOL_GUIDANCE)


def _check(name, value, allowed):
    if value not in allowed:
        raise ValueError(f"Unknown {name} '{value}'. Use: {', '.join(sorted(allowed))}")


def _bullets(items, prefix="- ") -> str:
    return "".join(f"{prefix}{item}\n" for item in items)


def get_tool_guidance(
    tool_name: Annotated[str, Field(description='The name of the tool to get guidance for (e.g., "Read", "Edit", "Bash")')],
    guidance_type: Annotated[Literal["all", "best_practices", "patterns", "examples", "security"], Field(description="Type of guidance to retrieve (default: all)")] = "all",
) -> str:
    """Get comprehensive guidance on how to use specific tools effectively, including best practices, common patterns, and examples."""
    _check("guidance_type", guidance_type, GUIDANCE_TYPES)
    record = GUIDANCE.get(tool_name)
    if record is None:
        return f"No guidance found for tool: {tool_name}. Available tools: {', '.join(GUIDANCE)}"

    def wanted(kind):
        return guidance_type in ("all", kind)

    out = f"# {tool_name} Tool Guidance\n\n"
    if wanted("best_practices") and record.best_practices:
        out += "## Best Practices\n" + _bullets(record.best_practices) + "\n"
    if wanted("patterns") and record.common_patterns:
        out += "## Common Patterns\n" + _bullets(record.common_patterns) + "\n"
    if wanted("examples") and record.examples:
        out += "## Examples\n"
        for description, code in record.examples:
            out += f"**{description}:**\n```json\n{code}\n```\n\n"
    if wanted("security"):
        if record.security_notes:
            out += "## Security Notes\n" + _bullets(record.security_notes, "⚠️ ") + "\n"
        if record.limitations:
            out += "## Limitations\n" + _bullets(record.limitations) + "\n"
    return out


def _render_workflow(name, workflow, heading="###") -> str:
    return (
        f"{heading} {name}\n"
        f"**Use Case:** {workflow['example']}\n"
        f"**Steps:**\n" + "".join(f"{step}\n" for step in workflow["steps"])
    )


def get_workflow_guidance(
    workflow_type: Annotated[Literal["common_workflows", "decision_making", "all"], Field(description="Type of workflow guidance to retrieve")] = "all",
    specific_workflow: Annotated[Optional[str], Field(description='Specific workflow to get guidance for (e.g., "File Analysis", "Code Refactoring")')] = None,
) -> str:
    """Get guidance on common workflows and decision-making patterns for complex tasks."""
    _check("workflow_type", workflow_type, WORKFLOW_TYPES)
    out = "# Workflow Guidance\n\n"

    if specific_workflow:
        workflow = COMMON_WORKFLOWS.get(specific_workflow)
        if workflow is None:
            return (
                f'Workflow "{specific_workflow}" not found. '
                f"Available workflows: {', '.join(COMMON_WORKFLOWS)}"
            )
        return out + _render_workflow(specific_workflow, workflow, heading="##")

    if workflow_type in ("all", "common_workflows"):
        out += "## Common Workflows\n\n"
        for name, workflow in COMMON_WORKFLOWS.items():
            out += _render_workflow(name, workflow) + "\n"

    if workflow_type in ("all", "decision_making"):
        out += "## Decision Making Guidelines\n\n"
        for decision, conditions in DECISION_MAKING.items():
            out += f"### {decision}\n"
            for condition, items in conditions.items():
                out += f"**{condition}:**\n" + _bullets(items)
            out += "\n"
    return out


def match_error(error_message: str):
    """Return ``(name, record)`` for the first known error the message matches, else None."""
    lowered = error_message.lower()
    for name, info in COMMON_ERRORS.items():
        if name.lower() in lowered or info["error"].lower() in lowered:
            return name, info
        if re.search(info["pattern"], error_message, re.IGNORECASE):
            return name, info
    return None


def get_error_help(
    error_message: Annotated[Optional[str], Field(description="The error message you encountered")] = None,
    tool_name: Annotated[Optional[str], Field(description="The tool that generated the error (optional)")] = None,
) -> str:
    """Get help with common errors and troubleshooting guidance."""
    out = "# Error Help\n\n"

    if error_message:
        matched = match_error(error_message)
        if matched:
            name, info = matched
            out += f"## Identified Error: {name}\n\n"
            out += f"**Error Pattern:** {info['error']}\n\n"
            out += "**Solutions:**\n" + _bullets(info["solutions"]) + "\n"
        else:
            out += "## Error Analysis\n\n"
            out += f"**Your Error:** {error_message}\n\n"
            out += "**General Troubleshooting Steps:**\n"
            out += "1. Check the tool documentation with GetToolGuidance\n"
            out += "2. Verify file paths are absolute and correct\n"
            out += "3. Check file permissions and existence\n"
            out += "4. Review the exact parameters you're using\n"
            out += "5. Try a simpler version of the command first\n\n"

    if tool_name and tool_name in GUIDANCE:
        out += f"See GetToolGuidance with tool_name={tool_name!r} for {tool_name} usage.\n\n"

    out += "## All Common Errors\n\n"
    for name, info in COMMON_ERRORS.items():
        out += f"### {name}\n**Error:** {info['error']}\n**Solutions:**\n"
        out += _bullets(info["solutions"]) + "\n"
    return out


def get_quick_start(
    task_type: Annotated[Literal["file_operations", "code_analysis", "debugging", "project_setup", "general"], Field(description="Type of task you want to accomplish")] = "general",
) -> str:
    """Get a quick start guide for using the developer tools effectively."""
    _check("task_type", task_type, QUICK_STARTS.keys())
    guide = QUICK_STARTS[task_type]

    out = "# Quick Start Guide\n\n"
    out += f"## {guide['title']}\n\n"
    out += "### Steps\n" + "".join(f"{step}\n" for step in guide["steps"])
    out += "\n### Tips\n" + _bullets(guide["tips"], "💡 ")
    out += "\n### Need More Help?\n"
    out += "- Use **GetToolGuidance** for specific tool documentation\n"
    out += "- Use **GetWorkflowGuidance** for complex workflows\n"
    out += "- Use **GetErrorHelp** when you encounter errors\n"
    return out
