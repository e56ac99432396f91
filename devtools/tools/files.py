"""File tools — Read, Write, Edit, MultiEdit, Glob, Grep, LS.

Edit and MultiEdit delegate to the replacement engine and only write the
file back when every replacement succeeded.
"""

import fnmatch
import glob
import logging
import os
import re
import stat
import tempfile
from pathlib import Path
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from devtools.core import READ_DEFAULT_LIMIT, READ_MAX_LINE_CHARS
from devtools.tools.replace import ReplacementSpec, apply_sequence, apply_single

logger = logging.getLogger(__name__)

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


class EditOperation(BaseModel):
    """One exact string replacement inside a MultiEdit call."""

    old_string: str = Field(description="The text to replace")
    new_string: str = Field(description="The text to replace it with")
    replace_all: bool = Field(default=False, description="Replace all occurrences of old_string (default false)")

    def to_spec(self) -> ReplacementSpec:
        return ReplacementSpec(self.old_string, self.new_string, self.replace_all)


def _read_exact(file_path: str) -> str:
    # newline="" keeps \r\n as-is so matches are byte-for-byte
    with open(file_path, encoding="utf-8", newline="") as f:
        return f.read()


def _default_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _write_atomic(file_path: str, content: str) -> None:
    """Write via a temp file in the same directory, then os.replace over the target."""
    directory = os.path.dirname(os.path.abspath(file_path))
    if os.path.exists(file_path):
        mode = stat.S_IMODE(os.stat(file_path).st_mode)
    else:
        mode = _default_mode()

    fd, tmp_path = tempfile.mkstemp(prefix=".tmp_edit_", dir=directory, text=True)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, file_path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def read_file(
    file_path: Annotated[str, Field(description="The absolute path to the file to read")],
    offset: Annotated[Optional[int], Field(description="The line number to start reading from. Only provide if the file is too large to read at once")] = None,
    limit: Annotated[Optional[int], Field(description="The number of lines to read. Only provide if the file is too large to read at once.")] = None,
) -> str:
    """Reads a file from the local filesystem. You can access any file directly by using this tool.

    Returns numbered lines (cat -n style). Lines longer than 2000 characters are truncated.
    """
    try:
        content = _read_exact(file_path)
    except FileNotFoundError:
        return f"Error: File not found at {file_path}"

    start = offset or 0
    count = limit or READ_DEFAULT_LIMIT
    lines = content.split("\n")[start:start + count]

    numbered = []
    for idx, line in enumerate(lines):
        if len(line) > READ_MAX_LINE_CHARS:
            line = line[:READ_MAX_LINE_CHARS] + "..."
        numbered.append(f"{start + idx + 1:>6}\t{line}")
    return "\n".join(numbered)


def write_file(
    file_path: Annotated[str, Field(description="The absolute path to the file to write (must be absolute, not relative)")],
    content: Annotated[str, Field(description="The content to write to the file")],
) -> str:
    """Writes a file to the local filesystem. Parent directories are created as needed."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    _write_atomic(file_path, content)
    logger.info(f"Wrote {len(content)} chars to {file_path}")
    return f"File created successfully at: {file_path}"


def edit_file(
    file_path: Annotated[str, Field(description="The absolute path to the file to modify")],
    old_string: Annotated[str, Field(description="The text to replace")],
    new_string: Annotated[str, Field(description="The text to replace it with (must be different from old_string)")],
    replace_all: Annotated[bool, Field(description="Replace all occurrences of old_string (default false)")] = False,
) -> str:
    """Performs exact string replacements in files.

    old_string must match the file exactly and, unless replace_all is set, appear exactly once.
    """
    content = _read_exact(file_path)
    new_content = apply_single(content, ReplacementSpec(old_string, new_string, replace_all))
    _write_atomic(file_path, new_content)
    logger.info(f"Edited {file_path}")
    return f"Successfully edited {file_path}"


def multi_edit(
    file_path: Annotated[str, Field(description="The absolute path to the file to modify")],
    edits: Annotated[list[EditOperation], Field(min_length=1, description="Array of edit operations to perform sequentially on the file")],
) -> str:
    """This is a tool for making multiple edits to a single file in one operation.

    Edits are applied in order, each on the result of the previous one. All edits are atomic:
    if any edit fails, none are applied and the file is left untouched.
    """
    content = _read_exact(file_path)
    result = apply_sequence(content, [edit.to_spec() for edit in edits])
    _write_atomic(file_path, result.content)
    logger.info(f"Applied {result.applied} edits to {file_path}")
    return f"Successfully applied {result.applied} edits to {file_path}"


def _expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives, which the glob module does not understand."""
    m = _BRACE_RE.search(pattern)
    if not m:
        return [pattern]
    head, tail = pattern[:m.start()], pattern[m.end():]
    expanded = []
    for alt in m.group(1).split(","):
        expanded.extend(_expand_braces(head + alt + tail))
    return expanded


def _match_files(pattern: str, cwd: str, files_only: bool = False) -> list[str]:
    matches = set()
    for pat in _expand_braces(pattern):
        for rel in glob.glob(pat, root_dir=cwd, recursive=True):
            full = os.path.abspath(os.path.join(cwd, rel))
            if files_only and not os.path.isfile(full):
                continue
            matches.add(full)
    return list(matches)


def _newest_first(paths: list[str]) -> list[str]:
    return sorted(paths, key=lambda p: os.stat(p).st_mtime, reverse=True)


def glob_files(
    pattern: Annotated[str, Field(description="The glob pattern to match files against")],
    path: Annotated[Optional[str], Field(description="The directory to search in. If not specified, the current working directory will be used.")] = None,
) -> str:
    """Fast file pattern matching tool that works with any codebase size.

    Supports ``**`` and ``{a,b}`` patterns. Returns absolute paths sorted by modification time, newest first.
    """
    cwd = path or os.getcwd()
    return "\n".join(_newest_first(_match_files(pattern, cwd)))


def grep_files(
    pattern: Annotated[str, Field(description="The regular expression pattern to search for in file contents")],
    path: Annotated[Optional[str], Field(description="The directory to search in. Defaults to the current working directory.")] = None,
    include: Annotated[Optional[str], Field(description='File pattern to include in the search (e.g. "*.js", "*.{ts,tsx}")')] = None,
) -> str:
    """Fast content search tool that works with any codebase size.

    Returns paths of files whose content matches the regex, newest first.
    """
    try:
        regex = re.compile(pattern)
    except re.error as e:
        raise ValueError(f"Invalid regex: {e}") from e

    cwd = path or os.getcwd()
    matches = []
    for file in _match_files(include or "**/*", cwd, files_only=True):
        try:
            text = Path(file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Skipping {file}: {e}")
            continue
        if regex.search(text):
            matches.append(file)
    return "\n".join(_newest_first(matches))


def list_directory(
    path: Annotated[str, Field(description="The absolute path to the directory to list (must be absolute, not relative)")],
    ignore: Annotated[Optional[list[str]], Field(description="List of glob patterns to ignore")] = None,
) -> str:
    """Lists files and directories in a given path.

    Directories end with ``/``; files show their size in bytes.
    """
    lines = []
    with os.scandir(path) as entries:
        for entry in sorted(entries, key=lambda e: e.name):
            if ignore and any(fnmatch.fnmatch(entry.name, pat) for pat in ignore):
                continue
            if entry.is_dir():
                lines.append(f"{entry.name}/")
            else:
                lines.append(f"{entry.name} ({entry.stat().st_size} bytes)")
    return "\n".join(lines)
