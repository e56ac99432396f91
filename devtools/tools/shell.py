"""Bash tool — run a shell command with a bounded timeout and output.

stdout and stderr are merged (stdout first). A non-zero exit or a timeout
raises, so the caller sees a tool error carrying the captured output.
Output is read as it arrives; the command is killed once it passes the
capture limit.
"""

import logging
import os
import selectors
import subprocess
import time
from typing import Annotated, Optional

from pydantic import Field

from devtools.core import (
    BASH_DEFAULT_TIMEOUT_MS,
    BASH_MAX_BUFFER,
    BASH_MAX_OUTPUT,
    BASH_MAX_TIMEOUT_MS,
    BASH_SHELL,
)

logger = logging.getLogger(__name__)

_CHUNK = 64 * 1024


def _clamp_timeout(timeout):
    if not timeout or timeout <= 0:
        return BASH_DEFAULT_TIMEOUT_MS
    return min(timeout, BASH_MAX_TIMEOUT_MS)


def _capture(proc, timeout_s):
    """Read stdout/stderr until both close. Raises TimeoutExpired or RuntimeError."""
    deadline = time.monotonic() + timeout_s
    chunks = {proc.stdout: [], proc.stderr: []}
    total = 0

    with selectors.DefaultSelector() as sel:
        for stream in chunks:
            sel.register(stream, selectors.EVENT_READ)
        while sel.get_map():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise subprocess.TimeoutExpired(proc.args, timeout_s)
            for key, _ in sel.select(remaining):
                data = os.read(key.fd, _CHUNK)
                if not data:
                    sel.unregister(key.fileobj)
                    continue
                chunks[key.fileobj].append(data)
                total += len(data)
                if total > BASH_MAX_BUFFER:
                    raise RuntimeError(f"Command output exceeded {BASH_MAX_BUFFER} bytes")

    proc.wait(timeout=max(deadline - time.monotonic(), 0))
    return b"".join(chunks[proc.stdout]), b"".join(chunks[proc.stderr])


def run_bash(
    command: Annotated[str, Field(description="The command to execute")],
    description: Annotated[Optional[str], Field(description="Clear, concise description of what this command does in 5-10 words")] = None,
    timeout: Annotated[Optional[int], Field(gt=0, description="Optional timeout in milliseconds (max 600000)")] = None,
) -> str:
    """Executes a given bash command with optional timeout.

    Default timeout is 120000 ms (max 600000). Output over 30000 characters is truncated.
    """
    timeout_ms = _clamp_timeout(timeout)
    logger.info(f"Running command ({description or 'no description'}): {command}")

    with subprocess.Popen(
        command,
        shell=True,
        executable=BASH_SHELL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    ) as proc:
        try:
            out, err = _capture(proc, timeout_ms / 1000)
        except subprocess.TimeoutExpired:
            proc.kill()
            raise TimeoutError(f"Command timed out after {timeout_ms}ms") from None
        except RuntimeError:
            proc.kill()
            raise

    stdout = out.decode("utf-8", errors="replace")
    stderr = err.decode("utf-8", errors="replace")

    if proc.returncode != 0:
        message = f"Command failed: exit code {proc.returncode}"
        if stdout:
            message += f"\nStdout: {stdout}"
        if stderr:
            message += f"\nStderr: {stderr}"
        raise RuntimeError(message)

    output = stdout + stderr
    if len(output) > BASH_MAX_OUTPUT:
        output = output[:BASH_MAX_OUTPUT] + "\n... (output truncated)"
    return output or "Command executed successfully with no output"
