"""Shared core — server config, tool limits, and logging setup."""

import logging
import os
import sys

SERVER_NAME = "devtools-mcp"
SERVER_VERSION = "1.0.0"
SERVER_INSTRUCTIONS = (
    "You are a careful software engineering assistant with filesystem, shell, "
    "notebook, web and task-tracking tools. "
    "Always Read a file before editing it. Prefer Edit/MultiEdit over Write for existing files. "
    "Use absolute paths. Use GetToolGuidance when unsure how a tool behaves."
)

# -- Read --
READ_DEFAULT_LIMIT = 2000
READ_MAX_LINE_CHARS = 2000

# -- Bash --
BASH_SHELL = "/bin/bash"
BASH_DEFAULT_TIMEOUT_MS = 120_000
BASH_MAX_TIMEOUT_MS = 600_000
BASH_MAX_BUFFER = 10 * 1024 * 1024  # bytes captured before the command is rejected
BASH_MAX_OUTPUT = 30_000  # chars returned to the caller

# -- Web --
WEB_TIMEOUT = 30  # seconds
WEB_USER_AGENT = "Mozilla/5.0 (compatible; devtools-mcp/1.0)"
WEB_MAX_REDIRECTS = 5
WEB_MAX_CONTENT = 50_000
WEB_MAX_RESULTS = 10
SEARCH_URL = "https://html.duckduckgo.com/html/"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level=None):
    """Send log records to stderr; stdout belongs to the stdio transport."""
    level = level or os.environ.get("DEVTOOLS_LOG_LEVEL", "INFO")
    logging.basicConfig(stream=sys.stderr, level=level.upper(), format=LOG_FORMAT)
