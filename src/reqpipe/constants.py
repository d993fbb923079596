# topmark:header:start
#
#   project      : ReqPipe
#   file         : constants.py
#   file_relpath : src/reqpipe/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ReqPipe Constants."""

from __future__ import annotations

from importlib.metadata import version as get_version

REQPIPE_VERSION: str = get_version("reqpipe")

# Value of the `user-agent` header set by the default-headers step:
USER_AGENT: str = f"reqpipe/{REQPIPE_VERSION}"

# Environment variable consulted for the internal log level:
LOG_LEVEL_ENV_VAR: str = "REQPIPE_LOG_LEVEL"

# Retry step defaults (delay in milliseconds):
DEFAULT_RETRY_DELAY_MS: int = 2000
DEFAULT_RETRY_MAX_ATTEMPTS: int = 2

# Redirect-follow step default depth cap:
DEFAULT_MAX_REDIRECTS: int = 10

# Statuses that trigger the redirect-follow step:
REDIRECT_STATUSES: frozenset[int] = frozenset({301, 302})

# Statuses at or above this value are retried by the retry step:
RETRY_STATUS_THRESHOLD: int = 500

# Config file names, in discovery order:
CONFIG_FILE_NAME: str = "reqpipe.toml"
PYPROJECT_FILE_NAME: str = "pyproject.toml"
PYPROJECT_TOOL_SECTION: str = "reqpipe"
