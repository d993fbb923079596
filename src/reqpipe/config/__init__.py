# topmark:header:start
#
#   project      : ReqPipe
#   file         : __init__.py
#   file_relpath : src/reqpipe/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration handling for ReqPipe.

- [`reqpipe.config.options`][]: typed pipeline options and their normalization.
- [`reqpipe.config.io`][]: loading options from ``reqpipe.toml`` or
  ``[tool.reqpipe]`` in ``pyproject.toml``.
- [`reqpipe.config.logging`][]: internal logging setup.
"""

from __future__ import annotations
