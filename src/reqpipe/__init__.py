# topmark:header:start
#
#   project      : ReqPipe
#   file         : __init__.py
#   file_relpath : src/reqpipe/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ReqPipe package.

ReqPipe is a request/response pipeline engine for HTTP clients. A call is
modelled as ordered, short-circuiting steps composed around a single network
exchange, and exposed both as a small typed API (`reqpipe.api`) and a CLI.
"""

from __future__ import annotations
