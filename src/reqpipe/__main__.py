# topmark:header:start
#
#   project      : ReqPipe
#   file         : __main__.py
#   file_relpath : src/reqpipe/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running ReqPipe via ``python -m reqpipe``.

Equivalent to running the ``reqpipe`` console script; delegates to
:func:`reqpipe.cli.main.cli`.

Examples:
    Fetch a JSON document::

        python -m reqpipe request GET https://example.org/data.json
"""

from __future__ import annotations

from reqpipe.cli.main import cli

if __name__ == "__main__":
    cli()
