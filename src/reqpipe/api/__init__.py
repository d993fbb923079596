# topmark:header:start
#
#   project      : ReqPipe
#   file         : __init__.py
#   file_relpath : src/reqpipe/api/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Public ReqPipe API (stable surface).

This module exposes a **small, typed API** for issuing HTTP calls through the
default pipeline without assembling steps by hand.

Notes:
-----
- Functions here are **thin wrappers**: options are normalized into a
  [`PipelineOptions`][reqpipe.config.options.PipelineOptions], then the request
  is built, the default steps are attached and the executor runs it.
- `request()` returns a [`Result`][reqpipe.pipeline.models.Result]; failures are
  values. The ``*_or_raise`` style helpers (`request_or_raise`, `get`, `post`)
  return the response or raise the failure.
- Without a ``transport`` option, each call opens a private `HttpxTransport`
  and closes it before returning. A caller-supplied transport is left open.
- Programmer errors (unknown options, malformed targets, unknown verbs) are
  raised immediately by every function.

Options
-------
| Option          | Meaning                                                  |
| --------------- | -------------------------------------------------------- |
| ``headers``     | Initial headers (mapping or sequence of pairs)           |
| ``body``        | ``bytes``, ``str``, `Form` or `Json`                     |
| ``auth``        | ``(username, password)`` for basic auth                  |
| ``params``      | Query parameters appended to the URL                     |
| ``retry``       | ``True``, ``False``/``None`` or ``{delay, max_attempts}`` |
| ``max_redirects`` | Redirect depth cap (default 10)                        |
| ``decode_csv``  | Decode ``text/csv`` bodies into rows (default ``True``)  |
| ``user_agent``  | Override the default ``user-agent`` value                |
| ``transport``   | Transport adapter (default `HttpxTransport`)             |

```python
from reqpipe import api
from reqpipe.pipeline.models import Json

response = api.post("https://example.org/items", Json({"name": "x"}), retry=True)
print(response.status, response.body)
```
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any

from reqpipe.config.logging import get_logger
from reqpipe.config.options import PipelineOptions
from reqpipe.pipeline import engine
from reqpipe.pipeline.models import HttpMethod
from reqpipe.pipeline.pipelines import add_default_steps
from reqpipe.pipeline.request import build
from reqpipe.transport import HttpxTransport

if TYPE_CHECKING:
    import httpx

    from reqpipe.config.logging import ReqpipeLogger
    from reqpipe.pipeline.models import Body, PipelineRequest, Response, Result

logger: ReqpipeLogger = get_logger(__name__)

__all__: list[str] = [
    "get",
    "post",
    "prepare",
    "request",
    "request_or_raise",
]


def prepare(
    method: HttpMethod | str,
    url: str | httpx.URL,
    options: PipelineOptions,
) -> PipelineRequest:
    """Build a request for ``method``/``url`` with the default steps attached.

    Args:
        method (HttpMethod | str): The HTTP verb.
        url (str | httpx.URL): The absolute target URL.
        options (PipelineOptions): Normalized options.

    Returns:
        PipelineRequest: The request, ready for `engine.run()`.
    """
    req: PipelineRequest = build(
        method,
        url,
        headers=options.headers,
        body=options.body,
        transport=options.transport,
    )
    logger.info("%s %s", req.method.value, req.url)
    return add_default_steps(req, options)


def request(method: HttpMethod | str, url: str | httpx.URL, **options: Any) -> Result:
    """Issue a request through the default pipeline.

    Args:
        method (HttpMethod | str): The HTTP verb (case-insensitive).
        url (str | httpx.URL): The absolute target URL.
        **options (Any): See the module docstring.

    Returns:
        Result: The final response or failure.

    Raises:
        ConfigError: On unknown or invalid options.
        MalformedTargetError: If ``url`` is not an absolute http(s) URL.
        ValueError: If ``method`` is not a known HTTP verb.
    """
    opts: PipelineOptions = PipelineOptions.from_kwargs(**options)
    if opts.transport is not None:
        return engine.run(prepare(method, url, opts))

    # The default transport lives for this call only; caller transports stay open.
    with HttpxTransport() as transport:
        return engine.run(prepare(method, url, replace(opts, transport=transport)))


def request_or_raise(method: HttpMethod | str, url: str | httpx.URL, **options: Any) -> Response:
    """Like `request`, but return the response or raise the failure."""
    return request(method, url, **options).unwrap()


def get(url: str | httpx.URL, **options: Any) -> Response:
    """Issue a GET request and return the response, raising on failure."""
    return request_or_raise(HttpMethod.GET, url, **options)


def post(url: str | httpx.URL, body: Body, **options: Any) -> Response:
    """Issue a POST request with ``body`` and return the response, raising on failure."""
    return request_or_raise(HttpMethod.POST, url, body=body, **options)
