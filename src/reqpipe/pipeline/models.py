# topmark:header:start
#
#   project      : ReqPipe
#   file         : models.py
#   file_relpath : src/reqpipe/pipeline/models.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Data model for the ReqPipe pipeline.

Sections:
    HttpMethod, Header:
        Request verbs and symbolic header names.

    Form, Json:
        Tagged body shapes consumed (and replaced) by the encode step.

    Response:
        Immutable response value; steps derive new responses with
        `Response.with_body()` / `Response.with_headers()`.

    PrivateState:
        Typed per-call state that survives retry/redirect recursion.

    PipelineRequest:
        Mutable context threaded through a single logical call.

    Result:
        Tagged outcome of running a pipeline: a response *or* a failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Union

from reqpipe.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    import httpx

    from reqpipe.config.logging import ReqpipeLogger
    from reqpipe.transport import Transport

logger: ReqpipeLogger = get_logger(__name__)

__all__: list[str] = [
    "Body",
    "ExchangeStepFn",
    "Form",
    "Header",
    "HeaderList",
    "HttpMethod",
    "Json",
    "PipelineRequest",
    "PrivateState",
    "RequestStepFn",
    "Response",
    "Result",
    "find_header",
    "normalize_header_name",
]


class HttpMethod(str, Enum):
    """HTTP request methods accepted by `build()`."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"

    @classmethod
    def parse(cls, value: HttpMethod | str) -> HttpMethod:
        """Return the member for ``value`` (case-insensitive).

        Raises:
            ValueError: If ``value`` is not a known HTTP verb.
        """
        if isinstance(value, HttpMethod):
            return value
        try:
            return cls(value.upper())
        except ValueError:
            raise ValueError(f"Unknown HTTP method: {value!r}") from None


class Header(Enum):
    """Symbolic header names.

    Members are *not* strings: the normalize-headers step turns them into their
    lowercase, hyphenated wire form (``Header.USER_AGENT`` -> ``"user-agent"``).
    """

    ACCEPT = "accept"
    ACCEPT_ENCODING = "accept_encoding"
    AUTHORIZATION = "authorization"
    CONTENT_ENCODING = "content_encoding"
    CONTENT_TYPE = "content_type"
    COOKIE = "cookie"
    LOCATION = "location"
    USER_AGENT = "user_agent"


@dataclass(frozen=True)
class Form:
    """Body to be sent as ``application/x-www-form-urlencoded``."""

    data: Mapping[str, Any] | Sequence[tuple[str, Any]]


@dataclass(frozen=True)
class Json:
    """Body to be sent as ``application/json``."""

    data: Any


Body = Union[bytes, str, Form, Json]
HeaderList = list[tuple[Any, str]]


def normalize_header_name(name: Any) -> str:
    """Return the wire form of a header name.

    Strings pass through unchanged (casing included). Enum members use their
    member name and any other object its ``str()``; both are lowercased with
    underscores turned into hyphens (``Header.USER_AGENT`` -> ``"user-agent"``).
    """
    if isinstance(name, str):
        return name
    raw: str = name.name if isinstance(name, Enum) else str(name)
    return raw.lower().replace("_", "-")


def find_header(headers: Sequence[tuple[Any, str]], name: str) -> str | None:
    """Return the first value whose string name matches ``name`` case-insensitively."""
    wanted: str = name.lower()
    for key, value in headers:
        if isinstance(key, str) and key.lower() == wanted:
            return value
    return None


@dataclass(frozen=True)
class Response:
    """An HTTP response as seen by response steps.

    Attributes:
        status (int): The HTTP status code.
        headers (list[tuple[str, str]]): Ordered header pairs as received.
        body (Any): Raw bytes from the transport; may be replaced by a decoded
            value (e.g. parsed JSON) by the decode step.
    """

    status: int
    headers: list[tuple[str, str]] = field(default_factory=lambda: [])
    body: Any = b""

    def get_header(self, name: str) -> str | None:
        """Return the first value of header ``name`` (case-insensitive), or None."""
        return find_header(self.headers, name)

    def with_body(self, body: Any) -> Response:
        """Return a copy of this response carrying ``body``."""
        return replace(self, body=body)

    def with_headers(self, headers: list[tuple[str, str]]) -> Response:
        """Return a copy of this response carrying ``headers``."""
        return replace(self, headers=headers)


@dataclass
class PrivateState:
    """Per-call state shared across recursive resubmission.

    One instance is created per top-level request and handed, unchanged in
    identity, to every request reborn from it.
    """

    retry_attempt: int = 0
    redirect_count: int = 0


@dataclass(frozen=True)
class Submission:
    """Snapshot of a request as first submitted to the executor."""

    url: httpx.URL
    headers: tuple[tuple[Any, str], ...]
    body: Body


RequestStepFn = Callable[["PipelineRequest"], Any]
ExchangeStepFn = Callable[["PipelineRequest", Any], Any]


@dataclass
class PipelineRequest:
    """Context for a single logical HTTP call.

    A ``PipelineRequest`` is exclusively owned by the call stack running it.
    Request steps mutate it in place and return it; response and error steps
    return it paired with a response or failure.

    Attributes:
        method (HttpMethod): The request verb, fixed at construction.
        url (httpx.URL): The parsed target. Steps commonly rewrite its query.
        transport (Transport): Adapter performing the network exchange.
        headers (HeaderList): Ordered (name, value) pairs, duplicates allowed.
            Names may be non-strings until the normalize-headers step runs.
        body (Body): Raw payload, or a `Form` / `Json` shape awaiting encoding.
        request_steps (list[RequestStepFn]): Steps run before dispatch.
        response_steps (list[ExchangeStepFn]): Steps run over a response.
        error_steps (list[ExchangeStepFn]): Steps run over a failure.
        halted (bool): Once True, the value paired with this request is final.
        private (PrivateState): Inter-step state surviving recursion.
        submitted (Submission | None): Snapshot taken by the executor before
            the request phase first runs; the base for `reborn()`.
    """

    method: HttpMethod
    url: httpx.URL
    transport: Transport
    headers: HeaderList = field(default_factory=lambda: [])
    body: Body = b""
    request_steps: list[RequestStepFn] = field(default_factory=lambda: [])
    response_steps: list[ExchangeStepFn] = field(default_factory=lambda: [])
    error_steps: list[ExchangeStepFn] = field(default_factory=lambda: [])
    halted: bool = False
    private: PrivateState = field(default_factory=PrivateState)
    submitted: Submission | None = None

    def halt(self) -> PipelineRequest:
        """Mark this request halted and return it."""
        self.halted = True
        return self

    def snapshot(self) -> None:
        """Record the submitted url/headers/body once; later calls are no-ops."""
        if self.submitted is None:
            self.submitted = Submission(url=self.url, headers=tuple(self.headers), body=self.body)

    def reborn(self, url: httpx.URL | None = None) -> PipelineRequest:
        """Return a fresh, non-halted request for resubmission.

        The new request starts from the submitted snapshot (so request steps
        apply exactly once per attempt), shares the step lists, the transport
        and the `private` state, and optionally targets ``url`` instead.

        Args:
            url (httpx.URL | None): New target, or None to keep the submitted one.

        Returns:
            PipelineRequest: The request to hand back to the executor.
        """
        base: Submission = self.submitted or Submission(
            url=self.url, headers=tuple(self.headers), body=self.body
        )
        target: httpx.URL = base.url if url is None else url
        return PipelineRequest(
            method=self.method,
            url=target,
            transport=self.transport,
            headers=list(base.headers),
            body=base.body,
            request_steps=self.request_steps,
            response_steps=self.response_steps,
            error_steps=self.error_steps,
            private=self.private,
            submitted=replace(base, url=target),
        )

    def get_header(self, name: str) -> str | None:
        """Return the first value of header ``name`` (case-insensitive), or None."""
        return find_header(self.headers, name)

    def put_new_header(self, name: str, value: str) -> PipelineRequest:
        """Prepend header ``name`` unless one already exists (first writer wins).

        Args:
            name (str): Lowercase header name.
            value (str): Header value.

        Returns:
            PipelineRequest: This request, for chaining.
        """
        if self.get_header(name) is None:
            self.headers.insert(0, (name, value))
        else:
            logger.trace("Header %r already set; keeping caller value", name)
        return self


@dataclass(frozen=True)
class Result:
    """Outcome of running a pipeline: exactly one of response or error."""

    response: Response | None = None
    error: Exception | None = None

    def __post_init__(self) -> None:
        if (self.response is None) == (self.error is None):
            raise ValueError("Result requires exactly one of response or error")

    @classmethod
    def success(cls, response: Response) -> Result:
        """Create a successful result."""
        return cls(response=response)

    @classmethod
    def failure(cls, error: Exception) -> Result:
        """Create a failed result."""
        return cls(error=error)

    @property
    def ok(self) -> bool:
        """True if this result carries a response."""
        return self.response is not None

    @property
    def value(self) -> Response | Exception:
        """The carried response or error."""
        if self.response is not None:
            return self.response
        assert self.error is not None
        return self.error

    def unwrap(self) -> Response:
        """Return the response, or raise the carried error."""
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response
