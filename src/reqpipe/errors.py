# topmark:header:start
#
#   project      : ReqPipe
#   file         : errors.py
#   file_relpath : src/reqpipe/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Failure taxonomy for the ReqPipe pipeline.

Failures travel through the pipeline as *values*: the transport adapter and the
built-in steps produce instances of the classes below and hand them to the
executor, which routes them into the error phase. Only programmer errors are
raised out of the engine:

- `StepContractError`: a step returned a value of an unexpected shape.
- `MalformedTargetError`: `build()` was given a URL it cannot parse.

Every failure carries a ``kind`` discriminator, a human-readable ``message``,
and a ``fatal`` flag. Fatal failures are never retried by the retry step.
"""

from __future__ import annotations

from typing import ClassVar

__all__: list[str] = [
    "CodecError",
    "ConfigError",
    "MalformedTargetError",
    "PipelineError",
    "RedirectError",
    "StepContractError",
    "TooManyRedirectsError",
    "TransportError",
    "UnsupportedEncodingError",
]


class PipelineError(Exception):
    """Base class for all ReqPipe failures.

    Attributes:
        kind (str): Stable discriminator for the failure category.
        fatal (bool): True if the failure must not be retried.
        message (str): Human-readable description.
    """

    kind: ClassVar[str] = "pipeline"
    fatal: ClassVar[bool] = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message: str = message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class TransportError(PipelineError):
    """The transport adapter could not complete the exchange.

    Attributes:
        reason (str): Adapter-specific reason, e.g. ``"connect_error"`` or ``"read_timeout"``.
    """

    kind = "transport"

    def __init__(self, message: str, *, reason: str = "unknown") -> None:
        super().__init__(message)
        self.reason: str = reason


class CodecError(PipelineError):
    """A body could not be encoded or decoded (bad JSON, corrupt gzip, ...)."""

    kind = "codec"


class UnsupportedEncodingError(PipelineError):
    """A ``content-encoding`` value the decompress step does not recognize."""

    kind = "unsupported_encoding"
    fatal = True

    def __init__(self, algorithm: str) -> None:
        super().__init__(f"unsupported decompression algorithm: {algorithm!r}")
        self.algorithm: str = algorithm


class RedirectError(PipelineError):
    """A redirect response could not be followed (e.g. no ``location`` header)."""

    kind = "redirect"
    fatal = True


class TooManyRedirectsError(RedirectError):
    """The redirect chain exceeded the configured maximum depth."""

    kind = "too_many_redirects"

    def __init__(self, max_redirects: int) -> None:
        super().__init__(f"exceeded maximum of {max_redirects} redirects")
        self.max_redirects: int = max_redirects


class MalformedTargetError(PipelineError, ValueError):
    """The target passed to `build()` is not an absolute http(s) URL."""

    kind = "malformed_target"
    fatal = True


class StepContractError(PipelineError, TypeError):
    """A step returned a value that matches none of the expected shapes."""

    kind = "step_contract"
    fatal = True


class ConfigError(PipelineError):
    """Configuration is invalid (unknown keys, wrong types, unreadable TOML)."""

    kind = "config"
    fatal = True
