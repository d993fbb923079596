# topmark:header:start
#
#   project      : ReqPipe
#   file         : options.py
#   file_relpath : src/reqpipe/config/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pipeline options for ReqPipe.

`PipelineOptions` is the typed form of the keyword options accepted by
`reqpipe.api.request()` and of the ``[tool.reqpipe]`` configuration table. It
drives default pipeline assembly (see `reqpipe.pipeline.pipelines`).

The retry option follows a *maybe* rule shared by the response and error
phases:

| Value              | Normalized to         |
| ------------------ | --------------------- |
| ``None`` / `False` | ``None`` (no retry)   |
| ``True``           | ``RetryOptions()``    |
| mapping            | ``RetryOptions(...)`` |
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from reqpipe.config.logging import get_logger
from reqpipe.constants import (
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_RETRY_DELAY_MS,
    DEFAULT_RETRY_MAX_ATTEMPTS,
    USER_AGENT,
)
from reqpipe.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from reqpipe.config.logging import ReqpipeLogger
    from reqpipe.pipeline.models import Body
    from reqpipe.transport import Transport

logger: ReqpipeLogger = get_logger(__name__)

__all__: list[str] = [
    "PipelineOptions",
    "RetryOptions",
    "normalize_auth",
    "normalize_retry",
]


def _non_negative_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"{key} must be a non-negative integer, got {value!r}")
    return value


def _check_keys(section: str, data: Mapping[str, Any], allowed: Sequence[str]) -> None:
    unknown: list[str] = sorted(set(data) - set(allowed))
    if unknown:
        raise ConfigError(f"unknown {section} option(s): {', '.join(unknown)}")


def _check_headers(headers: Sequence[Any]) -> None:
    for item in headers:
        if not isinstance(item, (tuple, list)) or len(item) != 2:
            raise ConfigError(f"headers must be (name, value) pairs, got {item!r}")
        name, value = item
        if not isinstance(value, str):
            raise ConfigError(f"header value for {name!r} must be a string, got {value!r}")


@dataclass(frozen=True)
class RetryOptions:
    """Settings for the retry step.

    Attributes:
        delay (int): Milliseconds to sleep before each new attempt.
        max_attempts (int): Maximum number of retries after the first attempt.
    """

    delay: int = DEFAULT_RETRY_DELAY_MS
    max_attempts: int = DEFAULT_RETRY_MAX_ATTEMPTS

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RetryOptions:
        """Build from a mapping with optional ``delay`` and ``max_attempts`` keys.

        Raises:
            ConfigError: On unknown keys or invalid values.
        """
        _check_keys("retry", data, ("delay", "max_attempts"))
        return cls(
            delay=_non_negative_int("retry.delay", data.get("delay", DEFAULT_RETRY_DELAY_MS)),
            max_attempts=_non_negative_int(
                "retry.max_attempts", data.get("max_attempts", DEFAULT_RETRY_MAX_ATTEMPTS)
            ),
        )


def normalize_retry(value: Any) -> RetryOptions | None:
    """Apply the retry *maybe* rule (see module docstring).

    Raises:
        ConfigError: If ``value`` has an unsupported type.
    """
    if value is None or value is False:
        return None
    if value is True:
        return RetryOptions()
    if isinstance(value, RetryOptions):
        return value
    if isinstance(value, Mapping):
        return RetryOptions.from_mapping(value)
    raise ConfigError(f"retry must be a bool or a table, got {value!r}")


def normalize_auth(value: Any) -> tuple[str, str] | None:
    """Return ``(username, password)`` from a pair or a ``{username, password}`` mapping.

    Both credentials must be strings.

    Raises:
        ConfigError: If ``value`` is neither, or a credential is missing or not a string.
    """
    if value is None or value is False:
        return None
    if isinstance(value, Mapping):
        _check_keys("auth", value, ("username", "password"))
        value = (value.get("username"), value.get("password"))
    if isinstance(value, (tuple, list)) and len(value) == 2:
        username, password = value
        if isinstance(username, str) and isinstance(password, str):
            return (username, password)
        raise ConfigError(f"auth username and password must both be strings, got {value!r}")
    raise ConfigError(f"auth must be a (username, password) pair, got {value!r}")


@dataclass(frozen=True)
class PipelineOptions:
    """Options driving `build()` and default pipeline assembly.

    Attributes:
        headers (list[tuple[Any, str]]): Initial request headers.
        body (Body): Request body (raw, `Form` or `Json`).
        auth (tuple[str, str] | None): Basic-auth credentials.
        params (Sequence[tuple[str, Any]] | Mapping[str, Any] | None): Query params to append.
        retry (RetryOptions | None): Retry settings, or None to disable retries.
        max_redirects (int): Redirect depth cap for the follow-redirects step.
        decode_csv (bool): Decode ``text/csv`` bodies into rows.
        user_agent (str): Value for the default ``user-agent`` header.
        transport (Transport | None): Transport override.
    """

    headers: list[tuple[Any, str]] = field(default_factory=lambda: [])
    body: Body = b""
    auth: tuple[str, str] | None = None
    params: Sequence[tuple[str, Any]] | Mapping[str, Any] | None = None
    retry: RetryOptions | None = None
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    decode_csv: bool = True
    user_agent: str = USER_AGENT
    transport: Transport | None = None

    @classmethod
    def from_kwargs(cls, **options: Any) -> PipelineOptions:
        """Build from keyword options as accepted by `reqpipe.api.request()`.

        Raises:
            ConfigError: On unknown options or invalid values.
        """
        _check_keys("request", options, tuple(cls.__dataclass_fields__))
        headers: Any = options.get("headers") or []
        if isinstance(headers, Mapping):
            headers = list(headers.items())
        headers = list(headers)
        _check_headers(headers)
        return cls(
            headers=headers,
            body=options.get("body", b""),
            auth=normalize_auth(options.get("auth")),
            params=options.get("params") or None,
            retry=normalize_retry(options.get("retry")),
            max_redirects=_non_negative_int(
                "max_redirects", options.get("max_redirects", DEFAULT_MAX_REDIRECTS)
            ),
            decode_csv=bool(options.get("decode_csv", True)),
            user_agent=options.get("user_agent") or USER_AGENT,
            transport=options.get("transport"),
        )

    @classmethod
    def from_config(cls, data: Mapping[str, Any]) -> PipelineOptions:
        """Build from a configuration table (see `reqpipe.config.io`).

        Only settings that make sense in a file are accepted: ``headers``,
        ``params``, ``auth``, ``retry``, ``max_redirects``, ``decode_csv`` and
        ``user_agent``.

        Raises:
            ConfigError: On unknown keys or invalid values.
        """
        allowed: tuple[str, ...] = (
            "headers",
            "params",
            "auth",
            "retry",
            "max_redirects",
            "decode_csv",
            "user_agent",
        )
        _check_keys("config", data, allowed)
        for key in ("headers", "params"):
            if key in data and not isinstance(data[key], Mapping):
                raise ConfigError(f"{key} must be a table, got {data[key]!r}")
        for name, value in data.get("params", {}).items():
            if isinstance(value, bool) or not isinstance(value, (str, int, float)):
                raise ConfigError(
                    f"param value for {name!r} must be a string or number, got {value!r}"
                )
        if "decode_csv" in data and not isinstance(data["decode_csv"], bool):
            raise ConfigError(f"decode_csv must be a boolean, got {data['decode_csv']!r}")
        logger.debug("Options from config: %s", sorted(data))
        return cls.from_kwargs(**{k: v for k, v in data.items() if k in allowed})
