# topmark:header:start
#
#   project      : ReqPipe
#   file         : authenticator.py
#   file_relpath : src/reqpipe/pipeline/steps/authenticator.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Request authentication step (HTTP Basic)."""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING

from reqpipe.pipeline.steps.base import RequestStep

if TYPE_CHECKING:
    from reqpipe.pipeline.models import PipelineRequest


def basic_auth_value(username: str, password: str) -> str:
    """Return the ``authorization`` value for Basic credentials."""
    token: str = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return f"Basic {token}"


class AuthStep(RequestStep):
    """Set ``authorization`` from ``(username, password)`` unless already present.

    Raises:
        TypeError: At construction, if either credential is not a string.
    """

    def __init__(self, username: str, password: str) -> None:
        super().__init__(name=self.__class__.__name__)
        if not isinstance(username, str) or not isinstance(password, str):
            raise TypeError("auth credentials must be a pair of strings")
        self.username: str = username
        self.password: str = password

    def __repr__(self) -> str:
        return f"AuthStep(username={self.username!r}, password='***')"

    def run(self, request: PipelineRequest) -> PipelineRequest:
        """Add the Basic ``authorization`` header (first writer wins)."""
        return request.put_new_header(
            "authorization", basic_auth_value(self.username, self.password)
        )
