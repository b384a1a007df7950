"""Soft-failure result contracts returned by upstream collaborator calls.

Collaborators never raise on upstream problems. They return either an
`UpstreamSuccess` carrying the value or an `UpstreamFailure` describing what
went wrong, and callers branch on the type.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

ValueT = TypeVar("ValueT")


class UpstreamErrorKind(str, Enum):
    """Failure categories for upstream collaborator calls."""

    NOT_CONFIGURED = "not_configured"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    REJECTED = "rejected"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class UpstreamSuccess(Generic[ValueT]):
    """Successful collaborator outcome.

    Attributes:
        value: Call result value.
    """

    value: ValueT


@dataclass(frozen=True)
class UpstreamFailure:
    """Failed collaborator outcome represented as data.

    Attributes:
        kind: Failure category.
        message: Short human-readable failure description.
        detail: Optional upstream error payload passed through to clients.
    """

    kind: UpstreamErrorKind
    message: str
    detail: Any = None

    def domain_error_payload(self) -> Any:
        """Return the client-facing error value.

        Returns:
            Any: Upstream error payload when present, otherwise the message.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return self.detail if self.detail is not None else self.message


UpstreamResult = Union[UpstreamSuccess[ValueT], UpstreamFailure]
