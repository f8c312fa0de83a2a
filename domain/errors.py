from __future__ import annotations

from typing import Optional


class RelayError(Exception):
    """Base class for every failure the relay reports to its callers."""


class NotFoundError(RelayError):
    """
    A player, ban, note or admin lookup came up empty.

    Lookups report absence by returning None rather than raising; this class
    names that outcome for callers that need to turn it into an error.
    """


class UnauthorizedError(RelayError):
    """The caller has no verifiable identity that may act on the server."""


class ConfigurationError(RelayError):
    """A client or setting could not be constructed from the given values."""


class RemoteRejectedError(RelayError):
    """
    The administrative API answered with a structured business error.

    The message is operator-actionable and safe to show as-is.
    """

    def __init__(
        self,
        message: str,
        code: int,
        inner_message: Optional[str] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.inner_message = inner_message
        super().__init__(str(self))

    def __str__(self) -> str:
        return (
            f"Message: {self.message}. ErrorCode: {self.code}. "
            f"Exception Message: {self.inner_message or 'none'}"
        )


class TransportFailureError(RelayError):
    """
    A remote call failed below the business level: network error, timeout,
    or a response that could not be understood.

    `raw_body` keeps whatever the remote sent so nothing is silently dropped.
    """

    def __init__(
        self,
        detail: str,
        status: Optional[int] = None,
        raw_body: str = "",
    ) -> None:
        self.detail = detail or "Unknown transport failure"
        self.status = status
        self.raw_body = raw_body
        super().__init__(str(self))

    def __str__(self) -> str:
        text = self.detail
        if self.status is not None:
            text = f"{text} (status {self.status})"
        if self.raw_body:
            text = f"{text}: {self.raw_body}"
        return text
