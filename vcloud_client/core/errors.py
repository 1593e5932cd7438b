"""
Error taxonomy for the vCloud API Client.
Every failure raised by the engine derives from CloudError.
"""

from typing import Optional

from vcloud_client.core.models import ErrorData


class CloudError(Exception):
    """Base class for all errors raised while talking to the cloud."""
    pass


class AuthenticationError(CloudError):
    """Raised when login fails or no session token is returned."""
    pass


class ProtocolError(CloudError):
    """Raised when the server response does not match the vendor protocol."""
    pass


class InternalTransportError(CloudError):
    """Raised when the HTTP call itself fails (connection, timeout, TLS)."""
    pass


class TaskTimeoutError(CloudError):
    """Raised when a task does not finish in time and the policy says so."""

    def __init__(self, task_id: Optional[str], timeout_seconds: float):
        super().__init__(
            f"Task {task_id} did not complete within {timeout_seconds:.0f} seconds"
        )
        self.task_id = task_id
        self.timeout_seconds = timeout_seconds


class VendorFault(CloudError):
    """
    Raised when the server returns a decodable vendor error document.

    Carries the decoded major/minor codes, title and description.
    """

    def __init__(self, data: ErrorData):
        super().__init__(f"[{data.status} : {data.title}] {data.description}")
        self.data = data

    @property
    def status(self) -> int:
        return self.data.status

    @property
    def major_code(self) -> str:
        return self.data.major_code

    @property
    def minor_code(self) -> str:
        return self.data.minor_code

    @property
    def title(self) -> str:
        return self.data.title

    @property
    def description(self) -> str:
        return self.data.description


class GenericHTTPFault(CloudError):
    """Raised when an error response carries no decodable error document."""

    def __init__(self, status: int, reason: str, body: str = ""):
        super().__init__(f"HTTP {status} {reason}: No further information")
        self.status = status
        self.reason = reason
        self.body = body
