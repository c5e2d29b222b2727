from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")


# --- Lookup results (best-effort external lookups) ---

@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    reason: str


Lookup = Union[Found[T], NotFound]


# --- Exceptions ---

class MatchFinderError(Exception):
    pass


class ConfigurationError(MatchFinderError):
    """A required credential or URL is missing. Fatal for the whole run."""


class UpstreamError(MatchFinderError):
    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self):
        if self.status_code is None:
            return super().__str__()
        return f"{super().__str__()} (status {self.status_code}): {self.body}"


class ValidationFailed(MatchFinderError):
    pass


class MatchNotFound(MatchFinderError):
    def __init__(self, external_id: int):
        super().__init__(f"Match {external_id} not found")
        self.external_id = external_id
