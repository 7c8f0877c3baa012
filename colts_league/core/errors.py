from typing import Optional


class LeagueError(Exception):
    """Base error for league data and standings operations."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            **({"details": self.details} if self.details else {}),
        }


class DataStoreError(LeagueError):
    """A read/create/update against the data store did not succeed."""

    def __init__(self, table: str, message: str, details: Optional[str] = None):
        super().__init__(message, details)
        self.table = table


class NotFoundError(LeagueError):
    """A fixture or league referenced by a request does not exist."""
