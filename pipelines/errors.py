"""Errors raised while pulling posts from the content source."""

from typing import Optional


class RemoteListingFailure(Exception):
    """The directory listing could not be fetched."""

    def __init__(self, status: Optional[int], message: str):
        self.status = status
        self.message = message
        super().__init__(f"Listing failed ({status or 'no response'}): {message}")


class DocumentSyncError(Exception):
    """A single source document could not be synced."""

    def __init__(self, name: str, reason: str, status: Optional[int] = None):
        self.name = name
        self.reason = reason
        self.status = status
        super().__init__(f"{name}: {reason}")


class RemoteFetchFailure(DocumentSyncError):
    """The raw content of a document could not be downloaded."""


class DocumentParseError(DocumentSyncError):
    """The front-matter of a document is not valid YAML."""
