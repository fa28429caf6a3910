"""SQLAlchemy models for the infrastructure layer."""

from .document import DocumentModel

__all__ = ["DocumentModel"]
