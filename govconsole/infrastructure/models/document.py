"""SQLAlchemy model for documents stored in per-path collections."""

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON

from govconsole.infrastructure.database import Base
from govconsole.utils import utc_now

_document_json_type = JSON().with_variant(JSONB(), "postgresql")


class DocumentModel(Base):
    """Database representation of a single collection document."""

    __tablename__ = "document"
    __table_args__ = (
        UniqueConstraint("collection_path", "document_id", name="uq_document_path_id"),
    )

    # Insertion sequence; snapshots are delivered in this order.
    seq = Column(Integer, primary_key=True, autoincrement=True)
    collection_path = Column(String(512), nullable=False, index=True)
    document_id = Column(String(64), nullable=False)
    data = Column(_document_json_type, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utc_now)


__all__ = ["DocumentModel"]
