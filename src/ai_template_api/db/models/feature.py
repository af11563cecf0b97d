"""Feature example ORM model (``feature_example`` table)."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ai_template_api.db.models.base import Base


class FeatureExampleRecord(Base):
    """A persisted feature: an identifier and one optional string."""

    __tablename__ = "feature_example"

    id: Mapped[str] = mapped_column("feature_pk", String(64), primary_key=True)
    feature_string: Mapped[str | None] = mapped_column(
        "feature_string",
        String(4000),
        nullable=True,
        default=None,
    )

    def __repr__(self) -> str:
        return f"FeatureExampleRecord(id={self.id!r}, feature_string={self.feature_string!r})"
