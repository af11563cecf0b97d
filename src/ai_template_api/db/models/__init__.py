"""SQLAlchemy 2.0 ORM models.

    from ai_template_api.db.models import Base, FeatureExampleRecord
"""

from __future__ import annotations

from ai_template_api.db.models.base import Base
from ai_template_api.db.models.feature import FeatureExampleRecord

__all__ = [
    "Base",
    "FeatureExampleRecord",
]
