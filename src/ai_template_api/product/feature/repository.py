"""Feature example repository — plain CRUD, no query methods."""

from __future__ import annotations

from ai_template_api.db.models import FeatureExampleRecord
from ai_template_api.db.repository import SqlAlchemyCrudRepository


class FeatureExampleRepository(SqlAlchemyCrudRepository[FeatureExampleRecord]):
    """Stores :class:`FeatureExampleRecord` rows."""

    _model_class = FeatureExampleRecord
