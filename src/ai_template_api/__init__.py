"""AI Template API — scaffold for asynchronous CRUD services."""

from __future__ import annotations

__version__ = "1.0.0"

from ai_template_api.app import create_app
from ai_template_api.settings import TemplateSettings

__all__ = [
    "TemplateSettings",
    "__version__",
    "create_app",
]
