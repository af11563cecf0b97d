"""Pydantic schemas for the feature example API."""

from __future__ import annotations

from pydantic import BaseModel


class FeatureExampleResponse(BaseModel):
    """Response body of ``POST /{product}/{feature}/{subfeature}``."""

    feature: str | None = None
