"""Pydantic schemas for API."""

from typing import Literal

from pydantic import BaseModel, Field


SchemaName = Literal['legacy', 'horizontal', 'comprehensive']


class ValidateRequest(BaseModel):
    """Input validation payload."""
    idea: str


class AnalysisRequest(BaseModel):
    """Analysis request payload.

    ``use_api`` lets a caller force the heuristic path even when an API
    key is configured.
    """
    idea: str = Field(min_length=1)
    schema_name: SchemaName = Field(default='horizontal', alias='schema')
    use_api: bool = True

    model_config = {'populate_by_name': True}


class DeleteManyRequest(BaseModel):
    """Bulk history delete payload."""
    ids: list[str] = Field(default_factory=list)


class ConsentRequest(BaseModel):
    """Cookie consent answer."""
    granted: bool
