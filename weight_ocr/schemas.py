from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Serialized with camelCase keys, which is what integrators' clients expect."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReadingOut(_CamelModel):
    weight: str
    confidence: float = Field(ge=0.0, le=1.0)
    raw_text: str
    filename: str
    uploaded_at: datetime
    metadata: dict[str, Any] = Field(default_factory=dict)


class UploadResponse(_CamelModel):
    success: bool = True
    data: ReadingOut


class HealthResponse(_CamelModel):
    status: str
    timestamp: datetime
    in_flight: int
    limit: int


class HistoryResponse(_CamelModel):
    capacity: int
    items: list[ReadingOut]
