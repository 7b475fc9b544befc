"""
GET /selection/next → SelectionResponse

`kind` tells the client which variant it got:
  "stretch"        — `stretch` is populated
  "empty_catalog"  — no enabled stretches; `message` prompts to add some
  "limit_reached"  — everything hit today's limit; `message` celebrates
"""
from typing import Optional

from pydantic import BaseModel, Field

from stretch_tracker.schemas.stretch import StretchResponse


class SelectionResponse(BaseModel):
    kind: str = Field(description='"stretch" | "empty_catalog" | "limit_reached"')
    stretch: Optional[StretchResponse] = None
    title: Optional[str] = None
    message: Optional[str] = None
    probability: Optional[float] = Field(
        default=None,
        description="Probability the drawn stretch had in this draw.",
    )
    candidates: int = Field(default=0, description="Stretches that passed today's limits.")
