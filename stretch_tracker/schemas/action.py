"""
Action (history) schemas.

POST /actions → ActionCreateRequest → ActionResponse
GET  /actions → ActionListResponse
"""
from pydantic import BaseModel, ConfigDict, Field

from stretch_tracker.core.types import ActionType


class ActionCreateRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    stretch_id: int = Field(gt=0, examples=[1])
    action: ActionType = Field(description='"completed" | "skipped"', examples=["completed"])


class ActionResponse(BaseModel):
    id: int
    stretch_id: int
    stretch_name: str = Field(description="Name at the time the action was recorded.")
    action: str
    timestamp: str
    date: str


class ActionListResponse(BaseModel):
    total: int
    items: list[ActionResponse]
