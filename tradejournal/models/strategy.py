"""Strategy checklist data model."""

import uuid
from typing import Optional
from pydantic import BaseModel, Field


class Strategy(BaseModel):
    """A named trading strategy with its checklist of rules."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="Strategy ID")
    title: str = Field(..., min_length=1, description="Strategy name")
    description: Optional[str] = Field(default=None, description="What the setup is")
    rules: list[str] = Field(default_factory=list, description="Checklist items")
    use_count: int = Field(default=0, ge=0, description="Times used on a trade")

    model_config = {"frozen": True}
