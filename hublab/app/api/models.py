from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator

from hublab.app.services.ai_service import DEFAULT_TARGETS


class AIGenerateRequest(BaseModel):
    prompt: Optional[str] = Field(default=None, description="Free-text app description")


class AIBuildRequest(AIGenerateRequest):
    targets: List[str] = Field(default_factory=lambda: list(DEFAULT_TARGETS))

    @field_validator("targets", mode="before")
    @classmethod
    def _targets_default(cls, v: Any) -> Any:
        return list(DEFAULT_TARGETS) if v is None else v


class AIGenerateResponse(BaseModel):
    success: bool = True
    project: Dict[str, Any]
    message: str
