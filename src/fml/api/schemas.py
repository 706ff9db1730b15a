from pydantic import BaseModel, Field
from typing import Any, Optional


class HealthResponse(BaseModel):
    ok: bool = True
    service: str = "fml-api"


class CompileRequest(BaseModel):
    manifest: str = Field(..., min_length=1)
    object_field_fallback: Optional[bool] = None


class CompileResponse(BaseModel):
    ok: bool = True
    ir: dict[str, Any]
    channels: list[str] = Field(default_factory=list)
