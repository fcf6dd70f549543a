from typing import Dict, List, Optional

from pydantic import BaseModel


class OkResponse(BaseModel):
    ok: bool = True


class MessageResponse(BaseModel):
    message: str
    details: Optional[str] = None


class ValidationErrorResponse(BaseModel):
    errors: Dict[str, List[str]]


class HealthResponse(BaseModel):
    status: str = "ok"
