from typing import List, Optional

from pydantic import BaseModel, Field


class CaptchaResult(BaseModel):
    success: bool = False
    score: Optional[float] = None
    action: Optional[str] = None
    hostname: Optional[str] = None
    error_codes: List[str] = Field(default_factory=list, alias="error-codes")

    model_config = {"populate_by_name": True}

    def passed(self, min_score: float) -> bool:
        # v2 checkbox tokens carry no score; success alone decides then
        if not self.success:
            return False
        return self.score is None or self.score >= min_score
