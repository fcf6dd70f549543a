import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

GENERIC_PHONE_MIN_LENGTH = 7
MESSAGE_MAX_LENGTH = 400

# +27 or a leading 0, a 6-8 network digit, then 8 more digits.
# Single spaces allowed after the prefix and between the 2/3/4 digit groups.
ZA_MOBILE_PATTERN = re.compile(r"^(?:\+27 ?|0)[6-8]\d ?\d{3} ?\d{4}$")


class PhonePolicy(str, Enum):
    GENERIC = "generic"
    ZA_MOBILE = "za_mobile"


class QuoteRequest(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    name: str = Field(..., min_length=2)
    company: str = Field(..., min_length=2)
    email: EmailStr
    phone: str
    service: str = Field(..., min_length=1)
    message: Optional[str] = Field(None, max_length=MESSAGE_MAX_LENGTH)

    # Attribution sent along by the landing pages
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None
    page: Optional[str] = None
    referral: Optional[str] = None

    captcha_token: Optional[str] = Field(None, alias="captchaToken")

    @field_validator("message", mode="before")
    @classmethod
    def blank_message_is_absent(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: str, info: ValidationInfo) -> str:
        policy = PhonePolicy((info.context or {}).get("phone_policy", PhonePolicy.GENERIC))

        if policy is PhonePolicy.ZA_MOBILE:
            if not ZA_MOBILE_PATTERN.match(value):
                raise PydanticCustomError(
                    "za_mobile",
                    "Phone must be a South African mobile number, e.g. 082 123 4567 or +27 82 123 4567",
                )
        elif len(value) < GENERIC_PHONE_MIN_LENGTH:
            raise PydanticCustomError(
                "phone_too_short",
                "Phone must contain at least {min_length} characters",
                {"min_length": GENERIC_PHONE_MIN_LENGTH},
            )
        return value

    def attribution(self) -> dict:
        """Attribution fields that were actually sent, in a fixed order."""
        fields = ("utm_source", "utm_medium", "utm_campaign", "page", "referral")
        return {field: getattr(self, field) for field in fields if getattr(self, field)}
