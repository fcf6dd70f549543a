from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Union

from pydantic import ValidationError

from quote_api.models.quote_request import PhonePolicy, QuoteRequest

ROOT_ERROR_KEY = "_errors"


@dataclass(frozen=True)
class Valid:
    quote: QuoteRequest


@dataclass(frozen=True)
class Invalid:
    errors: Dict[str, List[str]]


ValidationResult = Union[Valid, Invalid]


def validate_quote(payload: Any, phone_policy: PhonePolicy = PhonePolicy.GENERIC) -> ValidationResult:
    """
    Validate an untyped request body against the quote request rules.

    Anything that is not a mapping is validated as an empty mapping, so a
    garbage body reports every required field instead of failing outright.
    Unknown keys are ignored.
    """
    data = dict(payload) if isinstance(payload, Mapping) else {}
    try:
        quote = QuoteRequest.model_validate(data, context={"phone_policy": PhonePolicy(phone_policy)})
    except ValidationError as exc:
        return Invalid(errors=field_errors(exc))
    return Valid(quote=quote)


def field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else ROOT_ERROR_KEY
        errors.setdefault(field, []).append(error["msg"])
    return errors
