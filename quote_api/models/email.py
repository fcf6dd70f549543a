from dataclasses import dataclass
from typing import List, Optional, Union


@dataclass(frozen=True)
class QuoteEmail:
    subject: str
    html: str
    text: str


@dataclass(frozen=True)
class OutboundEmail:
    sender: str
    to: List[str]
    reply_to: str
    subject: str
    html: str
    text: Optional[str] = None


@dataclass(frozen=True)
class Delivered:
    message_id: Optional[str] = None


@dataclass(frozen=True)
class DeliveryError:
    message: str
    name: Optional[str] = None
    status_code: Optional[int] = None


DeliveryResult = Union[Delivered, DeliveryError]
