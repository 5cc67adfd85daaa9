# app/schemas/common.py
from decimal import Decimal
from typing import Annotated
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, PlainSerializer, StringConstraints

# Money travels as a JSON number but is stored and summed as Decimal
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

AMOUNT_MIN = Decimal("0.01")
AMOUNT_MAX = Decimal("99999999.99")


def check_http_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid URL")
    return value


Description = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=500)]
ReceiptUrl = Annotated[str, StringConstraints(max_length=2048), AfterValidator(check_http_url)]


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
