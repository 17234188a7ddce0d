"""Common Schema Types: base model, fixed-precision decimals, identifier fields.

Invariants:
    - Every contract model is frozen and exposes camelCase JSON names
    - Money serializes as a 6-decimal string, Rate as a 9-decimal string (JSON mode only)
    - PositiveAmount is the only place `gt` is used; other numeric bounds use ge/le
    - PositiveAmount rejects more than MONEY_PLACES decimals instead of truncating them
    - Stablecoin symbols are only length-bounded; catalog membership decides everything else
    - Unknown input fields are ignored; strictness is a route property, not a model property

Design Decisions:
    - Decimal end to end: no float ever enters a monetary computation
    - alias_generator=to_camel keeps Python attributes snake_case
"""

from datetime import datetime
from decimal import Decimal, ROUND_DOWN
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from reflect_mirror.core.domain_types import (
    INTEGRATION_ID_PATTERN, TOKEN_SYMBOL_PATTERN, WALLET_ADDRESS_PATTERN,
)

MONEY_PLACES = 6
RATE_PLACES = 9
MAX_AMOUNT = Decimal("1000000000000")


def fixed_decimal(places: int):
    """Build a serializer rendering a Decimal with exactly `places` decimals."""
    quantum = Decimal(1).scaleb(-places)

    def serialize(value: Decimal) -> str:
        return f"{value.quantize(quantum, rounding=ROUND_DOWN):f}"

    return serialize


Money = Annotated[
    Decimal,
    PlainSerializer(fixed_decimal(MONEY_PLACES), return_type=str, when_used="json"),
]
Rate = Annotated[
    Decimal,
    PlainSerializer(fixed_decimal(RATE_PLACES), return_type=str, when_used="json"),
]
def within_money_places(value: Decimal) -> Decimal:
    if value != value.quantize(Decimal(1).scaleb(-MONEY_PLACES)):
        raise PydanticCustomError(
            "decimal_max_places",
            "Decimal input should have no more than {places} decimal places",
            {"places": MONEY_PLACES},
        )
    return value


NonNegativeMoney = Annotated[Money, Field(ge=0)]
PositiveAmount = Annotated[
    Money, Field(gt=0, le=MAX_AMOUNT), AfterValidator(within_money_places),
]

Symbol = Annotated[str, Field(min_length=1, max_length=64)]
TokenSymbol = Annotated[str, Field(pattern=TOKEN_SYMBOL_PATTERN)]
IntegrationIdField = Annotated[str, Field(pattern=INTEGRATION_ID_PATTERN)]
Address = Annotated[str, Field(pattern=WALLET_ADDRESS_PATTERN)]


class ContractModel(BaseModel):
    """Base for every request and response body."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class TimeWindow(ContractModel):
    """Closed time range a statistic covers."""
    start: datetime
    end: datetime


class StatusResponse(ContractModel):
    """Bare status body for GET / and GET /health."""
    status: str


class EmptyRequest(ContractModel):
    """Input of routes that take no parameters."""
