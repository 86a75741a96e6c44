"""
Quote Service - validates quote input, prices it and assigns a quote ID.

Input arrives with camelCase keys (``discountRate``, ``eventType``...), as
the web form sends them; snake_case names are accepted too.
"""
import logging
from datetime import datetime
from typing import Optional, Type

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

from ..engine.errors import QuoteValidationError
from ..engine.models import ApplyTo, QuoteRequest, QuoteResult, RequestedItem
from ..engine.pricing_engine import PricingEngine
from .quote_ids import QuoteIdGenerator


logger = logging.getLogger(__name__)


class ClientIn(BaseModel):
    """Client and event metadata."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(min_length=1)
    email: EmailStr
    company: Optional[str] = None
    phone: Optional[str] = None
    event_type: str = Field(min_length=1)
    event_date: str = Field(min_length=1)
    event_location: str = Field(min_length=1)


class ItemIn(BaseModel):
    """One requested cart item."""
    sku: Optional[str] = None
    name: Optional[str] = None
    qty: int = Field(gt=0, validation_alias=AliasChoices('qty', 'quantity'))
    days: int = Field(gt=0)

    @model_validator(mode='after')
    def require_identifier(self) -> 'ItemIn':
        self.sku = (self.sku or '').strip() or None
        self.name = (self.name or '').strip() or None
        if not (self.sku or self.name):
            raise ValueError("sku or name is required")
        return self


class PricingIn(BaseModel):
    """Cart plus manual discount and delivery inputs."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    items: list[ItemIn] = Field(min_length=1)
    discount_rate: float = Field(0.0, ge=0, le=1, allow_inf_nan=False)
    discount_fixed: float = Field(0.0, ge=0, allow_inf_nan=False)
    discount_apply_to: ApplyTo = ApplyTo.DISCOUNTABLE
    delivery_fee: float = Field(0.0, ge=0, allow_inf_nan=False)

    def to_request(self) -> QuoteRequest:
        return QuoteRequest(
            items=[
                RequestedItem(qty=item.qty, days=item.days, sku=item.sku, name=item.name)
                for item in self.items
            ],
            discount_rate=self.discount_rate,
            discount_fixed=self.discount_fixed,
            discount_apply_to=self.discount_apply_to,
            delivery_fee=self.delivery_fee,
        )


class QuoteIn(PricingIn):
    """A full quote request: pricing inputs plus the client."""
    client: ClientIn
    notes: Optional[str] = None


def format_errors(errors: list[dict]) -> list[dict]:
    """Flatten pydantic error dicts into ``{field, message}`` pairs."""
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get('loc', ()) if part != 'body']
        formatted.append({
            'field': '.'.join(loc) or '__root__',
            'message': error.get('msg', 'invalid value'),
        })
    return formatted


def validate_quote_input(payload: dict, model: Type[PricingIn] = QuoteIn) -> PricingIn:
    """
    Validate raw input before it reaches the engine.

    Raises:
        QuoteValidationError: with one entry per invalid field.
    """
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise QuoteValidationError(format_errors(e.errors())) from e


class QuoteService:
    """Prices validated input and issues quote IDs."""

    def __init__(self, engine: PricingEngine, quote_ids: QuoteIdGenerator):
        self.engine = engine
        self.quote_ids = quote_ids

    def preview(self, data: PricingIn) -> QuoteResult:
        """Price without issuing a quote ID. Repeatable."""
        return self.engine.calculate(data.to_request())

    def create_quote(self, data: QuoteIn) -> dict:
        """
        Price the quote and assign it a number.

        Raises:
            ResolutionError: before any ID is consumed if an item is unknown.
        """
        result = self.engine.calculate(data.to_request())
        quote_id = self.quote_ids.next_id(data.client.event_type)
        logger.info("Quote %s for %s: total %.2f", quote_id, data.client.email, result.total)

        return {
            "ok": True,
            "quoteId": quote_id,
            "createdAt": datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
            "client": data.client.model_dump(by_alias=True),
            "notes": data.notes,
            "quote": result.to_dict(),
            "totals": result.totals(),
            "warnings": result.warnings,
        }
