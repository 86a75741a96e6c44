"""
Input validation and quote creation tests.
"""
import pytest

from rental_quote.engine import QuoteValidationError, ResolutionError
from rental_quote.engine.models import ApplyTo
from rental_quote.services.quote_ids import QuoteIdGenerator
from rental_quote.services.quote_service import (
    PricingIn,
    QuoteIn,
    QuoteService,
    validate_quote_input,
)


def quote_payload(**overrides):
    payload = {
        "client": {
            "name": "Ana López",
            "email": "ana@example.com",
            "eventType": "Corporativo",
            "eventDate": "2026-11-20",
            "eventLocation": "CDMX",
        },
        "items": [{"sku": "BOC-001", "qty": 2, "days": 3}],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def service(engine, tmp_path):
    return QuoteService(engine, QuoteIdGenerator(tmp_path / 'sequence.json'))


def test_valid_payload_with_defaults():
    data = validate_quote_input(quote_payload())
    assert isinstance(data, QuoteIn)
    assert data.client.event_type == "Corporativo"
    assert data.discount_rate == 0
    assert data.discount_fixed == 0
    assert data.discount_apply_to is ApplyTo.DISCOUNTABLE
    assert data.delivery_fee == 0


def test_camel_case_discount_fields():
    data = validate_quote_input(quote_payload(discountRate=0.1, discountFixed=50, discountApplyTo="all", deliveryFee=200))
    request = data.to_request()
    assert request.discount_rate == 0.1
    assert request.discount_fixed == 50
    assert request.discount_apply_to is ApplyTo.ALL
    assert request.delivery_fee == 200


def test_quantity_alias_and_trimmed_identifiers():
    data = validate_quote_input(
        {"items": [{"sku": "  ", "name": " Bocina activa ", "quantity": 4, "days": 1}]},
        model=PricingIn,
    )
    item = data.to_request().items[0]
    assert item.qty == 4
    assert item.sku is None
    assert item.name == "Bocina activa"


@pytest.mark.parametrize("overrides,field", [
    ({"items": []}, "items"),
    ({"items": [{"sku": "A", "qty": 0, "days": 1}]}, "items.0.qty"),
    ({"items": [{"sku": "A", "qty": 1, "days": -2}]}, "items.0.days"),
    ({"items": [{"sku": "A", "qty": 1.5, "days": 1}]}, "items.0.qty"),
    ({"discountRate": 1.5}, "discountRate"),
    ({"discountFixed": -1}, "discountFixed"),
    ({"deliveryFee": -10}, "deliveryFee"),
    ({"discountApplyTo": "some"}, "discountApplyTo"),
])
def test_invalid_values_rejected(overrides, field):
    with pytest.raises(QuoteValidationError) as exc_info:
        validate_quote_input(quote_payload(**overrides))
    fields = [e["field"] for e in exc_info.value.errors]
    assert field in fields, f"Expected error on {field}, got {fields}"


def test_item_without_identifier_rejected():
    with pytest.raises(QuoteValidationError) as exc_info:
        validate_quote_input(quote_payload(items=[{"qty": 1, "days": 1}]))
    assert exc_info.value.errors[0]["field"] == "items.0"
    assert "sku or name" in exc_info.value.errors[0]["message"]


def test_bad_client_email_rejected():
    payload = quote_payload()
    payload["client"]["email"] = "not-an-email"
    with pytest.raises(QuoteValidationError) as exc_info:
        validate_quote_input(payload)
    assert "client.email" in [e["field"] for e in exc_info.value.errors]


def test_create_quote_assigns_id(service):
    response = service.create_quote(validate_quote_input(quote_payload()))

    assert response["ok"] is True
    assert response["quoteId"] == "C-100"
    assert response["totals"]["total"] == pytest.approx(556.8)
    assert response["quote"]["discountBreakdown"]["autoDiscountTotal"] == pytest.approx(120)
    assert response["client"]["eventType"] == "Corporativo"


def test_unknown_item_does_not_consume_id(service):
    payload = quote_payload(items=[{"sku": "NOPE", "qty": 1, "days": 1}])
    with pytest.raises(ResolutionError):
        service.create_quote(validate_quote_input(payload))
    assert service.quote_ids.peek() == 99


def test_preview_is_repeatable(service):
    data = validate_quote_input(quote_payload(), model=PricingIn)
    assert service.preview(data).to_dict() == service.preview(data).to_dict()
    assert service.quote_ids.peek() == 99
