"""
Shared API state - one engine and one quote ID generator per process.

Exposed as FastAPI dependencies so tests can swap them with
``app.dependency_overrides``.
"""
from typing import Optional

from fastapi import Depends

from ..config.settings import get_settings
from ..engine.pricing_engine import PricingEngine
from ..services.quote_ids import QuoteIdGenerator
from ..services.quote_service import QuoteService


_engine: Optional[PricingEngine] = None
_quote_ids: Optional[QuoteIdGenerator] = None


def get_engine() -> PricingEngine:
    """Get the process-wide engine, loading the catalog on first use."""
    global _engine
    if _engine is None:
        _engine = PricingEngine(get_settings())
    return _engine


def get_quote_ids() -> QuoteIdGenerator:
    global _quote_ids
    if _quote_ids is None:
        _quote_ids = QuoteIdGenerator(get_settings().sequence_file)
    return _quote_ids


def get_quote_service(
    engine: PricingEngine = Depends(get_engine),
    quote_ids: QuoteIdGenerator = Depends(get_quote_ids),
) -> QuoteService:
    return QuoteService(engine, quote_ids)
