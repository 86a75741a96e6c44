"""Engine subpackage - core pricing logic and discount rules."""
from .pricing_engine import PricingEngine, compute_totals, price_line
from .models import QuoteRequest, RequestedItem, PricedLine, QuoteResult
from ..catalog.catalog import Product
from .errors import ResolutionError, QuoteValidationError

__all__ = [
    'PricingEngine', 'compute_totals', 'price_line',
    'QuoteRequest', 'RequestedItem', 'PricedLine', 'QuoteResult', 'Product',
    'ResolutionError', 'QuoteValidationError',
]
