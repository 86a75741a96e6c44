"""
Pricing Engine - turns a cart of rental items into quote totals.

- Resolves every requested item against the catalog (all-or-nothing)
- Prices each line: daily price × quantity × days, plus informational deposit
- Applies the automatic day-tier discount per line unless excluded
- Applies the manual percentage + capped fixed discount over the eligible base
- Aggregates merchandise, discount, delivery fee, IVA and total
"""
import logging
from typing import Iterable, Optional

from ..catalog.catalog import Catalog, Product, load_catalog
from ..config.settings import get_settings, Settings
from .discounts import apply_auto_discount, compute_extra_discount
from .errors import ResolutionError
from .models import (
    ApplyTo,
    PricedLine,
    QuoteRequest,
    QuoteResult,
    RequestedItem,
)


logger = logging.getLogger(__name__)


def price_line(product: Product, item: RequestedItem, default_deposit_rate: float = 0.0) -> PricedLine:
    """Price a single resolved item, including its automatic discount."""
    line = PricedLine(
        sku=product.sku,
        name=product.name,
        category=product.category,
        qty=item.qty,
        days=item.days,
        daily_price=float(product.daily_price or 0),
        deposit_rate=float(product.deposit_rate or default_deposit_rate),
        discountable=product.discountable is not False,
    )
    line.add_trace("Catalog Lookup", "Found product in catalog", product.sku or product.name)

    line.subtotal = line.daily_price * line.qty * line.days
    line.add_trace(
        "Extension",
        f"${line.daily_price:.2f} × {line.qty} × {line.days} days",
        f"${line.subtotal:.2f}",
    )

    line.deposit = line.deposit_rate * line.subtotal
    if line.daily_price == 0:
        line.add_warning(f"Zero daily price for {line.sku or line.name}")

    return apply_auto_discount(line)


def compute_totals(
    lines: list[PricedLine],
    discount_rate: float = 0.0,
    discount_fixed: float = 0.0,
    discount_apply_to: ApplyTo = ApplyTo.DISCOUNTABLE,
    delivery_fee: float = 0.0,
    iva_rate: float = 0.16,
) -> QuoteResult:
    """
    Aggregate priced lines into quote totals.

    The automatic and manual layers are both computed against gross line
    subtotals and then summed.
    """
    discount_rate = discount_rate or 0.0
    discount_fixed = discount_fixed or 0.0
    delivery_fee = delivery_fee or 0.0
    apply_to = ApplyTo(discount_apply_to)
    merchandise = sum(line.subtotal for line in lines)
    auto_discount_total = sum(line.auto_discount for line in lines)
    extra = compute_extra_discount(lines, discount_rate, discount_fixed, apply_to)

    discount = auto_discount_total + extra.amount
    subtotal = merchandise - discount + delivery_fee
    iva = subtotal * iva_rate

    result = QuoteResult(
        lines=lines,
        merchandise=merchandise,
        auto_discount_total=auto_discount_total,
        extra=extra,
        discount_rate=discount_rate,
        discount_apply_to=apply_to,
        delivery_fee=delivery_fee,
        subtotal=subtotal,
        iva=iva,
        total=subtotal + iva,
        deposit_total=sum(line.deposit for line in lines),
        iva_rate=iva_rate,
    )

    result.add_trace("Merchandise", f"{len(lines)} line(s)", f"${merchandise:.2f}")
    result.add_trace("Auto Discount", "Day-tier discounts", f"${auto_discount_total:.2f}")
    result.add_trace(
        "Extra Discount",
        f"{discount_rate:.0%} + fixed over {apply_to.value} base ${extra.eligible_base:.2f}",
        f"${extra.amount:.2f}",
    )
    if discount_fixed and extra.fixed_extra < discount_fixed:
        result.warnings.append(
            f"Fixed discount ${discount_fixed:.2f} capped to ${extra.fixed_extra:.2f}"
        )
    if delivery_fee:
        result.add_trace("Delivery", "Delivery fee", f"${delivery_fee:.2f}")
    result.add_trace("IVA", f"{iva_rate:.0%} of ${subtotal:.2f}", f"${iva:.2f}")
    result.add_trace("Total", "Subtotal + IVA", f"${result.total:.2f}")

    for line in lines:
        for warning in line.warnings:
            if warning not in result.warnings:
                result.warnings.append(warning)

    return result


class PricingEngine:
    """
    Prices rental quotes against a catalog snapshot.

    Pipeline:
    1. Resolve each item by SKU, then by name; any miss aborts the quote
    2. Price each line and apply its automatic day-tier discount
    3. Apply the manual extra discount over the eligible base
    4. Add delivery fee and IVA
    """

    def __init__(self, settings: Optional[Settings] = None, catalog: Optional[Catalog] = None):
        """Initialize engine with settings and a catalog (loaded from disk if not given)."""
        self.settings = settings or get_settings()
        self.catalog = catalog if catalog is not None else self._load_catalog()

    def _load_catalog(self) -> Catalog:
        return load_catalog(self.settings.catalog_file, self.settings.default_deposit_rate)

    def reload_data(self) -> int:
        """Reload the catalog from disk and swap it in. Returns the product count."""
        catalog = self._load_catalog()
        self.catalog = catalog
        logger.info("Catalog reloaded: %d products", len(catalog))
        return len(catalog)

    def build_lines(self, items: Iterable[RequestedItem]) -> list[PricedLine]:
        """
        Resolve and price every item.

        Raises:
            ResolutionError: if any item has no catalog match. Nothing is
                returned for the items that did resolve.
        """
        catalog = self.catalog
        resolved = []
        missing = []
        for item in items:
            product = catalog.resolve(sku=item.sku, name=item.name)
            if product is None:
                missing.append(item.label)
                continue
            resolved.append((product, item))

        if missing:
            logger.info("Quote rejected, unresolved items: %s", ", ".join(missing))
            raise ResolutionError(missing)

        return [
            price_line(product, item, self.settings.default_deposit_rate)
            for product, item in resolved
        ]

    def calculate(self, request: QuoteRequest) -> QuoteResult:
        """
        Calculate a quote with full traceability.

        Args:
            request: QuoteRequest with items and discount inputs

        Returns:
            QuoteResult with priced lines, totals, trace and warnings
        """
        lines = self.build_lines(request.items)
        return compute_totals(
            lines,
            discount_rate=request.discount_rate,
            discount_fixed=request.discount_fixed,
            discount_apply_to=request.discount_apply_to,
            delivery_fee=request.delivery_fee,
            iva_rate=self.settings.iva_rate,
        )
