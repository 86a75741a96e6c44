"""
Discount rules - the two discount layers applied to a quote.

Automatic layer: a per-line rate keyed on rental days, skipped for lines
classified as excluded. Manual layer: a percentage plus a capped fixed
amount over an eligible base. Both are computed against gross line
subtotals; the aggregator sums them.
"""
import unicodedata
from typing import Iterable

from .models import ApplyTo, ExclusionReason, ExtraDiscount, PricedLine


EXCLUDED_CATEGORIES = frozenset({'personal', 'otros'})

# Travel expenses, lodging and freight are pass-through costs
EXCLUDED_NAME_KEYWORDS = ('viatic', 'hosped', 'flete')

# (min_days, rate), checked from the longest rental down
DAY_RATE_TIERS = (
    (30, 0.60),
    (7, 0.50),
    (3, 0.20),
    (2, 0.15),
)


def _fold(text: str) -> str:
    """Lowercase and strip accents so 'Viáticos' matches 'viatic'."""
    decomposed = unicodedata.normalize('NFKD', str(text or ''))
    return ''.join(c for c in decomposed if not unicodedata.combining(c)).strip().lower()


def days_discount_rate(days: int) -> float:
    """Automatic discount rate for a rental of ``days`` days (step function)."""
    for min_days, rate in DAY_RATE_TIERS:
        if days >= min_days:
            return rate
    return 0.0


def classify_exclusion(category: str, name: str, discountable: bool = True) -> ExclusionReason:
    """
    Decide whether a line is left out of the automatic day discount.

    Category is checked first, then name keywords, then the product's
    ``discountable`` flag.
    """
    if _fold(category) in EXCLUDED_CATEGORIES:
        return ExclusionReason.EXCLUDED_BY_CATEGORY

    folded_name = _fold(name)
    if any(keyword in folded_name for keyword in EXCLUDED_NAME_KEYWORDS):
        return ExclusionReason.EXCLUDED_BY_KEYWORD

    if discountable is False:
        return ExclusionReason.EXCLUDED_BY_FLAG

    return ExclusionReason.NOT_EXCLUDED


def apply_auto_discount(line: PricedLine) -> PricedLine:
    """Classify ``line`` and set its automatic rate and discount in place."""
    line.exclusion_reason = classify_exclusion(line.category, line.name, line.discountable)
    if line.excluded:
        line.auto_rate = 0.0
        line.add_trace("Auto Discount", f"Excluded ({line.exclusion_reason.value})", "0%")
    else:
        line.auto_rate = days_discount_rate(line.days)
        line.add_trace("Auto Discount", f"{line.days} day tier", f"{line.auto_rate:.0%}")
    line.auto_discount = line.subtotal * line.auto_rate
    return line


def eligible_base(lines: Iterable[PricedLine], apply_to: ApplyTo = ApplyTo.DISCOUNTABLE) -> float:
    """Sum of gross subtotals the manual discount is computed against."""
    if ApplyTo(apply_to) is ApplyTo.ALL:
        return sum(line.subtotal for line in lines)
    # Same exclusion flag as the automatic layer
    return sum(line.subtotal for line in lines if not line.excluded)


def compute_extra_discount(
    lines: Iterable[PricedLine],
    discount_rate: float = 0.0,
    discount_fixed: float = 0.0,
    apply_to: ApplyTo = ApplyTo.DISCOUNTABLE,
) -> ExtraDiscount:
    """
    Compute the manual discount layer.

    The fixed portion is clamped so that percentage + fixed never exceeds
    the eligible base.
    """
    base = eligible_base(lines, apply_to)
    pct_extra = base * (discount_rate or 0.0)
    max_fixed = max(0.0, base - pct_extra)
    fixed_extra = min(discount_fixed or 0.0, max_fixed)
    return ExtraDiscount(
        eligible_base=base,
        pct_extra=pct_extra,
        max_fixed=max_fixed,
        fixed_extra=fixed_extra,
    )
