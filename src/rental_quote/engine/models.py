"""
Data models for the pricing engine.

Uses dataclasses for structured, type-safe data representation.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ExclusionReason(str, Enum):
    """Why a line is (or is not) left out of the automatic day discount."""
    NOT_EXCLUDED = "not_excluded"
    EXCLUDED_BY_CATEGORY = "excluded_by_category"
    EXCLUDED_BY_KEYWORD = "excluded_by_keyword"
    EXCLUDED_BY_FLAG = "excluded_by_flag"

    @property
    def excluded(self) -> bool:
        return self is not ExclusionReason.NOT_EXCLUDED


class ApplyTo(str, Enum):
    """Which lines form the base for the manual extra discount."""
    DISCOUNTABLE = "discountable"
    ALL = "all"


@dataclass
class TraceStep:
    """A single step in the pricing resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class RequestedItem:
    """One cart entry as the client asked for it."""
    qty: int
    days: int
    sku: Optional[str] = None
    name: Optional[str] = None

    @property
    def label(self) -> str:
        """Identifier reported back when the item cannot be resolved."""
        return self.sku or self.name or "?"


@dataclass
class PricedLine:
    """A requested item resolved against the catalog and priced."""
    sku: str
    name: str
    category: str
    qty: int
    days: int
    daily_price: float
    deposit_rate: float
    discountable: bool
    subtotal: float = 0.0
    deposit: float = 0.0
    exclusion_reason: ExclusionReason = ExclusionReason.NOT_EXCLUDED
    auto_rate: float = 0.0
    auto_discount: float = 0.0
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    @property
    def excluded(self) -> bool:
        return self.exclusion_reason.excluded

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace for this line."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        """Add a warning for this line."""
        self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "sku": self.sku,
            "name": self.name,
            "category": self.category,
            "qty": self.qty,
            "days": self.days,
            "dailyPrice": self.daily_price,
            "depositRate": self.deposit_rate,
            "discountable": self.discountable,
            "subtotal": self.subtotal,
            "deposit": self.deposit,
            "excluded": self.excluded,
            "exclusionReason": self.exclusion_reason.value,
            "autoRate": self.auto_rate,
            "autoDiscount": self.auto_discount,
        }


@dataclass
class QuoteRequest:
    """A pricing request: the cart plus the manual discount and delivery inputs."""
    items: list[RequestedItem]
    discount_rate: float = 0.0
    discount_fixed: float = 0.0
    discount_apply_to: ApplyTo = ApplyTo.DISCOUNTABLE
    delivery_fee: float = 0.0


@dataclass(frozen=True)
class ExtraDiscount:
    """Breakdown of the manual discount layer."""
    eligible_base: float
    pct_extra: float
    max_fixed: float
    fixed_extra: float

    @property
    def amount(self) -> float:
        return self.pct_extra + self.fixed_extra


@dataclass
class QuoteResult:
    """Complete result of a pricing calculation."""
    lines: list[PricedLine]
    merchandise: float
    auto_discount_total: float
    extra: ExtraDiscount
    discount_rate: float
    discount_apply_to: ApplyTo
    delivery_fee: float
    subtotal: float
    iva: float
    total: float
    deposit_total: float
    iva_rate: float
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    @property
    def extra_discount(self) -> float:
        return self.extra.amount

    @property
    def discount(self) -> float:
        return self.auto_discount_total + self.extra.amount

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the result-level trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable result trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def totals(self) -> dict:
        """Short totals block returned alongside a created quote."""
        return {
            "subtotal": self.subtotal,
            "discount": self.discount,
            "iva": self.iva,
            "total": self.total,
        }

    def to_dict(self) -> dict:
        """Serialize to the output contract consumed by documents and storage."""
        return {
            "lines": [line.to_dict() for line in self.lines],
            "merchandise": self.merchandise,
            "discount": self.discount,
            "discountBreakdown": {
                "autoDiscountTotal": self.auto_discount_total,
                "extraDiscount": self.extra_discount,
                "discountRate": self.discount_rate,
                "discountApplyTo": self.discount_apply_to.value,
            },
            "deliveryFee": self.delivery_fee,
            "subtotal": self.subtotal,
            "iva": self.iva,
            "total": self.total,
            "depositTotal": self.deposit_total,
            "ivaRate": self.iva_rate,
        }
