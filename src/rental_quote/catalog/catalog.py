"""
Catalog - loads rentable products from CSV/JSON and resolves cart items.

A Catalog is an immutable snapshot. Reloading builds a new snapshot and the
owner swaps its reference; readers never see a half-loaded catalog.
"""
import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd


logger = logging.getLogger(__name__)

# Canonical field -> accepted column names, first present wins
COLUMN_ALIASES = {
    'sku': ('sku', 'SKU'),
    'name': ('name', 'Nombre', 'descripcion', 'description'),
    'category': ('category', 'Categoria'),
    'section': ('section', 'seccion', 'section_name', 'sectionName'),
    'description': ('desc', 'Descripcion', 'description'),
    'daily_price': ('dailyPrice', 'price', 'Precio'),
    'deposit_rate': ('depositRate', 'Deposito', 'deposit'),
    'image_url': ('imageUrl', 'image_url', 'image', 'img', 'imagen', 'url'),
    'active': ('active', 'Activo'),
    'discountable': ('discountable', 'Descuento'),
}

FALSE_VALUES = frozenset({'0', 'false', 'no', 'inactive', 'inactivo', 'f', 'off'})

SECTION_HINTS = ('corporativo', 'social', 'todos', 'ambos', 'all')


@dataclass(frozen=True)
class Product:
    """A rentable catalog item. Read-only once loaded."""
    sku: str
    name: str
    category: str
    daily_price: float
    deposit_rate: float = 0.0
    discountable: bool = True
    active: bool = True
    section: str = ""
    description: str = ""
    image_url: str = ""

    def to_dict(self) -> dict:
        return {
            "sku": self.sku,
            "name": self.name,
            "category": self.category,
            "section": self.section,
            "description": self.description,
            "dailyPrice": self.daily_price,
            "depositRate": self.deposit_rate,
            "imageUrl": self.image_url,
            "active": self.active,
            "discountable": self.discountable,
        }


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return str(value).strip() == ''


def _pick(row: dict, field: str):
    for column in COLUMN_ALIASES[field]:
        value = row.get(column)
        if not _is_blank(value):
            return value
    return None


def parse_bool(value, default: bool = True) -> bool:
    """Parse a catalog flag; blank keeps the default."""
    if _is_blank(value):
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in FALSE_VALUES


def parse_number(value, default: float = 0.0) -> float:
    if _is_blank(value):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return default if math.isnan(number) else number


def _text(value) -> str:
    return '' if _is_blank(value) else str(value).strip()


def normalize_row(row: dict, default_deposit_rate: float = 0.0) -> Product:
    """Build a Product from a raw catalog row using the column aliases."""
    category = _text(_pick(row, 'category'))
    section = _text(_pick(row, 'section'))
    if not section:
        lowered = category.lower()
        if any(hint in lowered for hint in SECTION_HINTS):
            section = lowered

    return Product(
        sku=_text(_pick(row, 'sku')),
        name=_text(_pick(row, 'name')),
        category=category,
        section=section,
        description=_text(_pick(row, 'description')),
        daily_price=parse_number(_pick(row, 'daily_price'), 0.0),
        deposit_rate=parse_number(_pick(row, 'deposit_rate'), default_deposit_rate),
        image_url=_text(_pick(row, 'image_url')),
        active=parse_bool(_pick(row, 'active'), True),
        discountable=parse_bool(_pick(row, 'discountable'), True),
    )


class Catalog:
    """
    Read-only product lookup.

    Resolution order:
    1. SKU, case-insensitive exact match
    2. Name, case-insensitive exact match
    Duplicates keep the first row seen.
    """

    def __init__(self, products: Iterable[Product] = (), source: Optional[Path] = None):
        self.products: tuple[Product, ...] = tuple(products)
        self.source = source
        self._by_sku: dict[str, Product] = {}
        self._by_name: dict[str, Product] = {}
        for product in self.products:
            if product.sku:
                self._by_sku.setdefault(product.sku.lower(), product)
            if product.name:
                self._by_name.setdefault(product.name.lower(), product)

    def __len__(self) -> int:
        return len(self.products)

    def __iter__(self):
        return iter(self.products)

    def resolve(self, sku: Optional[str] = None, name: Optional[str] = None) -> Optional[Product]:
        """Find a product by SKU, falling back to name. Returns None when neither matches."""
        sku_key = str(sku or '').strip().lower()
        name_key = str(name or '').strip().lower()

        product = None
        if sku_key:
            product = self._by_sku.get(sku_key)
        if product is None and name_key:
            product = self._by_name.get(name_key)
        return product

    def search(self, text: Optional[str] = None, limit: Optional[int] = None) -> list[Product]:
        """Products whose SKU or name contains ``text`` (case-insensitive)."""
        needle = str(text or '').strip().lower()
        matches = [
            p for p in self.products
            if not needle or needle in p.sku.lower() or needle in p.name.lower()
        ]
        return matches[:limit] if limit else matches


def _read_rows(path: Path) -> list[dict]:
    if path.suffix.lower() == '.json':
        with open(path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
        return raw if isinstance(raw, list) else []

    df = pd.read_csv(path, dtype=str, encoding='utf-8-sig', skip_blank_lines=True)
    df.columns = [str(c).strip() for c in df.columns]
    return df.to_dict(orient='records')


def load_catalog(path: Optional[Path], default_deposit_rate: float = 0.0) -> Catalog:
    """
    Load the catalog file at ``path``.

    A missing or unreadable file yields an empty catalog; the error is logged
    so the service can keep answering while the file is fixed and reloaded.
    """
    if path is None or not Path(path).exists():
        logger.warning("No catalog file found (looked for %s)", path)
        return Catalog()

    path = Path(path)
    try:
        rows = _read_rows(path)
        products = []
        for index, row in enumerate(rows):
            if not isinstance(row, dict):
                logger.warning("Skipping catalog row %d in %s: not an object (%r)", index, path, row)
                continue
            products.append(normalize_row(row, default_deposit_rate))
    except Exception:
        logger.exception("Error loading catalog from %s", path)
        return Catalog(source=path)

    active = [p for p in products if p.active]
    logger.info("Loaded %d active products (%d rows) from %s", len(active), len(products), path)
    return Catalog(active, source=path)
