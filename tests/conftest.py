import os
import sys
from pathlib import Path

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from rental_quote.catalog.catalog import Catalog, Product
from rental_quote.config.settings import Settings
from rental_quote.engine import PricingEngine


def make_settings(data_dir: Path, iva_rate: float = 0.16, default_deposit_rate: float = 0.0) -> Settings:
    return Settings(
        project_root=data_dir,
        data_dir=data_dir,
        iva_rate=iva_rate,
        default_deposit_rate=default_deposit_rate,
        catalog_candidates=(data_dir / 'catalog.csv', data_dir / 'catalog.json'),
    )


@pytest.fixture
def products():
    return [
        Product(sku="BOC-001", name="Bocina activa", category="Audio", daily_price=100.0, deposit_rate=0.2),
        Product(sku="PAN-020", name="Pantalla LED", category="Video", daily_price=400.0, deposit_rate=0.3),
        Product(sku="STF-001", name="Técnico de audio", category="Personal", daily_price=200.0),
        Product(sku="VIA-001", name="Viáticos por persona", category="Logística", daily_price=150.0),
        Product(sku="OTR-001", name="Cargo por maniobra", category="Otros", daily_price=200.0),
        Product(sku="NDS-001", name="Pista de baile", category="Mobiliario", daily_price=300.0, discountable=False),
    ]


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def engine(settings, products):
    return PricingEngine(settings, catalog=Catalog(products))
