#!/usr/bin/env python
"""
Price a quote request from a JSON file and print the breakdown.

Usage:
    python scripts/preview_quote.py data/sample_quote.json
"""
import json
import logging
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from rental_quote.config.settings import get_settings
from rental_quote.engine import PricingEngine, ResolutionError, QuoteValidationError
from rental_quote.services.quote_service import PricingIn, validate_quote_input


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)

    with open(sys.argv[1], 'r', encoding='utf-8') as f:
        payload = json.load(f)

    settings = get_settings()
    engine = PricingEngine(settings)
    print(f"Catalog: {settings.catalog_file} ({len(engine.catalog)} products)")
    print(f"IVA rate: {settings.iva_rate:.0%}")
    print()

    try:
        data = validate_quote_input(payload, model=PricingIn)
        result = engine.calculate(data.to_request())
    except QuoteValidationError as e:
        print("❌ INVALID INPUT")
        for error in e.errors:
            print(f"  {error['field']}: {error['message']}")
        sys.exit(1)
    except ResolutionError as e:
        print(f"❌ {e}")
        sys.exit(1)

    for line in result.lines:
        print(f"{line.sku} {line.name}")
        print(line.get_trace_text())
        print()

    print(result.get_trace_text())
    for warning in result.warnings:
        print(f"  WARNING: {warning}")
    print()
    print("=" * 40)
    print(f"  Merchandise: {result.merchandise:>12,.2f}")
    print(f"  Discount:    {-result.discount:>12,.2f}")
    print(f"  Delivery:    {result.delivery_fee:>12,.2f}")
    print(f"  Subtotal:    {result.subtotal:>12,.2f}")
    print(f"  IVA:         {result.iva:>12,.2f}")
    print(f"  Total:       {result.total:>12,.2f}")
    print(f"  Deposit:     {result.deposit_total:>12,.2f}")


if __name__ == "__main__":
    main()
