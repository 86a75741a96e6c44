"""
Rental Quote Package

Quote pricing for an event-rental business.
Prices a cart of catalog items with day-tier rental discounts, manual
discounts, delivery fee and IVA, and issues quote numbers.
"""

__version__ = "1.0.0"
