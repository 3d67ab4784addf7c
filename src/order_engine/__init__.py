"""Restaurant order processing engine: pricing, promo codes, stock and order lifecycle."""

__version__ = "0.1.0"
