"""Pricing engines used by the quoter."""

from .base import PriceModel
from .bs_pricer import BlackScholesPricer

__all__ = [
    "PriceModel",
    "BlackScholesPricer",
]
