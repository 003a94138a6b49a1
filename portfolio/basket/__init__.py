"""
Basket — 用户自选加权篮子

Core types: PortfolioEntry, Basket
Persistence: load/save JSON, CSV ticker import
"""
from portfolio.basket.schema import PortfolioEntry, validate_weight
from portfolio.basket.manager import (
    Basket,
    import_csv,
    load_basket,
    save_basket,
)

__all__ = [
    "PortfolioEntry",
    "validate_weight",
    "Basket",
    "import_csv",
    "load_basket",
    "save_basket",
]
