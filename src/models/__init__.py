from src.models.base import Base
from src.models.product import Product

__all__ = [
    "Base",
    "Product",
]
