"""
PATH: sales/models/__init__.py

Sales models export surface.
"""

from .customer import Customer
from .sale_transaction import SaleTransaction

__all__ = [
    "Customer",
    "SaleTransaction",
]
