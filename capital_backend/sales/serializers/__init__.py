from .customer import CustomerSerializer
from .sale_transaction import SaleTransactionCreateSerializer, SaleTransactionSerializer

__all__ = [
    "CustomerSerializer",
    "SaleTransactionCreateSerializer",
    "SaleTransactionSerializer",
]
