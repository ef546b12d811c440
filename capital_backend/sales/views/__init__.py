from .customer import CustomerViewSet
from .sale_transaction import SaleTransactionViewSet

__all__ = [
    "CustomerViewSet",
    "SaleTransactionViewSet",
]
