from .catalog import Product
from .customers import Customer
from .sales import Sale, SaleItem, SALE_STATUS_COMPLETED, SALE_STATUS_CANCELED, PAYMENT_METHODS

__all__ = [
    'Product',
    'Customer',
    'Sale', 'SaleItem',
    'SALE_STATUS_COMPLETED', 'SALE_STATUS_CANCELED', 'PAYMENT_METHODS',
]
