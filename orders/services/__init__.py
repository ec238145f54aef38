"""
OrderFlow Services Layer

Services sit between the validation core and the database:
- Validation: pure checks, no I/O (orders.validation)
- Services: reference checks, transactions, writes, audit logging

All writes of orders, accounts and stock should flow through these services.
"""

from .order_service import OrderService
from .user_service import UserService
from .stock_service import StockService

__all__ = [
    "OrderService",
    "UserService",
    "StockService",
]
