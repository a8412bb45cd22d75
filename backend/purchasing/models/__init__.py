from .audit import AuditMixin
from .items import Item
from .users import User
from .purchase_orders import BIGINT_MAX, INTEGER_MAX, PurchaseOrderHeader, PurchaseOrderDetail

__all__ = [
    'AuditMixin',
    'Item',
    'User',
    'PurchaseOrderHeader', 'PurchaseOrderDetail',
    'INTEGER_MAX', 'BIGINT_MAX',
]
