from .catalog import Product
from .carts import Cart, CartItem
from .coupons import Coupon
from .orders import Order, OrderItem, DocumentSequence, ORDER_STATUSES, PAYMENT_METHODS, PAYMENT_STATUSES
from .auth import User, Address, SessionToken

__all__ = [
    'Product',
    'Cart', 'CartItem',
    'Coupon',
    'Order', 'OrderItem', 'DocumentSequence',
    'ORDER_STATUSES', 'PAYMENT_METHODS', 'PAYMENT_STATUSES',
    'User', 'Address', 'SessionToken',
]
