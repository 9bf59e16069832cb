"""Order status, payment status and actor role enumerations."""

from enum import Enum


class OrderStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class ActorRole(Enum):
    CUSTOMER = "customer"
    CHEF = "chef"
    ADMIN = "admin"  # Operator
