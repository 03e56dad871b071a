"""
Parcel Status Enumerations.
"""

import enum


class DeliveryStatus(str, enum.Enum):
    """
    Delivery status enumeration.

    Status flow:
        created → in_transit → delivered
    The flow is driven by callers and not validated server side.
    """
    CREATED = "created"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"


class PaymentStatus(str, enum.Enum):
    """
    Payment status enumeration.

    unpaid → paid, only through the payment coordinator. There is no way back.
    """
    UNPAID = "unpaid"
    PAID = "paid"
