"""
User and rider enumerations.

Defines the role types for the parcel courier system.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        ADMIN: Manages riders, roles and the audit trail
        EDITOR: Back-office staff
        RIDER: Delivers parcels (granted when a rider application is activated)
        USER: Customer sending parcels (default role)
    """
    ADMIN = "admin"
    EDITOR = "editor"
    RIDER = "rider"
    USER = "user"


class RiderStatus(str, enum.Enum):
    """
    Rider application status.

    Status flow:
        pending → active | rejected
    Activating an application promotes the applicant to the rider role.
    """
    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"
