"""
User database model.

Users are keyed by email, the subject claim the identity provider verifies.
"""

from sqlalchemy import Column, String, JSON
from backend.app.db.session import Base
from backend.app.models.document import DocumentMixin
from backend.app.models.enums import UserRole


class User(DocumentMixin, Base):
    """
    User directory entry.

    Created on first registration; role changes only through the admin role
    update or rider activation.
    """
    __tablename__ = "users"

    __document_fields__ = {
        "email": "email",
        "displayName": "display_name",
        "photoURL": "photo_url",
        "role": "role",
        "created_at": "created_at",
        "last_log_in": "last_log_in",
    }

    id = Column(String(32), primary_key=True)

    # Profile as sent
    body = Column(JSON, nullable=False, default=dict)

    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(255), nullable=True, index=True)
    photo_url = Column(String(1024), nullable=True)
    role = Column(String(20), default=UserRole.USER.value, nullable=True)
    created_at = Column(String(64), nullable=True)
    last_log_in = Column(String(64), nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
