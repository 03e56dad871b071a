"""
Rider application database model.
"""

from sqlalchemy import Column, String, JSON
from backend.app.db.session import Base
from backend.app.models.document import DocumentMixin
from backend.app.models.enums import RiderStatus


class RiderApplication(DocumentMixin, Base):
    """At most one application per email."""
    __tablename__ = "riders"

    __document_fields__ = {
        "email": "email",
        "name": "name",
        "region": "region",
        "status": "status",
        "created_at": "created_at",
    }

    id = Column(String(32), primary_key=True)

    # Application as sent (phone, district, bike details, ...)
    body = Column(JSON, nullable=False, default=dict)

    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    region = Column(String(100), nullable=True)
    status = Column(String(20), default=RiderStatus.PENDING.value, nullable=False, index=True)
    created_at = Column(String(64), nullable=True, index=True)

    def __repr__(self):
        return f"<RiderApplication(id={self.id}, email='{self.email}', status='{self.status}')>"
