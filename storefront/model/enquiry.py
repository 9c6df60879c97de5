# storefront/model/enquiry.py
import enum
from sqlalchemy.sql import func
from ..extensions import db


class EnquiryStatus(str, enum.Enum):
    Submitted = "Submitted"
    Contacted = "Contacted"
    InProgress = "In Progress"
    Resolved = "Resolved"

    @classmethod
    def parse(cls, value):
        if isinstance(value, str):
            for s in cls:
                if value == s.value or value == s.name:
                    return s
        return None


class Enquiry(db.Model):
    __tablename__ = "enquiry"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)
    mobile = db.Column(db.String(32), nullable=False)
    comment = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(32), nullable=False, default=EnquiryStatus.Submitted.value, index=True)

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, onupdate=func.now(), server_default=func.now())

    def as_api(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "mobile": self.mobile,
            "comment": self.comment,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
