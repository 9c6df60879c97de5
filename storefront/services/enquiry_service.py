# storefront/services/enquiry_service.py
from flask import current_app

from ..extensions import db
from ..errors import NotFoundError, ValidationError
from ..model import Enquiry, EnquiryStatus

REQUIRED = ("name", "email", "mobile", "comment")


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    return value.strip() if isinstance(value, str) else ""

def _parse_status(raw) -> EnquiryStatus:
    status = EnquiryStatus.parse(raw)
    if status is None:
        raise ValidationError(f"Invalid status: {raw}")
    return status

def create_enquiry(data: dict) -> Enquiry:
    values = {k: _text(data, k) for k in REQUIRED}
    if not all(values.values()):
        raise ValidationError("Enquiry name, email, mobile, comment are required")

    enq = Enquiry(
        name=values["name"],
        email=values["email"].lower(),
        mobile=values["mobile"],
        comment=values["comment"],
        status=EnquiryStatus.Submitted.value,
    )
    db.session.add(enq)
    db.session.commit()
    current_app.logger.info("enquiry %s submitted by %s", enq.id, enq.email)
    return enq

def get_enquiry(enquiry_id: int) -> Enquiry:
    enq = db.session.get(Enquiry, enquiry_id)
    if not enq:
        raise NotFoundError("Enquiry not found")
    return enq

def list_enquiries(args):
    """Newest first; ``?status=`` narrows to one status."""
    query = Enquiry.query
    if args.get("status"):
        query = query.filter_by(status=_parse_status(args.get("status")).value)
    return query.order_by(Enquiry.id.desc()).all()

def update_enquiry(enquiry_id: int, data: dict) -> Enquiry:
    enq = get_enquiry(enquiry_id)
    for key in REQUIRED:
        if key in data:
            value = _text(data, key)
            if not value:
                raise ValidationError(f"{key} cannot be empty")
            setattr(enq, key, value.lower() if key == "email" else value)
    if "status" in data:
        enq.status = _parse_status(data.get("status")).value
    db.session.commit()
    return enq

def delete_enquiry(enquiry_id: int) -> dict:
    enq = get_enquiry(enquiry_id)
    payload = enq.as_api()
    db.session.delete(enq)
    db.session.commit()
    return payload
