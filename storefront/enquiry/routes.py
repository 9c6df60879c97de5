# storefront/enquiry/routes.py
from flask import request
from ..services import enquiry_service
from ..utils.api import ok
from ..utils.decorators import admin_required
from ..utils.request import json_body
from . import bp

# public contact form
@bp.post("")
def create_enquiry():
    enq = enquiry_service.create_enquiry(json_body())
    return ok("Enquiry created successfully", enq.as_api(), status=201)

@bp.get("")
@admin_required
def list_enquiries():
    items = enquiry_service.list_enquiries(request.args)
    if not items:
        return ok("There's no Enquiry", [])
    return ok("All Enquiry", [e.as_api() for e in items])

@bp.get("/<int:enquiry_id>")
@admin_required
def get_enquiry(enquiry_id: int):
    enq = enquiry_service.get_enquiry(enquiry_id)
    return ok(f"Enquiry {enq.name}", enq.as_api())

@bp.put("/<int:enquiry_id>")
@admin_required
def update_enquiry(enquiry_id: int):
    enq = enquiry_service.update_enquiry(enquiry_id, json_body())
    return ok(f"Enquiry {enq.name} Updated", enq.as_api())

@bp.delete("/<int:enquiry_id>")
@admin_required
def delete_enquiry(enquiry_id: int):
    payload = enquiry_service.delete_enquiry(enquiry_id)
    return ok(f"Enquiry {payload['name']} Deleted", payload)
