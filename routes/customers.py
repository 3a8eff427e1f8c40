"""Customer wishlist blueprint."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from models import db
from models.fabric import Fabric
from utils.auth import current_account, login_required
from utils.errors import NotFound, ValidationError
from utils.request_validation import parse_id, parse_json_request

customers_bp = Blueprint("customers", __name__)


def _wishlist_response(profile, message: str | None = None):
    fabric_ids = profile.wishlist_fabric_ids()
    fabrics = {
        fabric.id: fabric
        for fabric in Fabric.query.filter(Fabric.id.in_(fabric_ids)).all()
    } if fabric_ids else {}
    items = [
        {
            "fabricId": entry["fabricId"],
            "addedAt": entry.get("addedAt"),
            "fabric": fabrics[entry["fabricId"]].to_summary()
            if entry["fabricId"] in fabrics
            else None,
        }
        for entry in profile.wishlist or []
    ]
    body = {"wishlist": items}
    if message:
        body["message"] = message
    return jsonify(body)


@customers_bp.route("/wishlist", methods=["GET"])
@login_required("customer")
def get_wishlist():
    return _wishlist_response(current_account().ensure_profile())


@customers_bp.route("/wishlist", methods=["POST"])
@login_required("customer")
def add_to_wishlist():
    """Add a fabric to the wishlist; adding it twice is a no-op."""

    payload = parse_json_request(request)
    fabric_id = parse_id(payload.get("fabricId"))
    if fabric_id is None:
        raise ValidationError({"fabricId": "Fabric ID is required"})
    if db.session.get(Fabric, fabric_id) is None:
        raise NotFound("Fabric not found.")

    profile = current_account().ensure_profile()
    profile.add_to_wishlist(fabric_id)
    db.session.commit()
    return _wishlist_response(profile, "Added to wishlist")


@customers_bp.route("/wishlist/<int:fabric_id>", methods=["DELETE"])
@login_required("customer")
def remove_from_wishlist(fabric_id: int):
    profile = current_account().ensure_profile()
    profile.remove_from_wishlist(fabric_id)
    db.session.commit()
    return _wishlist_response(profile, "Removed from wishlist")
