"""Fabric catalog blueprint."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy import or_

from models import db
from models.fabric import FABRIC_TYPES, MAX_PRICE, Fabric
from utils.auth import current_account, login_required
from utils.errors import NotFound, ValidationError
from utils.image_cleanup import cleanup_on_failure, run_image_cleanup, schedule_image_cleanup
from utils.request_validation import (
    parse_bool,
    parse_decimal,
    parse_page_args,
    parse_payload,
    parse_str,
)
from utils.uploads import collect_images

FABRIC_FOLDER = "fabrics"
fabrics_bp = Blueprint("fabrics", __name__)


def _get_fabric_or_404(fabric_id: int) -> Fabric:
    fabric = db.session.get(Fabric, fabric_id)
    if fabric is None:
        raise NotFound("Fabric not found.")
    return fabric


def _validate_fabric_payload(data: dict, partial: bool = False) -> dict:
    """Return cleaned column values or raise a field-level validation error."""

    errors = {}
    cleaned = {}

    if "name" in data or not partial:
        name = parse_str(data.get("name"))
        if name is None:
            errors["name"] = "Fabric name must be a string"
        elif not name:
            errors["name"] = "Fabric name is required"
        else:
            cleaned["name"] = name

    if "price" in data or not partial:
        price = parse_decimal(data.get("price"))
        if price is None or price < 0 or price > MAX_PRICE:
            errors["price"] = f"Price must be a number between 0 and {MAX_PRICE}"
        else:
            cleaned["price"] = price

    if "fabricType" in data or not partial:
        fabric_type = data.get("fabricType")
        if fabric_type not in FABRIC_TYPES:
            errors["fabricType"] = "Fabric type must be one of " + ", ".join(FABRIC_TYPES)
        else:
            cleaned["fabric_type"] = fabric_type

    for field, column in (("description", "description"), ("color", "color")):
        if field in data:
            value = parse_str(data.get(field))
            if value is None:
                errors[field] = f"{field} must be a string"
            else:
                cleaned[column] = value or None

    if "inStock" in data:
        in_stock = parse_bool(data.get("inStock"))
        if in_stock is None:
            errors["inStock"] = "inStock must be boolean"
        else:
            cleaned["in_stock"] = in_stock

    if errors:
        raise ValidationError(errors)
    return cleaned


@fabrics_bp.route("", methods=["GET"])
def list_fabrics():
    """Return a page of fabrics with optional filters."""

    page, limit = parse_page_args(
        request.args,
        current_app.config.get("DEFAULT_PAGE_SIZE", 12),
        current_app.config.get("MAX_PAGE_SIZE", 100),
    )
    query = Fabric.query

    fabric_type = request.args.get("type")
    if fabric_type:
        if fabric_type not in FABRIC_TYPES:
            raise ValidationError({"type": "Unknown fabric type"})
        query = query.filter(Fabric.fabric_type == fabric_type)

    in_stock = parse_bool(request.args.get("inStock"))
    if in_stock is not None:
        query = query.filter(Fabric.in_stock.is_(in_stock))

    search_term = request.args.get("q")
    if search_term:
        like = f"%{search_term.lower()}%"
        query = query.filter(
            or_(
                db.func.lower(Fabric.name).like(like),
                db.func.lower(Fabric.description).like(like),
                db.func.lower(Fabric.color).like(like),
            )
        )

    pagination = query.order_by(Fabric.created_at.desc(), Fabric.id.desc()).paginate(
        page=page, per_page=limit, error_out=False
    )
    return jsonify(
        {
            "fabrics": [fabric.to_dict() for fabric in pagination.items],
            "page": page,
            "limit": limit,
            "total": pagination.total,
            "pages": pagination.pages,
        }
    )


@fabrics_bp.route("/<int:fabric_id>", methods=["GET"])
def get_fabric(fabric_id: int):
    return jsonify(_get_fabric_or_404(fabric_id).to_dict())


@fabrics_bp.route("", methods=["POST"])
@login_required("admin")
def create_fabric():
    """Create a fabric; at least one image is required and the first is primary."""

    data = parse_payload(request)
    cleaned = _validate_fabric_payload(data)
    images = collect_images(request, data, FABRIC_FOLDER, required=True)

    with cleanup_on_failure(images, source="fabric"):
        fabric = Fabric(image_url=images[0].url, **cleaned)
        fabric.append_images(images)
        db.session.add(fabric)
        db.session.flush()
        current_account().log_action("create_fabric", "fabric", fabric.id, fabric.name)
        db.session.commit()

    return jsonify({"message": "Fabric created successfully", "fabric": fabric.to_dict()}), HTTPStatus.CREATED


@fabrics_bp.route("/<int:fabric_id>", methods=["PUT"])
@login_required("admin")
def update_fabric(fabric_id: int):
    """Update fabric fields; newly supplied images are appended."""

    fabric = _get_fabric_or_404(fabric_id)
    data = parse_payload(request, allow_empty=True)
    cleaned = _validate_fabric_payload(data, partial=True)
    images = collect_images(request, data, FABRIC_FOLDER, required=False)

    with cleanup_on_failure(images, source="fabric"):
        for column, value in cleaned.items():
            setattr(fabric, column, value)
        fabric.append_images(images)
        current_account().log_action("update_fabric", "fabric", fabric.id)
        db.session.commit()

    return jsonify({"message": "Fabric updated successfully", "fabric": fabric.to_dict()})


@fabrics_bp.route("/<int:fabric_id>", methods=["DELETE"])
@login_required("admin")
def delete_fabric(fabric_id: int):
    """Delete a fabric, then clean up its stored images on a best-effort basis."""

    fabric = _get_fabric_or_404(fabric_id)
    tasks = schedule_image_cleanup(fabric.image_public_ids(), source="fabric")
    current_account().log_action("delete_fabric", "fabric", fabric.id, fabric.name)
    db.session.delete(fabric)
    db.session.commit()

    cleanup = run_image_cleanup(tasks)
    return jsonify({"message": "Fabric deleted successfully", "imageCleanup": cleanup})
