"""Cart blueprint: a per-user, quantity-merging shopping cart."""

from __future__ import annotations

from typing import Callable

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from models import db
from models.cart import MAX_QUANTITY, MIN_QUANTITY, Cart
from models.fabric import Fabric
from utils.auth import current_user, login_required
from utils.errors import (
    CartConflict,
    InsufficientQuantity,
    NotFound,
    OutOfStock,
    ValidationError,
)
from utils.request_validation import parse_float, parse_id, parse_json_request

cart_bp = Blueprint("cart", __name__)


def _get_or_create_cart(user_id: int) -> Cart:
    cart = Cart.query.filter_by(user_id=user_id).first()
    if cart is not None:
        return cart

    cart = Cart(user_id=user_id)
    cart.touch(current_app.config["CART_TTL"])
    db.session.add(cart)
    try:
        db.session.commit()
    except IntegrityError:
        # Another request created it first.
        db.session.rollback()
        cart = Cart.query.filter_by(user_id=user_id).one()
    return cart


def _mutate_cart(user_id: int, mutation: Callable[[Cart], None]) -> Cart:
    """Apply ``mutation`` and commit, re-applying it on a concurrent write."""

    retries = max(int(current_app.config.get("CART_WRITE_RETRIES", 3)), 1)
    for attempt in range(1, retries + 1):
        cart = _get_or_create_cart(user_id)
        mutation(cart)
        cart.touch(current_app.config["CART_TTL"])
        try:
            db.session.commit()
            return cart
        except (StaleDataError, IntegrityError) as exc:
            db.session.rollback()
            current_app.logger.info(
                "Cart %s write conflict on attempt %d: %s", user_id, attempt, exc
            )
    raise CartConflict()


def _parse_fabric_id(payload: dict) -> int:
    fabric_id = parse_id(payload.get("fabricId"))
    if fabric_id is None:
        raise ValidationError({"fabricId": "Fabric ID is required"})
    return fabric_id


_QUANTITY_LIMIT_MESSAGE = f"Quantity cannot exceed {MAX_QUANTITY:g} meters"


def _parse_quantity(raw, *, default: float | None = None) -> float:
    if raw is None or raw == "":
        if default is None:
            raise ValidationError({"quantity": "Quantity is required"})
        return default
    quantity = parse_float(raw)
    if quantity is None:
        raise ValidationError({"quantity": "Quantity must be a number"})
    if quantity < MIN_QUANTITY:
        raise InsufficientQuantity()
    if quantity > MAX_QUANTITY:
        raise ValidationError({"quantity": _QUANTITY_LIMIT_MESSAGE})
    return quantity


def _cart_response(cart: Cart, message: str | None = None):
    body = {"cart": cart.to_dict()}
    if message:
        body["message"] = message
    return jsonify(body)


@cart_bp.route("", methods=["GET"])
@login_required()
def get_cart():
    """Return the caller's cart, creating an empty one on first use."""

    return _cart_response(_get_or_create_cart(current_user().id))


@cart_bp.route("", methods=["POST"])
@login_required()
def add_to_cart():
    """Add meters of a fabric, merging with an existing line for it."""

    payload = parse_json_request(request)
    fabric_id = _parse_fabric_id(payload)
    quantity = _parse_quantity(payload.get("quantity"), default=1.0)

    fabric = db.session.get(Fabric, fabric_id)
    if fabric is None:
        raise NotFound("Fabric not found.")
    if not fabric.in_stock:
        raise OutOfStock()

    def _add(cart: Cart) -> None:
        existing = cart.find_item(fabric_id)
        if existing is not None and existing.quantity + quantity > MAX_QUANTITY:
            raise ValidationError({"quantity": _QUANTITY_LIMIT_MESSAGE})
        cart.add_item(db.session.get(Fabric, fabric_id), quantity)

    cart = _mutate_cart(current_user().id, _add)
    return _cart_response(cart, "Item added to cart")


@cart_bp.route("", methods=["PUT"])
@login_required()
def update_cart_item():
    """Replace the quantity of an existing line."""

    payload = parse_json_request(request)
    fabric_id = _parse_fabric_id(payload)
    quantity = _parse_quantity(payload.get("quantity"))

    def _update(cart: Cart) -> None:
        item = cart.find_item(fabric_id)
        if item is None:
            raise NotFound("Item not found in cart.")
        item.quantity = quantity

    cart = _mutate_cart(current_user().id, _update)
    return _cart_response(cart, "Cart updated")


@cart_bp.route("/<int:fabric_id>", methods=["DELETE"])
@login_required()
def remove_from_cart(fabric_id: int):
    """Remove a fabric's line; removing an absent line is a no-op."""

    cart = _mutate_cart(current_user().id, lambda cart: cart.remove_item(fabric_id))
    return _cart_response(cart, "Item removed from cart")


@cart_bp.route("", methods=["DELETE"])
@login_required()
def clear_cart():
    cart = _mutate_cart(current_user().id, lambda cart: cart.clear())
    return _cart_response(cart, "Cart cleared")
