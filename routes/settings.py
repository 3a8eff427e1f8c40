"""Site settings blueprint (homepage hero images)."""

from __future__ import annotations

import json

from flask import Blueprint, jsonify, request

from models import db
from models.setting import HERO_IMAGES_KEY, Setting
from utils.auth import current_account, login_required
from utils.errors import NotFound, ValidationError
from utils.image_cleanup import cleanup_on_failure, run_image_cleanup, schedule_image_cleanup
from utils.request_validation import parse_json_request, parse_payload, parse_str
from utils.uploads import collect_images

HERO_FOLDER = "hero"
settings_bp = Blueprint("settings", __name__)


def _hero_entries() -> list[dict]:
    setting = Setting.get(HERO_IMAGES_KEY)
    return list(setting.value or []) if setting else []


def _hero_response(entries: list[dict], message: str | None = None):
    body = {
        "images": [entry["url"] for entry in entries],
        "imagesMeta": entries,
    }
    if message:
        body["message"] = message
    return jsonify(body)


def _parse_existing_images(raw) -> list[str]:
    if raw in (None, ""):
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            raise ValidationError({"existingImages": "existingImages must be a JSON list"}) from None
    if not isinstance(raw, list) or not all(isinstance(url, str) for url in raw):
        raise ValidationError({"existingImages": "existingImages must be a list of URLs"})
    return raw


@settings_bp.route("/hero-images", methods=["GET"])
def get_hero_images():
    return _hero_response(_hero_entries())


@settings_bp.route("/hero-images", methods=["PUT"])
@login_required("admin")
def update_hero_images():
    """Keep the listed existing images and append newly uploaded ones."""

    data = parse_payload(request, allow_empty=True)
    keep = _parse_existing_images(data.get("existingImages"))
    current = _hero_entries()

    kept = [entry for entry in current if entry["url"] in keep]
    known_urls = {entry["url"] for entry in current}
    kept += [{"url": url, "publicId": None} for url in keep if url not in known_urls]
    dropped = [entry for entry in current if entry["url"] not in keep]

    uploaded = collect_images(request, {}, HERO_FOLDER, required=False)
    entries = kept + [{"url": image.url, "publicId": image.public_id} for image in uploaded]

    with cleanup_on_failure(uploaded, source="hero"):
        Setting.upsert(HERO_IMAGES_KEY, entries)
        tasks = schedule_image_cleanup(
            (entry.get("publicId") for entry in dropped), source="hero"
        )
        current_account().log_action(
            "update_hero_images", "setting", details=f"{len(entries)} images"
        )
        db.session.commit()
    run_image_cleanup(tasks)

    return _hero_response(entries, "Hero images updated successfully")


@settings_bp.route("/hero-images", methods=["DELETE"])
@login_required("admin")
def delete_hero_image():
    """Remove one hero image by URL."""

    payload = parse_json_request(request)
    image_url = parse_str(payload.get("imageUrl"))
    if image_url is None:
        raise ValidationError({"imageUrl": "imageUrl must be a URL string"})
    if not image_url:
        raise ValidationError({"imageUrl": "imageUrl is required"})

    setting = Setting.get(HERO_IMAGES_KEY)
    if setting is None:
        raise NotFound("Hero images not configured.")

    entries = list(setting.value or [])
    removed = [entry for entry in entries if entry["url"] == image_url]
    remaining = [entry for entry in entries if entry["url"] != image_url]
    setting.value = remaining

    tasks = schedule_image_cleanup((entry.get("publicId") for entry in removed), source="hero")
    current_account().log_action("delete_hero_image", "setting", details=image_url)
    db.session.commit()
    run_image_cleanup(tasks)

    return _hero_response(remaining, "Hero image deleted successfully")
