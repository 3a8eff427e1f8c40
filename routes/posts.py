"""Posts blueprint: creator content with admin-controlled featuring."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from models import db
from models.fabric import MAX_PRICE, Fabric
from models.post import Post
from models.user import User
from utils.auth import current_account, current_user, login_required
from utils.errors import Forbidden, NotFound, ValidationError
from utils.image_cleanup import cleanup_on_failure, run_image_cleanup, schedule_image_cleanup
from utils.request_validation import parse_decimal, parse_id, parse_payload, parse_str
from utils.uploads import collect_images

POST_FOLDER = "posts"
TITLE_MAX_LENGTH = 200
# Fields a creator may never set through the create/update payloads.
PROTECTED_FIELDS = ("isFeatured", "creator", "creatorId")

posts_bp = Blueprint("posts", __name__)


def get_post_or_404(post_id: int) -> Post:
    post = db.session.get(Post, post_id)
    if post is None:
        raise NotFound("Post not found.")
    return post


def _strip_protected(data: dict) -> dict:
    return {key: value for key, value in data.items() if key not in PROTECTED_FIELDS}


def _validate_post_payload(data: dict, partial: bool = False) -> dict:
    errors = {}
    cleaned = {}

    if "title" in data or not partial:
        title = parse_str(data.get("title"))
        if title is None:
            errors["title"] = "Title must be a string"
        elif not title:
            errors["title"] = "Title is required"
        elif len(title) > TITLE_MAX_LENGTH:
            errors["title"] = f"Title must be at most {TITLE_MAX_LENGTH} characters"
        else:
            cleaned["title"] = title

    for field, column in (
        ("description", "description"),
        ("fabricLink", "fabric_link"),
    ):
        if field in data:
            value = parse_str(data.get(field))
            if value is None:
                errors[field] = f"{field} must be a string"
            else:
                cleaned[column] = value or None

    if "fabricType" in data:
        fabric_type = parse_str(data.get("fabricType"))
        if fabric_type is None:
            errors["fabricType"] = "fabricType must be a string"
        else:
            cleaned["fabric_type"] = fabric_type or "Other"

    if "price" in data:
        raw_price = data.get("price")
        if raw_price in (None, ""):
            cleaned["price"] = None
        else:
            price = parse_decimal(raw_price)
            if price is None or price < 0 or price > MAX_PRICE:
                errors["price"] = f"Price must be a number between 0 and {MAX_PRICE}"
            else:
                cleaned["price"] = price

    if "fabricId" in data:
        raw_fabric = data.get("fabricId")
        if raw_fabric in (None, ""):
            cleaned["fabric_id"] = None
        else:
            fabric_id = parse_id(raw_fabric)
            if fabric_id is None or db.session.get(Fabric, fabric_id) is None:
                errors["fabricId"] = "Referenced fabric does not exist"
            else:
                cleaned["fabric_id"] = fabric_id

    if errors:
        raise ValidationError(errors)
    return cleaned


def delete_post_with_images(post: Post) -> dict:
    """Delete ``post``, keep creator counters in step and clean up its images."""

    profile = post.creator.creator_profile if post.creator else None
    if profile is not None:
        profile.record_post_deleted(post.is_featured)
    tasks = schedule_image_cleanup(post.image_public_ids(), source="post")
    db.session.delete(post)
    db.session.commit()
    return run_image_cleanup(tasks)


def set_post_featured(post: Post, featured: bool) -> None:
    if post.is_featured == featured:
        return
    post.is_featured = featured
    profile = post.creator.creator_profile if post.creator else None
    if profile is not None:
        profile.record_feature_change(featured)


@posts_bp.route("", methods=["GET"])
def list_posts():
    posts = Post.query.order_by(Post.created_at.desc(), Post.id.desc()).all()
    return jsonify([post.to_dict() for post in posts])


@posts_bp.route("/featured", methods=["GET"])
def list_featured_posts():
    """Return featured posts for the homepage."""

    posts = (
        Post.query.filter_by(is_featured=True)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .all()
    )
    return jsonify([post.to_dict() for post in posts])


@posts_bp.route("/creator/<int:creator_id>", methods=["GET"])
def list_creator_posts(creator_id: int):
    if db.session.get(User, creator_id) is None:
        raise NotFound("Creator not found.")
    posts = (
        Post.query.filter_by(creator_id=creator_id)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .all()
    )
    return jsonify([post.to_dict() for post in posts])


@posts_bp.route("/<int:post_id>", methods=["GET"])
def get_post(post_id: int):
    return jsonify(get_post_or_404(post_id).to_dict())


@posts_bp.route("", methods=["POST"])
@login_required("creator", "admin")
def create_post():
    """Create a post owned by the caller; new posts are never featured."""

    data = _strip_protected(parse_payload(request))
    cleaned = _validate_post_payload(data)
    images = collect_images(request, data, POST_FOLDER, required=True)

    user = current_user()
    with cleanup_on_failure(images, source="post"):
        post = Post(creator=user, image_url=images[0].url, is_featured=False, **cleaned)
        post.append_images(images)
        db.session.add(post)

        profile = user.creator_profile
        if profile is not None:
            profile.record_post_created()
        db.session.commit()

    return jsonify(post.to_dict()), HTTPStatus.CREATED


@posts_bp.route("/<int:post_id>", methods=["PUT"])
@login_required()
def update_post(post_id: int):
    """Update the caller's own post; featuring and ownership are not editable here."""

    post = get_post_or_404(post_id)
    if post.creator_id != current_user().id:
        raise Forbidden("Not authorized to update this post.")

    data = _strip_protected(parse_payload(request, allow_empty=True))
    cleaned = _validate_post_payload(data, partial=True)
    images = collect_images(request, data, POST_FOLDER, required=False)

    with cleanup_on_failure(images, source="post"):
        for column, value in cleaned.items():
            setattr(post, column, value)
        post.append_images(images)
        db.session.commit()

    return jsonify(post.to_dict())


@posts_bp.route("/<int:post_id>", methods=["DELETE"])
@login_required()
def delete_post(post_id: int):
    """Delete a post; owners may delete their own, admins any."""

    post = get_post_or_404(post_id)
    account = current_account()
    is_owner = post.creator_id == account.user.id
    if not is_owner and not account.can_moderate_posts:
        raise Forbidden("Not authorized to delete this post.")

    if not is_owner:
        account.log_action("delete_post", "post", post.id, post.title)
    cleanup = delete_post_with_images(post)
    return jsonify({"message": "Post deleted successfully", "imageCleanup": cleanup})


@posts_bp.route("/<int:post_id>/feature", methods=["PATCH"])
@login_required("admin")
def toggle_feature_post(post_id: int):
    """Flip a post's featured flag."""

    post = get_post_or_404(post_id)
    set_post_featured(post, not post.is_featured)
    current_account().log_action(
        "feature_post" if post.is_featured else "unfeature_post", "post", post.id
    )
    db.session.commit()

    state = "featured" if post.is_featured else "unfeatured"
    return jsonify({"message": f"Post {state} successfully", "post": post.to_dict()})
