"""Admin moderation blueprint."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from models import db
from models.post import Post
from models.user import User
from routes.posts import delete_post_with_images, get_post_or_404, set_post_featured
from utils.auth import current_account, login_required
from utils.errors import ValidationError
from utils.request_validation import parse_bool, parse_json_request

admin_bp = Blueprint("admin", __name__)


@admin_bp.before_request
@login_required("admin")
def _require_admin():
    """Every admin route requires an authenticated admin."""


@admin_bp.route("/posts", methods=["GET"])
def list_all_posts():
    """Return every post with aggregate counts."""

    posts = Post.query.order_by(Post.created_at.desc(), Post.id.desc()).all()
    return jsonify(
        {
            "total": len(posts),
            "featured": sum(1 for post in posts if post.is_featured),
            "posts": [post.to_dict() for post in posts],
        }
    )


@admin_bp.route("/posts/<int:post_id>/feature", methods=["PATCH"])
def set_feature_status(post_id: int):
    """Explicitly feature or unfeature a post."""

    payload = parse_json_request(request)
    featured = parse_bool(payload.get("isFeatured"))
    if featured is None:
        raise ValidationError({"isFeatured": "isFeatured must be boolean"})

    post = get_post_or_404(post_id)
    set_post_featured(post, featured)
    current_account().log_action(
        "feature_post" if featured else "unfeature_post", "post", post.id
    )
    db.session.commit()

    state = "featured" if featured else "unfeatured"
    return jsonify({"message": f"Post {state} successfully", "post": post.to_dict()})


@admin_bp.route("/posts/<int:post_id>", methods=["DELETE"])
def delete_any_post(post_id: int):
    """Delete any post regardless of ownership."""

    post = get_post_or_404(post_id)
    current_account().log_action("delete_post", "post", post.id, post.title)
    cleanup = delete_post_with_images(post)
    return jsonify({"message": "Post deleted successfully by admin", "imageCleanup": cleanup})


@admin_bp.route("/creators", methods=["GET"])
def list_creators():
    """Return all creator accounts with their profiles."""

    creators = User.query.filter_by(role="creator").order_by(User.created_at.desc()).all()
    return jsonify(
        [
            {
                **creator.to_dict(),
                "profile": creator.creator_profile.to_dict()
                if creator.creator_profile
                else None,
            }
            for creator in creators
        ]
    )
