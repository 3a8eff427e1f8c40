"""create marketplace schema"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "marketplace_20241019"
down_revision = None
branch_labels = None
depends_on = None


USER_ROLES = ("customer", "creator", "admin")
FABRIC_TYPES = (
    "Cotton",
    "Silk",
    "Linen",
    "Denim",
    "Wool",
    "Polyester",
    "Net",
    "Velvet",
    "Chiffon",
    "Georgette",
    "Crepe",
    "Satin",
    "Organza",
    "Rayon",
    "Muslin",
    "Other",
)
CLEANUP_STATUSES = ("pending", "done")


def upgrade():
    user_role_enum = sa.Enum(*USER_ROLES, name="user_role_enum")
    fabric_type_enum = sa.Enum(*FABRIC_TYPES, name="fabric_type_enum")
    cleanup_status_enum = sa.Enum(*CLEANUP_STATUSES, name="image_cleanup_status_enum")
    bind = op.get_bind()
    user_role_enum.create(bind, checkfirst=True)
    fabric_type_enum.create(bind, checkfirst=True)
    cleanup_status_enum.create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("role", user_role_enum, nullable=False, server_default="customer"),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("profile_pic", sa.String(length=512), nullable=False, server_default=""),
        sa.Column("email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("email_verification_token_hash", sa.String(length=64), nullable=True),
        sa.Column("email_verification_expires", sa.DateTime(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("failed_login_attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("locked_until", sa.DateTime(), nullable=True),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_users_email_verification_token_hash", "users", ["email_verification_token_hash"]
    )

    op.create_table(
        "customer_profiles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("preferences", sa.JSON(), nullable=False),
        sa.Column("preferred_fabric_types", sa.JSON(), nullable=False),
        sa.Column("wishlist", sa.JSON(), nullable=False),
        sa.Column("tier", sa.String(length=16), nullable=False, server_default="bronze"),
        sa.Column("total_spent", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("order_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "creator_profiles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("bio", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("specialization", sa.JSON(), nullable=False),
        sa.Column("experience", sa.String(length=16), nullable=False, server_default="beginner"),
        sa.Column("location", sa.JSON(), nullable=False),
        sa.Column("social_links", sa.JSON(), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verification_status", sa.String(length=16), nullable=False, server_default="not_applied"),
        sa.Column("total_posts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("featured_posts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_likes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "admin_profiles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("admin_role", sa.String(length=32), nullable=False, server_default="super_admin"),
        sa.Column("department", sa.String(length=32), nullable=False, server_default="operations"),
        sa.Column("permissions", sa.JSON(), nullable=False),
        sa.Column("preferences", sa.JSON(), nullable=False),
        sa.Column("action_history", sa.JSON(), nullable=False),
        sa.Column("total_actions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_active_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "fabrics",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("fabric_type", fabric_type_enum, nullable=False, server_default="Other"),
        sa.Column("color", sa.String(length=64), nullable=True),
        sa.Column("image_url", sa.String(length=512), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("images_meta", sa.JSON(), nullable=False),
        sa.Column("in_stock", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "posts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("creator_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("fabric_id", sa.Integer(), sa.ForeignKey("fabrics.id", ondelete="SET NULL"), nullable=True),
        sa.Column("fabric_type", sa.String(length=64), nullable=False, server_default="Other"),
        sa.Column("fabric_link", sa.String(length=512), nullable=True),
        sa.Column("image_url", sa.String(length=512), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("images_meta", sa.JSON(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=True),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_posts_creator_id", "posts", ["creator_id"])
    op.create_index("ix_posts_created_at", "posts", ["created_at"])

    op.create_table(
        "carts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_carts_expires_at", "carts", ["expires_at"])

    op.create_table(
        "cart_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("cart_id", sa.Integer(), sa.ForeignKey("carts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("fabric_id", sa.Integer(), sa.ForeignKey("fabrics.id", ondelete="CASCADE"), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.UniqueConstraint("cart_id", "fabric_id", name="uq_cart_items_cart_fabric"),
        sa.CheckConstraint("quantity >= 0.5", name="ck_cart_items_min_quantity"),
    )
    op.create_index("ix_cart_items_cart_id", "cart_items", ["cart_id"])

    op.create_table(
        "settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("key", sa.String(length=64), nullable=False, unique=True),
        sa.Column("value", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_settings_key", "settings", ["key"])

    op.create_table(
        "image_cleanup_tasks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("public_id", sa.String(length=512), nullable=False, unique=True),
        sa.Column("source", sa.String(length=64), nullable=False),
        sa.Column("status", cleanup_status_enum, nullable=False, server_default="pending"),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_image_cleanup_tasks_status", "image_cleanup_tasks", ["status"])


def downgrade():
    op.drop_index("ix_image_cleanup_tasks_status", table_name="image_cleanup_tasks")
    op.drop_table("image_cleanup_tasks")
    op.drop_index("ix_settings_key", table_name="settings")
    op.drop_table("settings")
    op.drop_index("ix_cart_items_cart_id", table_name="cart_items")
    op.drop_table("cart_items")
    op.drop_index("ix_carts_expires_at", table_name="carts")
    op.drop_table("carts")
    op.drop_index("ix_posts_created_at", table_name="posts")
    op.drop_index("ix_posts_creator_id", table_name="posts")
    op.drop_table("posts")
    op.drop_table("fabrics")
    op.drop_table("admin_profiles")
    op.drop_table("creator_profiles")
    op.drop_table("customer_profiles")
    op.drop_index("ix_users_email_verification_token_hash", table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    sa.Enum(*CLEANUP_STATUSES, name="image_cleanup_status_enum").drop(bind, checkfirst=True)
    sa.Enum(*FABRIC_TYPES, name="fabric_type_enum").drop(bind, checkfirst=True)
    sa.Enum(*USER_ROLES, name="user_role_enum").drop(bind, checkfirst=True)
