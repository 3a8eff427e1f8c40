"""Create or promote the platform administrator.

Admin accounts cannot be created through public registration; this script is
the only way to provision one.
"""

import os

from app import create_app
from models import db
from models.accounts import AdminAccount
from models.profiles import ADMIN_PERMISSIONS
from models.user import User

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@adaayen.com").strip().lower()
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "Admin@123")
ADMIN_NAME = os.getenv("ADMIN_NAME", "Administrator")


def main() -> None:
    app = create_app()
    with app.app_context():
        admin = User.query.filter_by(email=ADMIN_EMAIL).first()
        if admin is None:
            admin = User(email=ADMIN_EMAIL, name=ADMIN_NAME, role="admin")
            db.session.add(admin)
            action = "created"
        else:
            action = "updated"

        # Role profiles are per role; promoting an existing account leaves the
        # old profile in place for out-of-band cleanup.
        admin.role = "admin"
        admin.email_verified = True
        admin.email_verification_token_hash = None
        admin.email_verification_expires = None
        admin.is_active = True
        admin.set_password(ADMIN_PASSWORD)

        profile = AdminAccount(admin).ensure_profile()
        profile.permissions = list(ADMIN_PERMISSIONS)
        db.session.commit()
        print(f"Admin user {action}: {ADMIN_EMAIL}")
        print("Please change the password after first login.")


if __name__ == "__main__":
    main()
