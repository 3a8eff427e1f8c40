"""Seed demo accounts and fabrics."""

from decimal import Decimal

from app import create_app
from models import db
from models.accounts import account_for
from models.fabric import Fabric
from models.user import User


def get_or_create_user(email: str, name: str, role: str, password: str) -> User:
    user = User.query.filter_by(email=email).first()
    if user is None:
        user = User(email=email, name=name, role=role)
        db.session.add(user)
    user.email_verified = True
    user.set_password(password)
    account_for(user).ensure_profile()
    return user


def main() -> None:
    app = create_app()
    with app.app_context():
        get_or_create_user("creator@adaayien.dev", "Demo Creator", "creator", "Creator@123")
        get_or_create_user("customer@adaayien.dev", "Demo Customer", "customer", "Customer@123")

        fabrics_data = [
            {
                "name": "Handloom Cotton",
                "description": "Breathable handwoven cotton for summer wear.",
                "price": Decimal("249.00"),
                "fabric_type": "Cotton",
                "color": "Indigo",
            },
            {
                "name": "Banarasi Silk",
                "description": "Rich silk with zari work.",
                "price": Decimal("1299.00"),
                "fabric_type": "Silk",
                "color": "Maroon",
            },
            {
                "name": "Washed Linen",
                "description": "Soft pre-washed linen.",
                "price": Decimal("599.00"),
                "fabric_type": "Linen",
                "color": "Sand",
            },
        ]

        created = 0
        for data in fabrics_data:
            if Fabric.query.filter_by(name=data["name"]).first() is not None:
                continue
            url = f"https://placehold.co/600x600?text={data['name'].replace(' ', '+')}"
            fabric = Fabric(image_url=url, images=[url], images_meta=[{"url": url, "publicId": None}], **data)
            db.session.add(fabric)
            created += 1

        db.session.commit()
        print(f"Seeded demo accounts and {created} fabric(s).")


if __name__ == "__main__":
    main()
