import os
from app import create_app
from app.models import User
from app.models.enums import UserRole
from app.extensions import db
from werkzeug.security import generate_password_hash

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PHONE = os.getenv("ADMIN_PHONE", "0000000000")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")


def create_admin_user(update=False):
    app = create_app()
    with app.app_context():
        admin = User.query.filter_by(username=ADMIN_USERNAME).first()
        if not admin:
            admin = User(
                username=ADMIN_USERNAME,
                email=ADMIN_EMAIL,
                phone_number=ADMIN_PHONE,
                password=generate_password_hash(ADMIN_PASSWORD),
                role=UserRole.ADMIN,
                enabled=True,
            )
            db.session.add(admin)
            db.session.commit()
            print("Admin user created successfully!")
        elif update:
            admin.password = generate_password_hash(ADMIN_PASSWORD)
            admin.role = UserRole.ADMIN
            admin.enabled = True
            db.session.commit()
            print("Admin user updated successfully!")
        else:
            print("Admin user already exists!")


if __name__ == '__main__':
    create_admin_user(update=True)
