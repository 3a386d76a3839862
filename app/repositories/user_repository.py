from app.extensions import db
from app.models import User

class UserRepository:
    @staticmethod
    def sign_up(user):
        db.session.add(user)
        db.session.flush()
        return user

    @staticmethod
    def find_by_username(username):
        return User.query.filter_by(username=username).first()

    @staticmethod
    def find_by_email(email):
        return User.query.filter_by(email=email).first()

    @staticmethod
    def find_by_phone_number(phone_number):
        return User.query.filter_by(phone_number=phone_number).first()

    @staticmethod
    def find_by_id(user_id: int):
        return User.query.filter_by(id=user_id).first()
