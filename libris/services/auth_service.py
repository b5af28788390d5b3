from flask_jwt_extended import create_access_token
from werkzeug.security import check_password_hash, generate_password_hash

from libris.errors import ValidationError
from libris.models.user import ROLE_MEMBER, ROLES, User
from libris.repositories.user_repo import UserRepo


class AuthService:
    @staticmethod
    def register(name: str, email: str, password: str, role: str = ROLE_MEMBER):
        if role not in ROLES:
            raise ValidationError(f"Unknown role: {role}")
        if UserRepo.get_by_email(email):
            raise ValidationError("Email already registered")

        user = User(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role
        )
        UserRepo.create(user)
        return user

    @staticmethod
    def login(email: str, password: str):
        user = UserRepo.get_by_email(email)
        if not user or not check_password_hash(user.password_hash, password):
            raise ValueError("Invalid email or password")

        return AuthService.issue_token(user), user

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token(
            identity=str(user.id),
            additional_claims={"role": user.role, "name": user.name}
        )
