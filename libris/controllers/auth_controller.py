from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from libris.errors import NotFound
from libris.repositories.user_repo import UserRepo
from libris.services.auth_service import AuthService
from libris.utils.decorators import current_user_id

auth_bp = Blueprint("auth", __name__)


def user_to_json(user):
    return {"id": user.id, "name": user.name, "email": user.email, "role": user.role}


@auth_bp.post("/register")
def register():
    data = request.get_json(silent=True) or {}

    name = (data.get("name") or "").strip()
    email = (data.get("email") or "").strip().lower()
    password = (data.get("password") or "").strip()

    if not name or not email or not password:
        return jsonify({"message": "name, email and password are required"}), 400

    # public sign-up always creates members; staff accounts come from the CLI
    user = AuthService.register(name=name, email=email, password=password)
    return jsonify(user_to_json(user)), 201


@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    try:
        token, user = AuthService.login(
            (data.get("email") or "").strip().lower(),
            (data.get("password") or "").strip()
        )
    except ValueError as e:
        return jsonify({"message": str(e)}), 401

    return jsonify({"access_token": token, "user": user_to_json(user)})


@auth_bp.get("/me")
@jwt_required()
def me():
    user = UserRepo.get_by_id(current_user_id())
    if not user:
        raise NotFound("User not found")
    return jsonify({"user": user_to_json(user)})
