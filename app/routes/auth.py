from flask import Blueprint, jsonify, current_app
from flask_jwt_extended import jwt_required

from app.services import auth as auth_service
from app.utils import json_body
from app.utils.auth import get_current_user

bp = Blueprint("auth", __name__)


@bp.route("/register", methods=["POST"])
def register():
    data = json_body()
    result = auth_service.register(
        email=data.get("email"),
        password=data.get("password"),
        name=data.get("name"),
        role=data.get("role")
    )
    current_app.logger.info(f"Registered user {result['user']['id']} ({result['user']['role']})")
    return jsonify(result), 201


@bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    result = auth_service.login(data.get("email"), data.get("password"))
    return jsonify(result), 200


# Get current user
@bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    return jsonify(get_current_user().to_dict()), 200
