from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from app.services import quizzes as quiz_service
from app.utils import json_body
from app.utils.auth import get_current_user

bp = Blueprint("quizzes", __name__)


@bp.route("/<int:quiz_id>", methods=["GET"])
def get_quiz(quiz_id):
    return jsonify(quiz_service.get_quiz(quiz_id)), 200


@bp.route("/<int:quiz_id>/submit", methods=["POST"])
@jwt_required()
def submit_quiz(quiz_id):
    data = json_body()
    attempt = quiz_service.submit_quiz(get_current_user(), quiz_id, data.get("answers"))
    return jsonify(attempt), 201


@bp.route("/<int:quiz_id>/submission", methods=["GET"])
@jwt_required()
def get_submission(quiz_id):
    return jsonify(quiz_service.latest_submission(get_current_user(), quiz_id)), 200
