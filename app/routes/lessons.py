from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from app.services import courses as course_service
from app.services import quizzes as quiz_service
from app.utils import json_body
from app.utils.auth import get_current_user

bp = Blueprint("lessons", __name__)


@bp.route("/<int:lesson_id>", methods=["GET"])
def get_lesson(lesson_id):
    return jsonify(course_service.get_lesson(lesson_id)), 200


@bp.route("/<int:lesson_id>", methods=["PUT"])
@jwt_required()
def update_lesson(lesson_id):
    data = json_body()
    lesson = course_service.update_lesson(get_current_user(), lesson_id, data)
    return jsonify(lesson), 200


@bp.route("/<int:lesson_id>", methods=["DELETE"])
@jwt_required()
def delete_lesson(lesson_id):
    course_service.delete_lesson(get_current_user(), lesson_id)
    return jsonify({"message": "Lesson deleted", "id": lesson_id}), 200


@bp.route("/<int:lesson_id>/quizzes", methods=["POST"])
@jwt_required()
def create_quiz(lesson_id):
    data = json_body()
    quiz = quiz_service.create_quiz(get_current_user(), lesson_id, data)
    return jsonify(quiz), 201
