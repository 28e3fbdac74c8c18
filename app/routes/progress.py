from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from app.errors import ValidationError
from app.services import progress as progress_service
from app.utils import json_body
from app.utils.auth import get_current_user

bp = Blueprint("progress", __name__)


# Mark lesson complete
@bp.route("/lessons/<int:lesson_id>/complete", methods=["POST"])
@jwt_required()
def mark_complete(lesson_id):
    progress = progress_service.complete_lesson(get_current_user(), lesson_id)
    return jsonify({"success": True, "progress": progress}), 200


@bp.route("/lessons/<int:lesson_id>", methods=["PUT"])
@jwt_required()
def update_progress(lesson_id):
    data = json_body()
    if "progress_percentage" not in data:
        raise ValidationError("Missing progress_percentage")

    progress = progress_service.update_progress(
        get_current_user(), lesson_id, data["progress_percentage"]
    )
    return jsonify({"success": True, "progress": progress}), 200


@bp.route("/courses/<int:course_id>", methods=["GET"])
@jwt_required()
def course_progress(course_id):
    return jsonify(progress_service.get_course_progress(get_current_user(), course_id)), 200
