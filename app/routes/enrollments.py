from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from app.services import enrollments as enrollment_service
from app.utils.auth import get_current_user

bp = Blueprint("enrollment", __name__)


# List user's enrolled courses
@bp.route("", methods=["GET"])
@jwt_required()
def list_enrollments():
    return jsonify(enrollment_service.list_enrollments(get_current_user())), 200


@bp.route("/check/<int:course_id>", methods=["GET"])
@jwt_required()
def check_enrollment(course_id):
    return jsonify(enrollment_service.is_enrolled(get_current_user(), course_id)), 200
