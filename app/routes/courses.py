from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from app.services import courses as course_service
from app.services import enrollments as enrollment_service
from app.utils import json_body
from app.utils.auth import get_current_user, role_required

bp = Blueprint("courses", __name__)


# List courses with optional ?query=&category=&sortBy=
@bp.route("", methods=["GET"])
def list_courses():
    filters = course_service.CourseFilters.from_args(request.args)
    return jsonify(course_service.list_courses(filters)), 200


@bp.route("/<int:course_id>", methods=["GET"])
def get_course(course_id):
    return jsonify(course_service.get_course(course_id)), 200


@bp.route("", methods=["POST"])
@role_required("instructor", "admin")
def create_course():
    data = json_body()
    course = course_service.create_course(get_current_user(), data)
    return jsonify(course), 201


@bp.route("/<int:course_id>", methods=["PUT"])
@jwt_required()
def update_course(course_id):
    data = json_body()
    course = course_service.update_course(get_current_user(), course_id, data)
    return jsonify(course), 200


@bp.route("/<int:course_id>", methods=["DELETE"])
@jwt_required()
def delete_course(course_id):
    course_service.delete_course(get_current_user(), course_id)
    return jsonify({"message": "Course deleted", "id": course_id}), 200


@bp.route("/<int:course_id>/lessons", methods=["GET"])
def list_lessons(course_id):
    return jsonify(course_service.list_lessons(course_id)), 200


@bp.route("/<int:course_id>/lessons", methods=["POST"])
@jwt_required()
def create_lesson(course_id):
    data = json_body()
    lesson = course_service.create_lesson(get_current_user(), course_id, data)
    return jsonify(lesson), 201


@bp.route("/<int:course_id>/enroll", methods=["POST"])
@jwt_required()
def enroll(course_id):
    enrollment = enrollment_service.enroll(get_current_user(), course_id)
    return jsonify({"success": True, "enrollment": enrollment}), 201
