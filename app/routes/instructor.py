from flask import Blueprint, jsonify

from app.services import courses as course_service
from app.utils.auth import get_current_user, role_required

bp = Blueprint("instructor", __name__)


@bp.route("/courses", methods=["GET"])
@role_required("instructor", "admin")
def my_courses():
    return jsonify(course_service.instructor_courses(get_current_user())), 200
