from flask import Blueprint, jsonify

from . import auth, courses, enrollments, progress, lessons, quizzes, instructor

api = Blueprint("api", __name__)


@api.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "Learnly Backend Server is running!"}), 200


api.register_blueprint(auth.bp, url_prefix="/auth")
api.register_blueprint(courses.bp, url_prefix="/courses")
api.register_blueprint(lessons.bp, url_prefix="/lessons")
api.register_blueprint(enrollments.bp, url_prefix="/enrollments")
api.register_blueprint(progress.bp, url_prefix="/progress")
api.register_blueprint(quizzes.bp, url_prefix="/quizzes")
api.register_blueprint(instructor.bp, url_prefix="/instructor")
