from sqlalchemy.exc import IntegrityError

from app.database import query, transaction
from app.errors import AlreadyEnrolled
from app.models import Enrollment
from app.services.courses import get_course_or_404
from app.services.progress import refresh_enrollment, course_progress


def refresh_student_count(tx, course_id):
    tx.query(
        """UPDATE courses
           SET student_count = (SELECT COUNT(*) FROM enrollments WHERE course_id = :course_id)
           WHERE id = :course_id""",
        {"course_id": course_id},
    )


def enroll(user, course_id):
    course = get_course_or_404(course_id)
    params = {"user_id": user.id, "course_id": course.id}

    existing = query(
        "SELECT id FROM enrollments WHERE user_id = :user_id AND course_id = :course_id",
        params,
    )
    if existing.row_count > 0:
        raise AlreadyEnrolled()

    def _insert(tx):
        tx.query(
            """INSERT INTO enrollments (user_id, course_id, enrollment_date, completion_percentage)
               VALUES (:user_id, :course_id, CURRENT_TIMESTAMP, 0)""",
            params,
        )
        refresh_student_count(tx, course.id)
        # lessons completed before enrolling count towards the new row
        refresh_enrollment(tx, user.id, course.id)

    try:
        transaction(_insert)
    except IntegrityError:
        # A concurrent request inserted the same (user, course) first
        raise AlreadyEnrolled()

    enrollment = Enrollment.query.filter_by(user_id=user.id, course_id=course.id).one()
    return enrollment.to_dict()


def list_enrollments(user):
    enrollments = (
        Enrollment.query.filter_by(user_id=user.id)
        .order_by(Enrollment.enrollment_date.desc(), Enrollment.id.desc())
        .all()
    )
    result = []
    for e in enrollments:
        data = e.to_dict()
        # recomputed from lesson_progress; the stored column can lag behind
        data["completion_percentage"] = course_progress(user.id, e.course_id)["completionPercentage"]
        data["course_title"] = e.course.title
        result.append(data)
    return result


def is_enrolled(user, course_id):
    found = query(
        "SELECT id FROM enrollments WHERE user_id = :user_id AND course_id = :course_id",
        {"user_id": user.id, "course_id": course_id},
    )
    return {"course_id": course_id, "enrolled": found.row_count > 0}
