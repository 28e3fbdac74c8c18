from app.database import query, transaction
from app.errors import ValidationError
from app.models import LessonProgress
from app.services.courses import get_course_or_404, get_lesson_or_404
from app.utils import percentage

COURSE_PROGRESS_SQL = """SELECT l.id, l.title, l.position,
       COALESCE(lp.completed, FALSE) AS completed,
       COALESCE(lp.progress_percentage, 0) AS progress_percentage
FROM lessons l
LEFT JOIN lesson_progress lp ON l.id = lp.lesson_id AND lp.user_id = :user_id
WHERE l.course_id = :course_id
ORDER BY l.position, l.id"""

COMPLETE_LESSON_SQL = """INSERT INTO lesson_progress
    (user_id, lesson_id, completed, progress_percentage, completed_at, created_at, updated_at)
VALUES (:user_id, :lesson_id, TRUE, 100, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)
ON CONFLICT (user_id, lesson_id) DO UPDATE SET
    completed = TRUE,
    progress_percentage = 100,
    completed_at = COALESCE(lesson_progress.completed_at, excluded.completed_at),
    updated_at = CURRENT_TIMESTAMP"""

# A completed lesson stays completed whatever percentage is reported later
UPDATE_PROGRESS_SQL = """INSERT INTO lesson_progress
    (user_id, lesson_id, completed, progress_percentage, completed_at, created_at, updated_at)
VALUES (:user_id, :lesson_id, :completed, :percentage,
        CASE WHEN :completed THEN CURRENT_TIMESTAMP END, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)
ON CONFLICT (user_id, lesson_id) DO UPDATE SET
    completed = lesson_progress.completed OR excluded.completed,
    progress_percentage = CASE WHEN lesson_progress.completed THEN 100
                               ELSE excluded.progress_percentage END,
    completed_at = COALESCE(lesson_progress.completed_at, excluded.completed_at),
    updated_at = CURRENT_TIMESTAMP"""


def _summarize(rows):
    lessons = [
        {
            "id": r["id"],
            "title": r["title"],
            "position": r["position"],
            "completed": bool(r["completed"]),
            "progress_percentage": r["progress_percentage"],
        }
        for r in rows
    ]
    completed = sum(1 for l in lessons if l["completed"])
    total = len(lessons)
    return {
        "lessons": lessons,
        "completed": completed,
        "total": total,
        "completionPercentage": percentage(completed, total),
    }


def course_progress(user_id, course_id, runner=query):
    result = runner(COURSE_PROGRESS_SQL, {"user_id": user_id, "course_id": course_id})
    return _summarize(result.rows)


def refresh_enrollment(tx, user_id, course_id):
    summary = course_progress(user_id, course_id, runner=tx.query)
    tx.query(
        """UPDATE enrollments
           SET completion_percentage = :percentage,
               completed_at = CASE WHEN :percentage = 100
                                   THEN COALESCE(completed_at, CURRENT_TIMESTAMP) END
           WHERE user_id = :user_id AND course_id = :course_id""",
        {"percentage": summary["completionPercentage"], "user_id": user_id, "course_id": course_id},
    )


def _upsert(user, lesson, sql, params):
    def _write(tx):
        tx.query(sql, params)
        refresh_enrollment(tx, user.id, lesson.course_id)

    transaction(_write)
    progress = LessonProgress.query.filter_by(user_id=user.id, lesson_id=lesson.id).one()
    return progress.to_dict()


def complete_lesson(user, lesson_id):
    lesson = get_lesson_or_404(lesson_id)
    return _upsert(user, lesson, COMPLETE_LESSON_SQL, {"user_id": user.id, "lesson_id": lesson.id})


def update_progress(user, lesson_id, progress_percentage):
    try:
        value = int(progress_percentage)
    except (TypeError, ValueError):
        raise ValidationError("progress_percentage must be an integer")
    value = max(0, min(100, value))

    lesson = get_lesson_or_404(lesson_id)
    params = {
        "user_id": user.id,
        "lesson_id": lesson.id,
        "percentage": value,
        "completed": value == 100,
    }
    return _upsert(user, lesson, UPDATE_PROGRESS_SQL, params)


def get_course_progress(user, course_id):
    course = get_course_or_404(course_id)
    return course_progress(user.id, course.id)
