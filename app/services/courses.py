from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func, or_

from app.errors import Forbidden, NotFound, ValidationError
from app.extensions import db
from app.models import Course, Enrollment, Lesson

SORT_ORDERS = ("newest", "popular", "rating", "price")


@dataclass(frozen=True)
class CourseFilters:
    """Recognized listing filters; anything else in the query string is ignored."""

    query: Optional[str] = None
    category: Optional[str] = None
    sort_by: str = "newest"

    @classmethod
    def from_args(cls, args):
        sort_by = args.get("sortBy") or "newest"
        return cls(
            query=(args.get("query") or "").strip() or None,
            category=args.get("category") or None,
            sort_by=sort_by if sort_by in SORT_ORDERS else "newest",
        )

    def order_by(self):
        if self.sort_by == "rating":
            return [Course.rating.desc(), Course.id.desc()]
        if self.sort_by == "price":
            return [Course.price.asc(), Course.id.asc()]
        if self.sort_by == "popular":
            return [Course.student_count.desc(), Course.id.desc()]
        return [Course.created_at.desc(), Course.id.desc()]

    def apply(self, statement):
        if self.query:
            pattern = f"%{self.query}%"
            statement = statement.filter(or_(
                Course.title.ilike(pattern),
                Course.description.ilike(pattern)
            ))
        if self.category:
            statement = statement.filter(Course.category == self.category)
        return statement.order_by(*self.order_by())


def list_courses(filters=None):
    filters = filters or CourseFilters()
    return [c.to_dict() for c in filters.apply(Course.query).all()]


def get_course_or_404(course_id):
    course = db.session.get(Course, course_id)
    if not course:
        raise NotFound("Course not found")
    return course


def get_course(course_id):
    course = get_course_or_404(course_id)
    data = course.to_dict()
    data["lessons"] = [l.to_dict() for l in course.lessons]
    return data


def ensure_can_manage(user, course):
    if user.role != "admin" and course.instructor_id != user.id:
        raise Forbidden("Only the course instructor can modify this course")


def _parse_price(value):
    if value in (None, ""):
        return 0.0
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Price must be a number")
    if price < 0:
        raise ValidationError("Price cannot be negative")
    return price


def create_course(user, data):
    title = (data.get("title") or "").strip()
    description = (data.get("description") or "").strip()
    if not all([title, description]):
        raise ValidationError("Missing required fields")

    course = Course(
        title=title,
        description=description,
        category=data.get("category"),
        price=_parse_price(data.get("price")),
        thumbnail_url=data.get("thumbnail_url"),
        instructor_id=user.id
    )
    db.session.add(course)
    db.session.commit()
    return course.to_dict()


def update_course(user, course_id, data):
    course = get_course_or_404(course_id)
    ensure_can_manage(user, course)

    if "title" in data:
        if not (data["title"] or "").strip():
            raise ValidationError("Title cannot be empty")
        course.title = data["title"].strip()
    if "description" in data:
        if not (data["description"] or "").strip():
            raise ValidationError("Description cannot be empty")
        course.description = data["description"].strip()
    if "category" in data:
        course.category = data["category"]
    if "price" in data:
        course.price = _parse_price(data["price"])
    if "thumbnail_url" in data:
        course.thumbnail_url = data["thumbnail_url"]

    db.session.commit()
    return course.to_dict()


def delete_course(user, course_id):
    course = get_course_or_404(course_id)
    ensure_can_manage(user, course)

    # No cascade: refuse rather than orphan lessons or enrollments
    if course.lessons:
        raise ValidationError("Delete the course's lessons first")
    if Enrollment.query.filter_by(course_id=course.id).count():
        raise ValidationError("Cannot delete a course with enrolled students")

    db.session.delete(course)
    db.session.commit()


def instructor_courses(user):
    """The caller's courses with student and lesson counts taken from the rows."""
    student_counts = (
        db.session.query(Enrollment.course_id, func.count(Enrollment.id))
        .join(Course, Course.id == Enrollment.course_id)
        .filter(Course.instructor_id == user.id)
        .group_by(Enrollment.course_id)
        .all()
    )
    counts = {course_id: count for course_id, count in student_counts}

    courses = (
        Course.query.filter_by(instructor_id=user.id)
        .order_by(Course.created_at.desc(), Course.id.desc())
        .all()
    )
    result = []
    for c in courses:
        data = c.to_dict()
        data["student_count"] = counts.get(c.id, 0)
        data["total_lessons"] = c.total_lessons
        result.append(data)

    return {
        "total_courses": len(result),
        "total_students": sum(counts.values()),
        "courses": result,
    }


# Lessons

def _parse_int(value, field):
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")


def get_lesson_or_404(lesson_id):
    lesson = db.session.get(Lesson, lesson_id)
    if not lesson:
        raise NotFound("Lesson not found")
    return lesson


def list_lessons(course_id):
    course = get_course_or_404(course_id)
    return [l.to_dict() for l in course.lessons]


def get_lesson(lesson_id):
    lesson = get_lesson_or_404(lesson_id)
    data = lesson.to_dict()
    data["quizzes"] = [{"id": q.id, "title": q.title} for q in lesson.quizzes]
    return data


def create_lesson(user, course_id, data):
    course = get_course_or_404(course_id)
    ensure_can_manage(user, course)

    title = (data.get("title") or "").strip()
    if not title:
        raise ValidationError("Missing title")

    position = _parse_int(data.get("position"), "position")
    if position is None:
        last = (
            db.session.query(func.max(Lesson.position))
            .filter(Lesson.course_id == course.id)
            .scalar()
        )
        position = (last or 0) + 1

    lesson = Lesson(
        course_id=course.id,
        title=title,
        description=data.get("description"),
        content=data.get("content"),
        video_url=data.get("video_url"),
        duration=_parse_int(data.get("duration"), "duration"),
        position=position
    )
    db.session.add(lesson)
    db.session.commit()
    return lesson.to_dict()


def update_lesson(user, lesson_id, data):
    lesson = get_lesson_or_404(lesson_id)
    ensure_can_manage(user, lesson.course)

    if "title" in data:
        if not (data["title"] or "").strip():
            raise ValidationError("Title cannot be empty")
        lesson.title = data["title"].strip()
    for field in ("description", "content", "video_url"):
        if field in data:
            setattr(lesson, field, data[field])
    if "duration" in data:
        lesson.duration = _parse_int(data["duration"], "duration")
    if "position" in data:
        lesson.position = _parse_int(data["position"], "position")

    db.session.commit()
    return lesson.to_dict()


def delete_lesson(user, lesson_id):
    lesson = get_lesson_or_404(lesson_id)
    ensure_can_manage(user, lesson.course)

    if lesson.quizzes:
        raise ValidationError("Delete the lesson's quizzes first")
    if lesson.progress:
        raise ValidationError("Cannot delete a lesson with student progress")

    db.session.delete(lesson)
    db.session.commit()
