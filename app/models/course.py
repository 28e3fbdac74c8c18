from app.extensions import db
from datetime import datetime


class Course(db.Model):
    __tablename__ = "courses"
    __table_args__ = (db.Index("idx_courses_instructor", "instructor_id"),)

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(100), nullable=True)
    price = db.Column(db.Float, nullable=False, default=0.0, server_default="0")
    instructor_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    # Denormalized aggregates, see services.enrollments.refresh_student_count
    rating = db.Column(db.Float, default=0.0, server_default="0")
    review_count = db.Column(db.Integer, default=0, server_default="0")
    student_count = db.Column(db.Integer, default=0, server_default="0")

    thumbnail_url = db.Column(db.String(500), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, server_default=db.func.now())

    instructor = db.relationship("User", back_populates="courses")
    lessons = db.relationship(
        "Lesson",
        back_populates="course",
        order_by="Lesson.position"
    )
    enrollments = db.relationship("Enrollment", back_populates="course")

    @property
    def total_lessons(self):
        return len(self.lessons)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "price": self.price,
            "instructor_id": self.instructor_id,
            "rating": self.rating,
            "review_count": self.review_count,
            "student_count": self.student_count,
            "thumbnail_url": self.thumbnail_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Course {self.title}>"
