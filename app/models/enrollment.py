from app.extensions import db
from datetime import datetime


class Enrollment(db.Model):
    __tablename__ = "enrollments"
    __table_args__ = (
        db.UniqueConstraint("user_id", "course_id", name="uq_enrollments_user_course"),
        db.Index("idx_enrollments_user", "user_id"),
        db.Index("idx_enrollments_course", "course_id"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    course_id = db.Column(db.Integer, db.ForeignKey("courses.id"), nullable=False)
    enrollment_date = db.Column(db.DateTime, default=datetime.utcnow, server_default=db.func.now())
    completion_percentage = db.Column(db.Integer, default=0, server_default="0")
    completed_at = db.Column(db.DateTime, nullable=True)

    student = db.relationship("User", back_populates="enrollments")
    course = db.relationship("Course", back_populates="enrollments")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "course_id": self.course_id,
            "enrollment_date": self.enrollment_date.isoformat() if self.enrollment_date else None,
            "completion_percentage": self.completion_percentage,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
