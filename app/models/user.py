from app.extensions import db
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash

ROLES = ("student", "instructor", "admin")


class User(db.Model):
    __tablename__ = "users"
    __table_args__ = (
        db.CheckConstraint("role IN ('student', 'instructor', 'admin')", name="ck_users_role"),
        db.Index("idx_users_email", "email"),
    )

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(50), nullable=False, default="student", server_default="student")
    bio = db.Column(db.Text, nullable=True)
    avatar_url = db.Column(db.String(500), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, server_default=db.func.now())

    courses = db.relationship("Course", back_populates="instructor")
    enrollments = db.relationship("Enrollment", back_populates="student")
    progress = db.relationship("LessonProgress", back_populates="student")

    def set_password(self, password):
        self.password = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password, password)

    def to_dict(self):
        # never includes the password hash
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "bio": self.bio,
            "avatar_url": self.avatar_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<User {self.email}>"
