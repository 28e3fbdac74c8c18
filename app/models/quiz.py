from app.extensions import db
from datetime import datetime

QUESTION_TYPES = ("multiple_choice", "true_false", "essay")


class Quiz(db.Model):
    __tablename__ = "quizzes"

    id = db.Column(db.Integer, primary_key=True)
    lesson_id = db.Column(db.Integer, db.ForeignKey("lessons.id"), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    passing_score = db.Column(db.Integer, default=70, server_default="70")
    created_at = db.Column(db.DateTime, default=datetime.utcnow, server_default=db.func.now())

    lesson = db.relationship("Lesson", back_populates="quizzes")
    questions = db.relationship(
        "QuizQuestion",
        back_populates="quiz",
        order_by="QuizQuestion.position"
    )
    attempts = db.relationship("QuizAttempt", back_populates="quiz")

    def to_dict(self, include_answers=False):
        return {
            "id": self.id,
            "lesson_id": self.lesson_id,
            "title": self.title,
            "description": self.description,
            "passing_score": self.passing_score,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "questions": [q.to_dict(include_answers) for q in self.questions],
        }


class QuizQuestion(db.Model):
    __tablename__ = "quiz_questions"
    __table_args__ = (
        db.CheckConstraint(
            "question_type IN ('multiple_choice', 'true_false', 'essay')",
            name="ck_quiz_questions_type"
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey("quizzes.id"), nullable=False)
    question = db.Column(db.Text, nullable=False)
    question_type = db.Column(db.String(50), default="multiple_choice")
    options = db.Column(db.JSON, default=list)
    # Stored as text: an option index for choice questions, free text for essays
    correct_answer = db.Column(db.Text, nullable=True)
    position = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, server_default=db.func.now())

    quiz = db.relationship("Quiz", back_populates="questions")

    def to_dict(self, include_answer=False):
        data = {
            "id": self.id,
            "quiz_id": self.quiz_id,
            "question": self.question,
            "question_type": self.question_type,
            "options": self.options or [],
            "position": self.position,
        }
        if include_answer:
            data["correct_answer"] = self.correct_answer
        return data


class QuizAttempt(db.Model):
    __tablename__ = "quiz_attempts"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    quiz_id = db.Column(db.Integer, db.ForeignKey("quizzes.id"), nullable=False)
    score = db.Column(db.Integer)
    passed = db.Column(db.Boolean)
    answers = db.Column(db.JSON)
    attempted_at = db.Column(db.DateTime, default=datetime.utcnow, server_default=db.func.now())

    quiz = db.relationship("Quiz", back_populates="attempts")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "quiz_id": self.quiz_id,
            "score": self.score,
            "passed": bool(self.passed),
            "answers": self.answers or {},
            "attempted_at": self.attempted_at.isoformat() if self.attempted_at else None,
        }
