import logging

from app.extensions import db
from app.models import (
    User, Course, Lesson, Enrollment, LessonProgress,
    Quiz, QuizQuestion, QuizAttempt,
)

logger = logging.getLogger(__name__)

SAMPLE_QUIZ_QUESTIONS = [
    {
        "question": "What is React?",
        "question_type": "multiple_choice",
        "options": ["A JavaScript library for building UI", "A backend framework", "A CSS preprocessor", "A database"],
        "correct_answer": "0",
    },
    {
        "question": "React uses a virtual DOM for performance optimization.",
        "question_type": "true_false",
        "options": ["True", "False"],
        "correct_answer": "0",
    },
    {
        "question": "What is JSX?",
        "question_type": "multiple_choice",
        "options": [
            "A syntax extension to JavaScript",
            "A new JavaScript version",
            "A styling library",
            "A state management tool",
        ],
        "correct_answer": "0",
    },
    {
        "question": "Which hook is used for side effects in functional components?",
        "question_type": "multiple_choice",
        "options": ["useState", "useEffect", "useContext", "useReducer"],
        "correct_answer": "1",
    },
    {
        "question": "Props in React are mutable and can be changed by the child component.",
        "question_type": "true_false",
        "options": ["True", "False"],
        "correct_answer": "1",
    },
]


def clear_data():
    # children first, there is no cascade
    for model in (QuizAttempt, QuizQuestion, Quiz, LessonProgress, Enrollment, Lesson, Course, User):
        model.query.delete()
    db.session.commit()


def seed_database():
    logger.info("Seeding database with sample data...")
    try:
        logger.info("Clearing existing data...")
        clear_data()

        student = User(
            email="student@example.com",
            name="John Student",
            role="student",
            bio="Passionate learner"
        )
        student.set_password("student123")
        instructor = User(
            email="instructor@example.com",
            name="Jane Instructor",
            role="instructor",
            bio="Expert React Developer"
        )
        instructor.set_password("instructor123")
        db.session.add_all([student, instructor])
        db.session.flush()

        react = Course(
            title="React Fundamentals",
            description="Learn the basics of React including components, hooks, and state management",
            category="Web Development",
            price=49.99,
            instructor_id=instructor.id,
            rating=4.8,
            student_count=1250
        )
        typescript = Course(
            title="Advanced TypeScript",
            description="Master TypeScript for building scalable applications with type safety",
            category="Web Development",
            price=59.99,
            instructor_id=instructor.id,
            rating=4.9,
            student_count=890
        )
        db.session.add_all([react, typescript])
        db.session.flush()

        intro = Lesson(
            course_id=react.id,
            title="Introduction to React",
            description="Get started with React basics",
            duration=45,
            position=1
        )
        components = Lesson(
            course_id=react.id,
            title="Components and Props",
            description="Understand React components and props",
            duration=60,
            position=2
        )
        db.session.add_all([intro, components])
        db.session.flush()

        db.session.add(Enrollment(user_id=student.id, course_id=react.id))
        db.session.add(LessonProgress(
            user_id=student.id,
            lesson_id=intro.id,
            completed=True,
            progress_percentage=100
        ))

        quiz = Quiz(
            lesson_id=intro.id,
            title="React Fundamentals Quiz",
            description="Test your knowledge of React basics",
            passing_score=70
        )
        for position, question in enumerate(SAMPLE_QUIZ_QUESTIONS, start=1):
            quiz.questions.append(QuizQuestion(position=position, **question))
        db.session.add(quiz)

        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Seeding error")
        raise

    logger.info("Database seeding completed successfully")
    logger.info("Sample credentials: student@example.com / student123, instructor@example.com / instructor123")
