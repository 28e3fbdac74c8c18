from app.errors import NotFound, ValidationError
from app.extensions import db
from app.models import Quiz, QuizAttempt, QuizQuestion, QUESTION_TYPES
from app.quiz import QuizIncomplete, score_answers
from app.services.courses import ensure_can_manage, get_lesson_or_404


def get_quiz_or_404(quiz_id):
    quiz = db.session.get(Quiz, quiz_id)
    if not quiz:
        raise NotFound("Quiz not found")
    return quiz


def get_quiz(quiz_id):
    # answers stay server-side
    return get_quiz_or_404(quiz_id).to_dict(include_answers=False)


def _question_from(data, position):
    if not isinstance(data, dict):
        raise ValidationError("Every question must be an object")
    text = (data.get("question") or "").strip()
    if not text:
        raise ValidationError("Every question needs text")

    question_type = data.get("question_type") or "multiple_choice"
    if question_type not in QUESTION_TYPES:
        raise ValidationError(f"Invalid question_type: {question_type}")

    options = data.get("options") or []
    if not isinstance(options, list):
        raise ValidationError("options must be a list")
    if question_type != "essay" and not options:
        raise ValidationError("Choice questions need options")

    correct = data.get("correct_answer")
    if correct is None:
        raise ValidationError("Every question needs a correct_answer")

    return QuizQuestion(
        question=text,
        question_type=question_type,
        options=options,
        correct_answer=str(correct),
        position=position
    )


def create_quiz(user, lesson_id, data):
    lesson = get_lesson_or_404(lesson_id)
    ensure_can_manage(user, lesson.course)

    title = (data.get("title") or "").strip()
    if not title:
        raise ValidationError("Missing title")

    passing_score = data.get("passing_score", 70)
    try:
        passing_score = int(passing_score)
    except (TypeError, ValueError):
        raise ValidationError("passing_score must be an integer")
    if not 0 <= passing_score <= 100:
        raise ValidationError("passing_score must be between 0 and 100")

    quiz = Quiz(
        lesson_id=lesson.id,
        title=title,
        description=data.get("description"),
        passing_score=passing_score
    )
    questions = data.get("questions") or []
    if not isinstance(questions, list):
        raise ValidationError("questions must be a list")
    for position, q in enumerate(questions, start=1):
        quiz.questions.append(_question_from(q, position))

    db.session.add(quiz)
    db.session.commit()
    return quiz.to_dict(include_answers=True)


def _answers_by_index(raw, total):
    """Accept a list or a ``{"0": ..., "1": ...}`` mapping keyed by question index."""
    if isinstance(raw, list):
        raw = dict(enumerate(raw))
    if not isinstance(raw, dict):
        raise ValidationError("answers must be an object keyed by question index")

    answers = {}
    for key, value in raw.items():
        try:
            index = int(key)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid question index: {key}")
        if not 0 <= index < total:
            raise ValidationError(f"Question index {index} out of range")
        if value is not None:
            answers[index] = value
    return answers


def submit_quiz(user, quiz_id, raw_answers):
    quiz = get_quiz_or_404(quiz_id)
    answer_key = [q.correct_answer for q in quiz.questions]
    answers = _answers_by_index(raw_answers or {}, len(answer_key))

    if any(i not in answers for i in range(len(answer_key))):
        raise QuizIncomplete()

    result = score_answers(answer_key, answers, quiz.passing_score)
    attempt = QuizAttempt(
        user_id=user.id,
        quiz_id=quiz.id,
        score=result.score,
        passed=result.passed,
        answers={str(i): v for i, v in answers.items()}
    )
    db.session.add(attempt)
    db.session.commit()

    data = attempt.to_dict()
    data["correct"] = result.correct
    data["total"] = result.total
    return data


def latest_submission(user, quiz_id):
    quiz = get_quiz_or_404(quiz_id)
    attempt = (
        QuizAttempt.query.filter_by(user_id=user.id, quiz_id=quiz.id)
        .order_by(QuizAttempt.attempted_at.desc(), QuizAttempt.id.desc())
        .first()
    )
    if not attempt:
        raise NotFound("No submission for this quiz")
    return attempt.to_dict()
