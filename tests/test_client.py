from urllib.parse import urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from app.client import ApiError, LearnlyClient, Session
from app.quiz import QuizSession

BASE_URL = "http://learnly.test/api"


class FlaskTestAdapter(BaseAdapter):
    """Route ``requests`` traffic into a Flask test client instead of the network."""

    def __init__(self, test_client):
        super().__init__()
        self.test_client = test_client

    def send(self, request, **kwargs):
        url = urlsplit(request.url)
        result = self.test_client.open(
            url.path,
            method=request.method,
            query_string=url.query,
            headers=dict(request.headers),
            data=request.body,
        )
        response = requests.Response()
        response.status_code = result.status_code
        response.reason = result.status.partition(" ")[2]
        response.headers = CaseInsensitiveDict(dict(result.headers))
        response._content = result.get_data()
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


class UnreachableAdapter(BaseAdapter):
    def send(self, request, **kwargs):
        raise requests.ConnectionError("connection refused")

    def close(self):
        pass


@pytest.fixture
def api(client):
    http = requests.Session()
    http.mount("http://learnly.test", FlaskTestAdapter(client))
    return LearnlyClient(BASE_URL, http=http)


def test_health(api):
    assert "running" in api.health()["status"]


def test_login_returns_session_and_client_is_unchanged(api):
    session = api.register("ann@example.com", "pw123456", "Ann")
    assert isinstance(session, Session)
    assert session.user["email"] == "ann@example.com"
    assert api.session is None

    authed = api.with_session(api.login("ann@example.com", "pw123456"))
    assert authed.current_user()["id"] == session.user_id
    assert authed.logout().session is None


def test_errors_carry_status_and_server_message(api):
    api.register("dup@example.com", "pw", "Dup")
    with pytest.raises(ApiError) as exc:
        api.register("dup@example.com", "pw", "Dup")
    assert exc.value.status == 400
    assert exc.value.message == "User already exists"

    with pytest.raises(ApiError) as exc:
        api.current_user()
    assert exc.value.status == 401


def test_transport_failure_has_no_status():
    http = requests.Session()
    http.mount("http://learnly.test", UnreachableAdapter())
    with pytest.raises(ApiError) as exc:
        LearnlyClient(BASE_URL, http=http).health()
    assert exc.value.status is None


def test_full_learning_flow(api):
    author = api.with_session(api.register("t@example.com", "pw", "Author", role="instructor"))
    course = author.create_course({"title": "Client Course", "description": "Via client", "price": 5})
    first = author.create_lesson(course["id"], {"title": "One"})
    author.create_lesson(course["id"], {"title": "Two"})
    quiz = author.create_quiz(first["id"], {
        "title": "Check",
        "passing_score": 50,
        "questions": [
            {"question": "1 + 1?", "options": ["1", "2"], "correct_answer": 1},
            {"question": "Sky is blue", "question_type": "true_false", "options": ["True", "False"],
             "correct_answer": 0},
        ],
    })

    learner = api.with_session(api.register("l@example.com", "pw", "Learner"))
    assert [c["title"] for c in learner.list_courses(query="client", sort_by="price")] == ["Client Course"]
    assert not learner.is_enrolled(course["id"])
    learner.enroll(course["id"])
    assert learner.is_enrolled(course["id"])

    with pytest.raises(ApiError) as exc:
        learner.enroll(course["id"])
    assert exc.value.message == "Already enrolled in this course"

    learner.mark_lesson_complete(first["id"])
    progress = learner.course_progress(course["id"])
    assert (progress["completed"], progress["total"], progress["completionPercentage"]) == (1, 2, 50)

    fetched = learner.get_quiz(quiz["id"])
    session = QuizSession([q["correct_answer"] for q in quiz["questions"]], fetched["passing_score"])
    session.answer(0, 1)
    session.answer(1, 1)
    local = session.submit()

    attempt = learner.submit_quiz(quiz["id"], session.answers)
    assert attempt["score"] == local.score == 50
    assert attempt["passed"] is local.passed is True
    assert learner.quiz_submission(quiz["id"])["id"] == attempt["id"]

    dashboard = author.instructor_courses()
    assert dashboard["courses"][0]["student_count"] == 1
