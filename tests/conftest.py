import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import create_app  # noqa: E402
from app.config import TestConfig  # noqa: E402
from app.extensions import db  # noqa: E402


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register_user(client):
    """Register through the API and return ``(user, auth_headers)``."""
    def _register(email, role="student", name=None, password="secret123"):
        res = client.post("/api/auth/register", json={
            "email": email,
            "password": password,
            "name": name or email.split("@")[0].title(),
            "role": role,
        })
        assert res.status_code == 201, res.get_json()
        body = res.get_json()
        return body["user"], {"Authorization": f"Bearer {body['token']}"}
    return _register


@pytest.fixture
def instructor(register_user):
    return register_user("instructor@example.com", role="instructor")


@pytest.fixture
def student(register_user):
    return register_user("student@example.com")


@pytest.fixture
def make_course(client, instructor):
    def _make(title="Intro to Python", headers=None, **fields):
        payload = {"title": title, "description": f"About {title}", **fields}
        res = client.post("/api/courses", json=payload, headers=headers or instructor[1])
        assert res.status_code == 201, res.get_json()
        return res.get_json()
    return _make


@pytest.fixture
def make_lesson(client, instructor):
    def _make(course_id, title, position=None, headers=None):
        payload = {"title": title}
        if position is not None:
            payload["position"] = position
        res = client.post(f"/api/courses/{course_id}/lessons", json=payload,
                          headers=headers or instructor[1])
        assert res.status_code == 201, res.get_json()
        return res.get_json()
    return _make
