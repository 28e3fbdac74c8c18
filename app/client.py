"""HTTP client for the Learnly API.

The bearer token lives in an immutable :class:`Session` value handed to the
client explicitly; logging in or out returns a new session or client rather
than mutating shared state::

    client = LearnlyClient("http://localhost:3001/api")
    session = client.login("student@example.com", "student123")
    me = client.with_session(session).current_user()
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001/api"
DEFAULT_TIMEOUT = 10


class ApiError(Exception):
    def __init__(self, message, status=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload or {}

    def __str__(self):
        if self.status is None:
            return self.message
        return f"API Error: {self.status} {self.message}"


@dataclass(frozen=True)
class Session:
    token: str
    user: Dict[str, Any] = field(default_factory=dict)


class LearnlyClient:
    def __init__(self, base_url=DEFAULT_BASE_URL, session: Optional[Session] = None,
                 http: Optional[requests.Session] = None, timeout=DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.http = http or requests.Session()
        self.timeout = timeout

    def with_session(self, session: Optional[Session]) -> "LearnlyClient":
        return LearnlyClient(self.base_url, session=session, http=self.http, timeout=self.timeout)

    def _request(self, method, endpoint, json=None, params=None):
        headers = {"Content-Type": "application/json"}
        if self.session:
            headers["Authorization"] = f"Bearer {self.session.token}"

        url = f"{self.base_url}{endpoint}"
        try:
            response = self.http.request(
                method, url, json=json, params=params, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"[API Client Error] {method} {endpoint}: {e}")
            raise ApiError(f"Could not reach the server: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.ok:
            message = "Request failed"
            if isinstance(data, dict) and data.get("error"):
                message = data["error"]
            elif response.reason:
                message = response.reason
            logger.warning(f"[API Error] {response.status_code}: {message}")
            raise ApiError(message, status=response.status_code, payload=data)

        return data

    # Auth

    def register(self, email, password, name, role="student") -> Session:
        data = self._request("POST", "/auth/register", json={
            "email": email, "password": password, "name": name, "role": role,
        })
        return Session(token=data["token"], user=data["user"])

    def login(self, email, password) -> Session:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        return Session(token=data["token"], user=data["user"])

    def current_user(self):
        return self._request("GET", "/auth/me")

    def logout(self) -> "LearnlyClient":
        # Tokens are stateless; logging out only forgets the session
        return self.with_session(None)

    # Courses

    def list_courses(self, query=None, category=None, sort_by=None):
        params = {}
        if query:
            params["query"] = query
        if category:
            params["category"] = category
        if sort_by:
            params["sortBy"] = sort_by
        return self._request("GET", "/courses", params=params)

    def get_course(self, course_id):
        return self._request("GET", f"/courses/{course_id}")

    def create_course(self, data):
        return self._request("POST", "/courses", json=data)

    def update_course(self, course_id, data):
        return self._request("PUT", f"/courses/{course_id}", json=data)

    def delete_course(self, course_id):
        return self._request("DELETE", f"/courses/{course_id}")

    def instructor_courses(self):
        return self._request("GET", "/instructor/courses")

    # Lessons

    def list_lessons(self, course_id):
        return self._request("GET", f"/courses/{course_id}/lessons")

    def get_lesson(self, lesson_id):
        return self._request("GET", f"/lessons/{lesson_id}")

    def create_lesson(self, course_id, data):
        return self._request("POST", f"/courses/{course_id}/lessons", json=data)

    def update_lesson(self, lesson_id, data):
        return self._request("PUT", f"/lessons/{lesson_id}", json=data)

    def delete_lesson(self, lesson_id):
        return self._request("DELETE", f"/lessons/{lesson_id}")

    # Enrollment and progress

    def enroll(self, course_id):
        return self._request("POST", f"/courses/{course_id}/enroll")

    def my_enrollments(self):
        return self._request("GET", "/enrollments")

    def is_enrolled(self, course_id):
        return self._request("GET", f"/enrollments/check/{course_id}")["enrolled"]

    def course_progress(self, course_id):
        return self._request("GET", f"/progress/courses/{course_id}")

    def mark_lesson_complete(self, lesson_id):
        return self._request("POST", f"/progress/lessons/{lesson_id}/complete")

    def update_progress(self, lesson_id, progress_percentage):
        return self._request("PUT", f"/progress/lessons/{lesson_id}",
                             json={"progress_percentage": progress_percentage})

    # Quizzes

    def get_quiz(self, quiz_id):
        return self._request("GET", f"/quizzes/{quiz_id}")

    def create_quiz(self, lesson_id, data):
        return self._request("POST", f"/lessons/{lesson_id}/quizzes", json=data)

    def submit_quiz(self, quiz_id, answers):
        payload = {str(k): v for k, v in answers.items()}
        return self._request("POST", f"/quizzes/{quiz_id}/submit", json={"answers": payload})

    def quiz_submission(self, quiz_id):
        return self._request("GET", f"/quizzes/{quiz_id}/submission")

    def health(self):
        return self._request("GET", "/health")
