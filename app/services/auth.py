from flask_jwt_extended import create_access_token
from sqlalchemy.exc import IntegrityError

from app.errors import DuplicateUser, InvalidCredentials, InvalidToken, NotFound, ValidationError
from app.extensions import db
from app.models import User, ROLES


def issue_token(user):
    # Lifetime comes from JWT_ACCESS_TOKEN_EXPIRES (7 days)
    return create_access_token(
        identity=str(user.id),
        additional_claims={"email": user.email}
    )


def email_taken(email):
    return User.query.filter_by(email=email).first() is not None


def register(email, password, name, role=None):
    email = (email or "").strip().lower()
    name = (name or "").strip()
    role = role or "student"

    if not all([email, password, name]):
        raise ValidationError("Missing required fields")
    if role not in ROLES:
        raise ValidationError(f"Invalid role: {role}")

    if email_taken(email):
        raise DuplicateUser()

    user = User(email=email, name=name, role=role)
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with another registration for the same email
        db.session.rollback()
        raise DuplicateUser()

    return {"user": user.to_dict(), "token": issue_token(user)}


def login(email, password):
    email = (email or "").strip().lower()
    if not email or not password:
        raise ValidationError("Email and password required")

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        raise InvalidCredentials()

    return {"user": user.to_dict(), "token": issue_token(user)}


def identify(identity):
    """Map a verified token identity back to its user row.

    Signature and expiry are checked by Flask-JWT-Extended before this runs;
    there is no revocation list, so any unexpired token is honoured.
    """
    try:
        user_id = int(identity)
    except (TypeError, ValueError):
        raise InvalidToken()

    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user
