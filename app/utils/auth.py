from functools import wraps

from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from app.errors import Forbidden
from app.services.auth import identify


def get_current_user():
    return identify(get_jwt_identity())


def role_required(*roles):
    def wrapper(fn):
        @wraps(fn)
        def decorator(*args, **kwargs):
            verify_jwt_in_request()
            user = get_current_user()
            if user.role not in roles:
                raise Forbidden(f"Requires role: {', '.join(roles)}")
            return fn(*args, **kwargs)
        return decorator
    return wrapper
