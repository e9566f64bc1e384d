"""Request-scoped caller identity.

Views never look at the session cookie themselves. ``with_identity`` resolves
it once and hands the result to the view as the ``identity`` keyword.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import current_app, request


@dataclass(frozen=True)
class Identity:
    """Who is making the request. ``user_id is None`` is the anonymous diary."""

    user_id: Optional[str] = None
    user: Optional[dict] = None

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None


ANONYMOUS = Identity()


def get_users_service():
    return current_app.extensions['users_service']


def get_session_token() -> Optional[str]:
    token = request.cookies.get(current_app.config['SESSION_TOKEN_COOKIE_NAME'])
    return token or None


def resolve_identity() -> Identity:
    """Resolve the session cookie of the current request.

    A missing cookie or a session the users service does not recognise is the
    anonymous identity. Failures talking to the users service propagate as
    ``IdentityServiceError``.
    """
    token = get_session_token()
    if token is None:
        return ANONYMOUS

    user = get_users_service().get_current_user(token)
    if not user or user.get('id') is None:
        return ANONYMOUS
    return Identity(user_id=str(user['id']), user=user)


def with_identity(f):
    """Decorator passing the resolved ``identity`` to the view."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        kwargs['identity'] = resolve_identity()
        return f(*args, **kwargs)
    return decorated_function
