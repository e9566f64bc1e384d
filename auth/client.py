"""HTTP client for the external users service.

The users service owns everything about identity: it hands out the Google
OAuth consent URL, exchanges the OAuth ``code`` for an opaque session token,
resolves a session token to a user and revokes sessions. This module only
speaks its HTTP API; nothing about users is stored locally.
"""

from __future__ import annotations

from typing import Optional

import requests
from flask import current_app


class IdentityServiceError(RuntimeError):
    """Raised when the users service cannot be reached or answers badly."""


# Replies that mean "this token does not belong to anyone" rather than a failure.
_NO_USER_STATUSES = {401, 403, 404}


class UsersServiceClient:
    """Flask extension wrapping the users service API.

    Settings are read from ``current_app.config`` on every call and each call
    goes out through ``requests.request``, so nothing (cookies included) is
    carried over from one caller or one app to the next.
    """

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        app.extensions['users_service'] = self

    def _request(self, method: str, path: str, token: Optional[str] = None, **kwargs) -> requests.Response:
        api_url = (current_app.config.get('USERS_SERVICE_API_URL') or '').rstrip('/')
        if not api_url:
            raise IdentityServiceError("USERS_SERVICE_API_URL is not configured")

        headers = {'x-api-key': current_app.config.get('USERS_SERVICE_API_KEY') or ''}
        if token:
            headers['Authorization'] = f'Bearer {token}'

        try:
            return requests.request(
                method,
                f'{api_url}{path}',
                headers=headers,
                timeout=current_app.config.get('USERS_SERVICE_TIMEOUT'),
                **kwargs,
            )
        except requests.RequestException as exc:
            raise IdentityServiceError(f"Users service request failed: {exc}") from exc

    @staticmethod
    def _json(response: requests.Response) -> dict:
        if not response.ok:
            raise IdentityServiceError(f"Users service answered {response.status_code}")
        try:
            data = response.json()
        except ValueError as exc:
            raise IdentityServiceError("Users service returned a non-JSON body") from exc
        if not isinstance(data, dict):
            raise IdentityServiceError("Users service returned an unexpected body")
        return data

    def get_oauth_redirect_url(self, provider: str = 'google') -> str:
        """Return the consent-screen URL the browser should be sent to."""
        data = self._json(self._request('GET', f'/oauth/{provider}/redirect_url'))
        redirect_url = data.get('redirect_url')
        if not redirect_url:
            raise IdentityServiceError("Users service returned no redirect_url")
        return redirect_url

    def exchange_code_for_session_token(self, code: str) -> str:
        data = self._json(self._request('POST', '/sessions', json={'code': code}))
        token = data.get('session_token')
        if not token:
            raise IdentityServiceError("Users service returned no session_token")
        return token

    def get_current_user(self, session_token: str) -> Optional[dict]:
        """Resolve *session_token* to a user dict, or ``None`` if the session is not valid."""
        response = self._request('GET', '/users/me', token=session_token)
        if response.status_code in _NO_USER_STATUSES:
            return None
        return self._json(response)

    def delete_session(self, session_token: str) -> None:
        response = self._request('DELETE', '/sessions', token=session_token)
        if not response.ok and response.status_code not in _NO_USER_STATUSES:
            raise IdentityServiceError(f"Users service answered {response.status_code} deleting session")
