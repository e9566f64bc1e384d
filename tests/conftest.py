"""
Pytest configuration for the diary API tests

Every test gets a fresh app on an in-memory SQLite database, a fake OpenAI
client (no network) and a fake users service.
"""

from types import SimpleNamespace

import pytest

import journal.analysis as analysis
from app import create_app
from app.config import TestingConfig
from app.extensions import db
from auth.client import IdentityServiceError
from journal.models import DiaryEntry, utcnow


class FakeCompletions:
    """Stands in for ``client.chat.completions``; replies are queued per test."""

    def __init__(self):
        self.replies = []
        self.calls = []

    def queue(self, *replies):
        self.replies.extend(replies)

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if self.replies else '{}'
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=reply))]
        )


class FakeUsersService:
    """In-memory users service: session tokens map to user dicts."""

    def __init__(self):
        self.users = {}
        self.codes = {}
        self.deleted = []
        self.fail = False

    def _check(self):
        if self.fail:
            raise IdentityServiceError("users service down")

    def get_oauth_redirect_url(self, provider='google'):
        self._check()
        return f'https://accounts.example.com/{provider}/consent'

    def exchange_code_for_session_token(self, code):
        self._check()
        return self.codes[code]

    def get_current_user(self, session_token):
        self._check()
        return self.users.get(session_token)

    def delete_session(self, session_token):
        self._check()
        self.deleted.append(session_token)


@pytest.fixture(autouse=True)
def fake_llm(monkeypatch):
    completions = FakeCompletions()
    monkeypatch.setattr(
        analysis,
        'OpenAI',
        lambda api_key: SimpleNamespace(chat=SimpleNamespace(completions=completions)),
    )
    return completions


@pytest.fixture
def users_service():
    return FakeUsersService()


@pytest.fixture
def app(users_service):
    app = create_app(TestingConfig)
    app.extensions['users_service'] = users_service
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def sign_in(client, users_service):
    """Give the test client a session cookie for *user_id*."""
    def _sign_in(user_id='user-1', email='someone@example.com'):
        token = f'token-{user_id}'
        users_service.users[token] = {'id': user_id, 'email': email}
        client.set_cookie(TestingConfig.SESSION_TOKEN_COOKIE_NAME, token)
        return token
    return _sign_in


@pytest.fixture
def add_entry(app):
    """Insert an entry directly, bypassing analysis."""
    def _add_entry(content='Some day', mood='calm', stress=4, user_id=None,
                   created_at=None, user_mood_rating=None):
        created_at = created_at or utcnow()
        with app.app_context():
            entry = DiaryEntry(
                content=content,
                mood=mood,
                stress=stress,
                ai_insights='Keep going.',
                user_id=user_id,
                user_mood_rating=user_mood_rating,
                created_at=created_at,
                updated_at=created_at,
            )
            db.session.add(entry)
            db.session.commit()
            return entry.id
    return _add_entry


@pytest.fixture
def entry_count(app):
    def _entry_count():
        with app.app_context():
            return DiaryEntry.query.count()
    return _entry_count
