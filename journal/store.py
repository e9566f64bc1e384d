"""Queries over the diary_entries table.

Every read is scoped to one partition: a user's entries, or the anonymous
entries when ``user_id`` is None.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

from app.extensions import db
from .analysis import EntryAnalysis
from .models import DiaryEntry, utcnow


def _partition(user_id: Optional[str]):
    if user_id is None:
        return DiaryEntry.query.filter(DiaryEntry.user_id.is_(None))
    return DiaryEntry.query.filter(DiaryEntry.user_id == user_id)


def _newest_first(query):
    return query.order_by(DiaryEntry.created_at.desc(), DiaryEntry.id.desc())


def list_entries(user_id: Optional[str]) -> List[DiaryEntry]:
    return _newest_first(_partition(user_id)).all()


def list_recent_entries(user_id: Optional[str], days: int = 14,
                        now: Optional[datetime] = None) -> List[DiaryEntry]:
    """Entries of the partition created in the last *days* days, newest first."""
    since = (now or utcnow()) - timedelta(days=days)
    query = _partition(user_id).filter(DiaryEntry.created_at >= since)
    return _newest_first(query).all()


def get_entry(entry_id: int) -> Optional[DiaryEntry]:
    return DiaryEntry.query.filter_by(id=entry_id).first()


def create_entry(content: str, analysis: EntryAnalysis, user_id: Optional[str] = None,
                 user_mood_rating: Optional[int] = None) -> DiaryEntry:
    """Insert an entry and return it as re-read from the database."""
    now = utcnow()
    entry = DiaryEntry(
        content=content,
        mood=analysis.mood,
        stress=analysis.stress,
        ai_insights=analysis.insights,
        user_id=user_id,
        user_mood_rating=user_mood_rating,
        created_at=now,
        updated_at=now,
    )

    try:
        db.session.add(entry)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    # commit() expires the instance, so this reloads the stored row
    return get_entry(entry.id)
