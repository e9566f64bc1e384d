from datetime import datetime, timezone
from app.extensions import db


def utcnow():
    """Naive UTC timestamp, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class DiaryEntry(db.Model):
    """Diary entry with the mood analysis made when it was written.

    Entries are append-only: every column is set once, at insertion.
    ``user_id`` is the users-service id of the author, or NULL for entries
    written without signing in.
    """
    __tablename__ = 'diary_entries'

    id = db.Column(db.Integer, primary_key=True)
    content = db.Column(db.Text, nullable=False)
    mood = db.Column(db.String(32), nullable=False)
    stress = db.Column(db.Integer, nullable=False)
    ai_insights = db.Column(db.Text, nullable=False)
    user_id = db.Column(db.String(255), nullable=True, index=True)
    user_mood_rating = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        """Return entry data as dictionary."""
        return {
            'id': self.id,
            'content': self.content,
            'mood': self.mood,
            'stress': self.stress,
            'ai_insights': self.ai_insights,
            'user_id': self.user_id,
            'user_mood_rating': self.user_mood_rating,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat()
        }

    def __repr__(self):
        return f'<DiaryEntry {self.id} {self.mood}>'
