from datetime import datetime, timezone

from memorygame import db

DEFAULT_MODE = 'normal'


def _utcnow():
    return datetime.now(timezone.utc)


def format_entry_date(value):
    """Render a creation timestamp the way the browser shows it (m/d/yyyy)."""
    if value is None:
        return None
    return f"{value.month}/{value.day}/{value.year}"


class LeaderboardEntry(db.Model):
    __tablename__ = 'leaderboard_entry'
    # Serves ORDER BY moves, time_seconds LIMIT n without a sort
    __table_args__ = (
        db.Index('ix_leaderboard_entry_moves_time', 'moves', 'time_seconds'),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(20), nullable=False)
    moves = db.Column(db.Integer, nullable=False)
    time_seconds = db.Column(db.Float, nullable=False)
    # NULL on rows written before modes existed; read as 'normal'
    mode = db.Column(db.String(16), nullable=True, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)

    def to_dict(self):
        time_value = self.time_seconds
        if time_value is not None and float(time_value).is_integer():
            time_value = int(time_value)
        return {
            'id': self.id,
            'name': self.name,
            'moves': self.moves,
            'time': time_value,
            'date': format_entry_date(self.created_at),
            'mode': self.mode or DEFAULT_MODE,
        }

    def __repr__(self):
        return f"<LeaderboardEntry {self.id} {self.name!r} moves={self.moves} time={self.time_seconds}>"
