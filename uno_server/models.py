from uno_server import db
from datetime import datetime, timezone
import json


def _utcnow():
    return datetime.now(timezone.utc)


class PlayerStats(db.Model):
    __tablename__ = 'player_stats'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    matches_played = db.Column(db.Integer, default=0, nullable=False)
    wins = db.Column(db.Integer, default=0, nullable=False)
    total_score = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow)

    @classmethod
    def get_or_create(cls, username):
        stats = cls.query.filter_by(username=username).first()
        if not stats:
            stats = cls(username=username, matches_played=0, wins=0, total_score=0)
        return stats

    def to_dict(self):
        return {
            'username': self.username,
            'matchesPlayed': self.matches_played,
            'wins': self.wins,
            'totalScore': self.total_score,
        }


class GameRecord(db.Model):
    __tablename__ = 'game_record'
    id = db.Column(db.Integer, primary_key=True)
    room_code = db.Column(db.String(16), nullable=False, index=True)
    players = db.Column(db.Text, nullable=False)  # JSON-encoded list of names
    winner = db.Column(db.String(64), nullable=False)
    score = db.Column(db.Integer, default=0, nullable=False)
    breakdown = db.Column(db.Text, nullable=True)  # JSON-encoded per-loser points
    started_at = db.Column(db.DateTime, nullable=True)
    ended_at = db.Column(db.DateTime, default=_utcnow)

    @classmethod
    def from_result(cls, room_code, player_names, result, started_at=None):
        return cls(
            room_code=room_code,
            players=json.dumps(list(player_names)),
            winner=result['winner'],
            score=result['score'],
            breakdown=json.dumps([{'name': b['name'], 'points': b['points']} for b in result['breakdown']]),
            started_at=datetime.fromtimestamp(started_at, timezone.utc) if started_at else None,
        )

    def to_dict(self):
        return {
            'id': self.id,
            'roomCode': self.room_code,
            'players': json.loads(self.players) if self.players else [],
            'winner': self.winner,
            'score': self.score,
            'breakdown': json.loads(self.breakdown) if self.breakdown else [],
            'startedAt': self.started_at.isoformat() if self.started_at else None,
            'endedAt': self.ended_at.isoformat() if self.ended_at else None,
        }
