from flask import Blueprint, jsonify, request
from uno_server import registry
from uno_server.models import GameRecord, PlayerStats

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the UNO game server!', 'rooms': len(registry)})

@main.route('/api/leaderboard')
def leaderboard():
    top = PlayerStats.query.order_by(PlayerStats.wins.desc(), PlayerStats.total_score.desc()).limit(10).all()
    return jsonify([s.to_dict() for s in top])

@main.route('/api/stats/<string:username>')
def player_stats(username):
    stats = PlayerStats.query.filter_by(username=username).first()
    if not stats:
        return jsonify({'error': 'No games recorded for this player'}), 404
    return jsonify(stats.to_dict())

@main.route('/api/games/recent')
def recent_games():
    try:
        limit = min(max(int(request.args.get('limit', 10)), 1), 50)
    except ValueError:
        return jsonify({'error': 'limit must be an integer'}), 400
    records = GameRecord.query.order_by(GameRecord.ended_at.desc(), GameRecord.id.desc()).limit(limit).all()
    return jsonify([r.to_dict() for r in records])
