import logging

logger = logging.getLogger(__name__)

ACTION_POINTS = 20
WILD_POINTS = 50


def card_points(card) -> int:
    if card.kind == 'number':
        return int(card.value)
    if card.kind == 'action':
        return ACTION_POINTS
    return WILD_POINTS


def compute_score(players, winner) -> dict:
    """Score a finished hand.

    The winner collects the value of every card left in the other hands:
    face value for numbers, 20 for skip/reverse/+2 and 50 for wilds.
    """
    breakdown = []
    for p in players:
        if p is winner:
            continue
        breakdown.append({
            'name': p.name,
            'points': sum(card_points(c) for c in p.hand),
            'hand': [c.to_dict() for c in p.hand],
        })
    return {
        'winner': winner.name,
        'score': sum(entry['points'] for entry in breakdown),
        'breakdown': breakdown,
    }


def record_result(room, result: dict) -> None:
    """Write a finished game to the stats tables.

    Must run inside an app context. Failures are logged and rolled back;
    the outcome has already been broadcast by then.
    """
    from uno_server import db
    from uno_server.models import GameRecord, PlayerStats

    try:
        record = GameRecord.from_result(room.code, [p.name for p in room.players], result, room.started_at)
        db.session.add(record)
        for p in room.players:
            if p.is_bot:
                continue
            stats = PlayerStats.get_or_create(p.name)
            stats.matches_played += 1
            if p.name == result['winner']:
                stats.wins += 1
                stats.total_score += result['score']
            db.session.add(stats)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception(f"[record-failed] room={room.code} winner={result.get('winner')}")
