from typing import Dict, Iterable, List, Sequence

from squash_tracker.models.match_model import MatchModel
from squash_tracker.models.standings_model import PoolStandings


def recompute_standings(pool_matches: Sequence[MatchModel]) -> List[PoolStandings]:
    """
    Derives one standings row per player of a pool from the pool's matches.

    Every player named in any of the matches gets a row, so a freshly
    scheduled pool yields zero-valued rows. Only COMPLETED matches add to the
    counters. Rows come back in order of each player's first appearance, which
    keeps the output a pure function of the input order.
    """
    if not pool_matches:
        return []

    scopes = {(m.tournament_id, m.pool_id) for m in pool_matches}
    if len(scopes) != 1:
        raise ValueError("recompute_standings expects the matches of a single pool")
    tournament_id, pool_id = next(iter(scopes))
    if pool_id is None:
        raise ValueError("Elimination matches have no pool standings")

    rows: Dict[str, PoolStandings] = {}
    for match in pool_matches:
        for login in match.players:
            if login not in rows:
                rows[login] = PoolStandings(login=login, tournament_id=tournament_id, pool_id=pool_id)

    for match in pool_matches:
        if not match.is_completed:
            continue
        for login, is_a in ((match.player_a_login, True), (match.player_b_login, False)):
            row = rows[login]
            row.matches_played += 1
            if match.winner_login == login:
                row.matches_won += 1
            else:
                row.matches_lost += 1

            if match.completed_at and (row.last_played_at is None or match.completed_at > row.last_played_at):
                row.last_played_at = match.completed_at

            for game in match.scores:
                own, other = (
                    (game.player_a_score, game.player_b_score)
                    if is_a
                    else (game.player_b_score, game.player_a_score)
                )
                row.points_won += own
                row.points_lost += other
                # A level game is neither won nor lost.
                if own > other:
                    row.games_won += 1
                elif own < other:
                    row.games_lost += 1

    for row in rows.values():
        row.points_diff = row.points_won - row.points_lost
    return list(rows.values())


def sort_standings(rows: Iterable[PoolStandings]) -> List[PoolStandings]:
    """Display order: most matches won first, then best points difference."""
    return sorted(rows, key=lambda r: (-r.matches_won, -r.points_diff))


def group_by_pool(rows: Iterable[PoolStandings]) -> Dict[str, List[PoolStandings]]:
    pools: Dict[str, List[PoolStandings]] = {}
    for row in rows:
        pools.setdefault(row.pool_id, []).append(row)
    return {pool_id: sort_standings(pools[pool_id]) for pool_id in sorted(pools)}
