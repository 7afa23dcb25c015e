"""
Game and match winner detection under a tournament's scoring rules.

Everything here is pure: the same functions back the stored match result and
the live win-progress display, so they must never touch persisted state.
"""
from typing import NamedTuple, Optional, Sequence

from squash_tracker.models.match_model import GameScore, Side
from squash_tracker.models.tournament_model import ScoringRules


class MatchEvaluation(NamedTuple):
    games_won_by_a: int
    games_won_by_b: int
    winner: Optional[Side]
    # Both sides reached the games needed to win (malformed input)
    conflict: bool = False


def game_winner(game: GameScore, rules: ScoringRules) -> Optional[Side]:
    """
    Returns the side that has won this game, or None while it is unresolved.

    A side wins once it has reached ``points_per_game`` with a lead of two
    points (win-by-two) or one point. Negative scores never resolve a game.
    """
    a, b = game.player_a_score, game.player_b_score
    if a < 0 or b < 0:
        return None
    margin = 2 if rules.must_win_by_two else 1
    if a >= rules.points_per_game and a - b >= margin:
        return Side.A
    if b >= rules.points_per_game and b - a >= margin:
        return Side.B
    return None


def evaluate_match(scores: Sequence[GameScore], rules: ScoringRules) -> MatchEvaluation:
    games_won_by_a = 0
    games_won_by_b = 0
    for game in scores:
        side = game_winner(game, rules)
        if side == Side.A:
            games_won_by_a += 1
        elif side == Side.B:
            games_won_by_b += 1

    needed = rules.games_needed_to_win
    a_done = games_won_by_a >= needed
    b_done = games_won_by_b >= needed
    winner = None
    if a_done:
        winner = Side.A
    elif b_done:
        winner = Side.B
    return MatchEvaluation(games_won_by_a, games_won_by_b, winner, a_done and b_done)
