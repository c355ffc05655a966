# backend/tests/test_puzzle_stats.py

import datetime as dt

import pytest

from puzzle_tracker.models.puzzle_log import PuzzleLog, UserPuzzle
from puzzle_tracker.models.status import PuzzleStatus
from puzzle_tracker.services.puzzle_stats import (
    best_times,
    compute_aggregate_stats,
    count_this_month,
    favorite_brand,
    get_puzzle_stats,
    weekly_streak,
)

# Mercredi 12 juin 2024 ; la semaine a commencé le dimanche 9 juin
NOW = dt.datetime(2024, 6, 12, 15, 30, tzinfo=dt.timezone.utc)


def _puzzle(status=PuzzleStatus.COMPLETED, completed_at=None, pieces=None, seconds=None, brand="Unknown"):
    return UserPuzzle(
        user_id="u1",
        puzzle_id="p",
        status=status,
        progress_percentage=100 if status is PuzzleStatus.COMPLETED else 0,
        completed_at=completed_at,
        pieces=pieces,
        time_spent_seconds=seconds,
        brand=brand,
    )


def _days_ago(days):
    return NOW - dt.timedelta(days=days)


def test_best_time_within_bracket_tolerance():
    stats = compute_aggregate_stats([_puzzle(pieces=1020, seconds=3600)], NOW)
    assert stats.best_time_for(1000) == 3600
    assert stats.best_time_for(500) is None


def test_best_time_takes_minimum_and_ignores_zero():
    puzzles = [
        _puzzle(pieces=500, seconds=7200),
        _puzzle(pieces=480, seconds=5400),
        _puzzle(pieces=550, seconds=0),
        _puzzle(pieces=551, seconds=60),
    ]
    [best_500] = [b for b in best_times(puzzles) if b.bracket == 500]
    assert best_500.seconds == 5400
    assert best_500.display == "1h 30m"


def test_best_times_cover_every_bracket():
    assert [b.bracket for b in best_times([])] == [250, 500, 750, 1000, 1500, 2000]


def test_empty_stats():
    stats = compute_aggregate_stats([], NOW)
    assert stats.total_completed == 0
    assert stats.total_time_spent == 0
    assert stats.average_time_per_puzzle == 0
    assert stats.this_month_completed == 0
    assert stats.favorite_brand == "Unknown"
    assert stats.weekly_streak == 0
    assert stats.total_puzzles == 0
    assert stats.status_counts == {s.value: 0 for s in PuzzleStatus}


def test_totals_and_average_only_count_completed():
    puzzles = [
        _puzzle(seconds=3600, completed_at=_days_ago(1)),
        _puzzle(seconds=1801, completed_at=_days_ago(2)),
        _puzzle(status=PuzzleStatus.IN_PROGRESS, seconds=999),
        _puzzle(status=PuzzleStatus.WISHLIST),
        _puzzle(status=PuzzleStatus.LIBRARY),
    ]
    stats = compute_aggregate_stats(puzzles, NOW)
    assert stats.total_completed == 2
    assert stats.total_time_spent == 5401
    # 2700.5 arrondi vers le haut
    assert stats.average_time_per_puzzle == 2701
    assert stats.total_puzzles == 5
    assert stats.total_owned == 4
    assert stats.status_counts["completed"] == 2
    assert stats.status_counts["wishlist"] == 1
    assert stats.status_counts["abandoned"] == 0


def test_count_this_month():
    completed = [
        _puzzle(completed_at=dt.datetime(2024, 6, 1, 0, 0, tzinfo=dt.timezone.utc)),
        _puzzle(completed_at=dt.datetime(2024, 5, 31, 23, 59, tzinfo=dt.timezone.utc)),
        _puzzle(completed_at=_days_ago(1)),
        _puzzle(completed_at=None),
    ]
    assert count_this_month(completed, NOW) == 2


def test_favorite_brand_tie_keeps_first_seen():
    completed = [
        _puzzle(brand="Ravensburger"),
        _puzzle(brand="Clementoni"),
        _puzzle(brand="Clementoni"),
        _puzzle(brand="Ravensburger"),
    ]
    assert favorite_brand(completed) == "Ravensburger"


def test_favorite_brand_most_frequent():
    completed = [_puzzle(brand="Pomegranate"), _puzzle(brand="Clementoni"), _puzzle(brand="Clementoni")]
    assert favorite_brand(completed) == "Clementoni"


class TestWeeklyStreak:
    def test_consecutive_weeks(self):
        completed = [
            _puzzle(completed_at=_days_ago(0)),  # semaine du 9 juin
            _puzzle(completed_at=_days_ago(7)),  # semaine du 2 juin
            _puzzle(completed_at=_days_ago(14)),  # semaine du 26 mai
        ]
        assert weekly_streak(completed, NOW) == 3

    def test_gap_stops_the_count(self):
        completed = [
            _puzzle(completed_at=_days_ago(0)),
            _puzzle(completed_at=_days_ago(1)),
            _puzzle(completed_at=_days_ago(21)),
        ]
        assert weekly_streak(completed, NOW) == 1

    def test_last_week_still_counts(self):
        assert weekly_streak([_puzzle(completed_at=_days_ago(7))], NOW) == 1

    def test_stale_streak_is_zero(self):
        assert weekly_streak([_puzzle(completed_at=_days_ago(30))], NOW) == 0

    def test_no_completion(self):
        assert weekly_streak([_puzzle(completed_at=None)], NOW) == 0


@pytest.mark.asyncio
async def test_get_puzzle_stats_reads_store(store):
    store.puzzles["p-1000"] = {"title": "Harbor", "brand": "Ravensburger", "piece_count": 1000}
    await store.insert_log(
        PuzzleLog(
            user_id="u1", puzzle_id="p-1000", status="completed", progress_percentage=100,
            time_spent_seconds=4000, completed_at=NOW,
        )
    )
    await store.insert_log(PuzzleLog(user_id="u1", puzzle_id="p-x"))
    await store.insert_log(
        PuzzleLog(
            user_id="someone-else", puzzle_id="p-1000", status="completed", progress_percentage=100,
            time_spent_seconds=100, completed_at=NOW,
        )
    )

    stats = await get_puzzle_stats(store, "u1", "Europe/Paris")

    assert stats.total_completed == 1
    assert stats.total_puzzles == 2
    assert stats.favorite_brand == "Ravensburger"
    assert stats.best_time_for(1000) == 4000
