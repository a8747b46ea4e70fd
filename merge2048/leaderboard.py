from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from merge2048.api.models import LeaderboardRecord

NAME_MAX_LENGTH = 24


def _now() -> datetime:
    return datetime.now(tz=UTC)


def make_record(name: str, score: int, *, now: datetime | None = None) -> LeaderboardRecord:
    """Build a record stamped with `now`; the name is trimmed and cut to 24 chars."""

    cleaned = name.strip()[:NAME_MAX_LENGTH]
    if not cleaned:
        raise ValueError("name is required")
    ts = now or _now()
    return LeaderboardRecord(
        name=cleaned,
        score=score,
        timestamp=int(ts.timestamp() * 1000),
        date=ts.date().isoformat(),
    )


def rank_records(records: Iterable[LeaderboardRecord], *, limit: int = 10) -> list[LeaderboardRecord]:
    """Highest score first; on equal scores the earlier record wins."""

    return sorted(records, key=lambda rec: (-rec.score, rec.timestamp))[:limit]


def qualifies(records: Iterable[LeaderboardRecord], score: int, *, limit: int = 10) -> bool:
    ranked = rank_records(records, limit=limit)
    if len(ranked) < limit:
        return True
    # A new record is always the latest, so it loses ties with the last entry.
    return score > ranked[-1].score
