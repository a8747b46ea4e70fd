from __future__ import annotations

import itertools
from collections.abc import Callable, Generator, Iterable

import pytest


class SequenceRandom:
    """Deterministic stand-in for `random.Random`: replays `values` forever."""

    def __init__(self, values: Iterable[float]) -> None:
        self._values = itertools.cycle(list(values))

    def random(self) -> float:
        return next(self._values)


@pytest.fixture()
def fixed_random() -> Callable[..., SequenceRandom]:
    """`fixed_random(0.0)` always picks the first empty cell and spawns a 2."""

    def _make(*values: float) -> SequenceRandom:
        return SequenceRandom(values or (0.0,))

    return _make


@pytest.fixture()
def fake_redis():
    import fakeredis

    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture()
def client_and_redis():
    """FastAPI TestClient wired to a fakeredis instance, with a fresh game session."""

    import fakeredis
    from fastapi.testclient import TestClient

    from merge2048.api.deps import get_redis, reset_session_for_tests
    from merge2048.main import app

    r = fakeredis.FakeRedis(decode_responses=True)

    def _override() -> Generator[fakeredis.FakeRedis, None, None]:
        yield r

    reset_session_for_tests()
    app.dependency_overrides[get_redis] = _override
    with TestClient(app) as c:
        yield c, r
    app.dependency_overrides.clear()
    reset_session_for_tests()
