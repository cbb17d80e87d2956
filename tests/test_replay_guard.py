import pytest

from src.application.services import replay_guard
from src.domain.errors import StaleTimestamp

NOW = 1737312000


@pytest.mark.parametrize("offset", [0, 1, -1, 300, -300])
def test_within_window_accepts(offset: int) -> None:
    replay_guard.check(NOW + offset, NOW, 300)


@pytest.mark.parametrize("offset", [301, -301])
def test_outside_window_denies(offset: int) -> None:
    with pytest.raises(StaleTimestamp) as info:
        replay_guard.check(NOW + offset, NOW, 300)
    assert info.value.tolerance_seconds == 300


def test_default_tolerance_is_five_minutes() -> None:
    replay_guard.check(NOW - 300, NOW)
    with pytest.raises(StaleTimestamp):
        replay_guard.check(NOW - 301, NOW)
