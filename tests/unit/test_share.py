"""Tests for the per-player share computation."""

import pytest

from src.pw_common.errors import PriceNotSetError
from src.pw_settlement.domain.share import compute_share


def test_even_split() -> None:
    assert compute_share(5000, 2) == 2500


def test_uneven_split_rounds_to_nearest_paisa() -> None:
    assert compute_share(5000, 3) == 1667


def test_override_used_when_price_unset() -> None:
    assert compute_share(None, 4, override=8000) == 2000


def test_override_wins_over_stored_price() -> None:
    assert compute_share(6000, 2, override=8000) == 4000


def test_non_positive_override_is_ignored() -> None:
    assert compute_share(6000, 2, override=0) == 3000


@pytest.mark.parametrize("total", [None, 0, -100])
def test_unset_price_without_override_fails(total: int | None) -> None:
    with pytest.raises(PriceNotSetError):
        compute_share(total, 2)
