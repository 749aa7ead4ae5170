"""Per-player share of a game's turf price.

Pure functions, no I/O. Amounts are integer paise.
"""

from src.pw_common.errors import PriceNotSetError
from src.pw_common.paise import divide_round_half_up


def compute_share(total_price: int | None, divisor: int, override: int | None = None) -> int:
    """Split ``total_price`` (or a positive ``override``) ``divisor`` ways.

    Rounds half away from zero to a whole paisa: 5000 / 3 -> 1667.
    """
    price = override if override is not None and override > 0 else total_price
    if price is None or price <= 0:
        raise PriceNotSetError()
    return divide_round_half_up(price, divisor)
