"""Integer arithmetic utilities for paise-based wallet balances.

All prices, amounts, and balances use int (paise, 1 INR = 100 paise).
No float, no Decimal. Rounding to "2 decimal places" of a rupee amount is
rounding to a whole number of paise.
"""


def paise_to_display(paise: int) -> str:
    """Convert paise to display string: 150000 -> '₹1,500.00', -1200 -> '-₹12.00'."""
    if paise < 0:
        abs_paise = -paise
        return f"-₹{abs_paise // 100:,}.{abs_paise % 100:02d}"
    return f"₹{paise // 100:,}.{paise % 100:02d}"


def divide_round_half_up(amount: int, divisor: int) -> int:
    """Divide and round half away from zero.

    2500 / 2 -> 1250, 100 / 3 -> 33, 50 / 4 -> 13 (12.5 rounds up).
    """
    if divisor <= 0:
        raise ValueError(f"divisor must be positive, got {divisor}")
    if amount < 0:
        return -divide_round_half_up(-amount, divisor)
    return (amount * 2 + divisor) // (divisor * 2)
