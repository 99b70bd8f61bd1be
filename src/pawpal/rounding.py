from decimal import ROUND_HALF_UP, Decimal


def round_half_away(value: float, places: int = 0) -> float:
    """Round ties away from zero (2.5 -> 3, -2.5 -> -3).

    Python's ``round`` rounds ties to even, so every figure in this package
    goes through here instead. The decimal expansion of ``repr(value)`` is
    rounded, which matches what a user sees printed.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_int(value: float) -> int:
    return int(round_half_away(value))
