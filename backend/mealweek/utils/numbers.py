from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, places: int) -> float:
    """Round half away from zero (2.5 -> 3, -2.5 -> -3), unlike built-in round().

    Goes through str() so 7.25 rounds as written rather than as its binary
    approximation.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
