DEFAULT_CAP = 15


def next_delay(current: float, failed: bool, cap: float = DEFAULT_CAP) -> float:
    """Seconds to wait before the next watch attempt.

    A successful attempt resets to 0. Failures go 1, 2, 4, ... up to `cap`.
    """
    if not failed:
        return 0
    if current <= 0:
        return 1
    return min(current * 2, cap)
