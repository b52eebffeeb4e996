"""Small numeric helpers shared across the package."""


def normalize(value: float, low: float, high: float) -> float:
    """Linearly map ``value`` from [low, high] to [0, 1].

    Returns 0.0 for a degenerate range where ``low == high``.
    """
    span = high - low
    if span == 0:
        return 0.0
    return (value - low) / span
