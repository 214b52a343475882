import math
from typing import List, Sequence, Tuple


def safe_divide(numerator: float, denominator: float, fallback: float = 0.0) -> float:
    """Divide, returning fallback for zero/non-finite denominators or results."""
    if denominator == 0 or not math.isfinite(denominator):
        return fallback
    result = numerator / denominator
    return result if math.isfinite(result) else fallback


def clamp_score(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp a score into [low, high]. NaN and infinities collapse to low."""
    if value is None or math.isnan(value) or math.isinf(value):
        return low
    return max(low, min(high, value))


def mean(values: Sequence[float], fallback: float = 0.0) -> float:
    """Arithmetic mean with a fallback for empty input."""
    if not values:
        return fallback
    return safe_divide(sum(values), len(values), fallback)


def variance(values: Sequence[float]) -> float:
    """Population variance. Empty input has zero variance."""
    if not values:
        return 0.0
    avg = mean(values)
    return sum((v - avg) ** 2 for v in values) / len(values)


def linear_regression(xs: Sequence[float], ys: Sequence[float]) -> Tuple[float, float]:
    """
    Ordinary least squares fit of ys against xs.

    Returns (slope, intercept). Degenerate input (fewer than 2 points or all xs
    equal) yields a zero slope and the mean as intercept.
    """
    n = min(len(xs), len(ys))
    if n == 0:
        return 0.0, 0.0
    if n < 2:
        return 0.0, float(ys[0])

    sum_x = sum_y = sum_xy = sum_xx = 0.0
    for x, y in zip(xs, ys):
        sum_x += x
        sum_y += y
        sum_xy += x * y
        sum_xx += x * x

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return 0.0, sum_y / n

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


def pearson_correlation(a: List[float], b: List[float]) -> float:
    """Pearson correlation of two paired series, 0.0 when undefined."""
    n = min(len(a), len(b))
    if n < 2:
        return 0.0
    a, b = a[:n], b[:n]
    mean_a, mean_b = mean(a), mean(b)
    cov = sum((x - mean_a) * (y - mean_b) for x, y in zip(a, b))
    norm_a = math.sqrt(sum((x - mean_a) ** 2 for x in a))
    norm_b = math.sqrt(sum((y - mean_b) ** 2 for y in b))
    return safe_divide(cov, norm_a * norm_b)
