"""Vitality curve sampling.

A vitality curve maps a dying cell's vitality (x in [0, 1]) to its neighbor
contribution (y). The user edits a handful of control points; the kernel only
ever sees a fixed table of samples produced here.
"""

import math
from typing import List, NamedTuple, Sequence

VITALITY_CURVE_SAMPLES = 128
CURVE_MIN = -2.0
CURVE_MAX = 2.0


class CurvePoint(NamedTuple):
    """Control point of a vitality curve."""
    x: float  # vitality, 0..1
    y: float  # contribution, clamped to [-2, 2] after sampling


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def monotone_tangents(xs: Sequence[float], ys: Sequence[float]) -> List[float]:
    """Fritsch-Carlson tangents for sorted control points.

    Interior tangents are a weighted harmonic mean of the adjacent secants
    (zero where the secants change sign); each segment's tangent pair is then
    limited to alpha^2 + beta^2 <= 9 so the curve cannot overshoot.
    """
    n = len(xs)
    deltas = [xs[j + 1] - xs[j] for j in range(n - 1)]
    slopes = [0.0 if d == 0 else (ys[j + 1] - ys[j]) / d for j, d in enumerate(deltas)]

    tangents: List[float] = []
    for j in range(n):
        if j == 0:
            tangents.append(slopes[0])
        elif j == n - 1:
            tangents.append(slopes[n - 2])
        else:
            m0 = slopes[j - 1]
            m1 = slopes[j]
            if m0 * m1 <= 0:
                tangents.append(0.0)
            else:
                w0 = 2 * deltas[j] + deltas[j - 1]
                w1 = deltas[j] + 2 * deltas[j - 1]
                tangents.append((w0 + w1) / (w0 / m0 + w1 / m1))

    for j in range(n - 1):
        dk = slopes[j]
        if dk == 0:
            tangents[j] = 0.0
            tangents[j + 1] = 0.0
            continue
        alpha = tangents[j] / dk
        beta = tangents[j + 1] / dk
        tau = alpha * alpha + beta * beta
        if tau > 9:
            scale = 3 / math.sqrt(tau)
            tangents[j] = scale * alpha * dk
            tangents[j + 1] = scale * beta * dk

    return tangents


def monotone_cubic_interpolate(points: Sequence[CurvePoint], x: float) -> float:
    """Evaluate the monotone cubic Hermite interpolant of points at x.

    Outside the control point range the nearest endpoint's y is held.
    """
    n = len(points)
    if n == 0:
        return 0.0
    if n == 1:
        return points[0][1]

    ordered = sorted(points, key=lambda p: p[0])
    xs = [p[0] for p in ordered]
    ys = [p[1] for p in ordered]
    if x <= xs[0]:
        return ys[0]
    if x >= xs[-1]:
        return ys[-1]

    i = 0
    while i < n - 1 and xs[i + 1] < x:
        i += 1

    tangents = monotone_tangents(xs, ys)

    h = xs[i + 1] - xs[i]
    t = (x - xs[i]) / h
    t2 = t * t
    t3 = t2 * t

    h00 = 2 * t3 - 3 * t2 + 1
    h10 = t3 - 2 * t2 + t
    h01 = -2 * t3 + 3 * t2
    h11 = t3 - t2

    return h00 * ys[i] + h10 * h * tangents[i] + h01 * ys[i + 1] + h11 * h * tangents[i + 1]


def sample_vitality_curve(points: Sequence[CurvePoint],
                          count: int = VITALITY_CURVE_SAMPLES) -> List[float]:
    """Sample a vitality curve at count evenly spaced vitalities in [0, 1].

    Args:
        points: Control points, any order; (x, y) tuples are accepted
        count: Number of samples

    Returns:
        count samples clamped to [-2, 2]; all zeros for fewer than 2 points
    """
    if not points or len(points) < 2:
        return [0.0] * count
    if count == 1:
        return [_clamp(monotone_cubic_interpolate(points, 0.0), CURVE_MIN, CURVE_MAX)]
    return [
        _clamp(monotone_cubic_interpolate(points, i / (count - 1)), CURVE_MIN, CURVE_MAX)
        for i in range(count)
    ]
