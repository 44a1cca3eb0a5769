"""Random number generation, array fillers and small statistics helpers."""

from __future__ import annotations

import math
import random
from typing import TYPE_CHECKING

from . import operators

if TYPE_CHECKING:
    from typing import List, MutableSequence, Optional, Sequence

_gauss_cache: Optional[float] = None


def gauss_random() -> float:
    """Draws a standard normal sample with the Marsaglia polar method.

    Each accepted pair produces two independent samples; the second one is
    cached and returned by the next call.

    Returns:
    -------
        float: A sample of N(0, 1).

    """
    global _gauss_cache
    if _gauss_cache is not None:
        cached = _gauss_cache
        _gauss_cache = None
        return cached
    u = 2 * random.random() - 1
    v = 2 * random.random() - 1
    r = u * u + v * v
    while r == 0 or r > 1:
        u = 2 * random.random() - 1
        v = 2 * random.random() - 1
        r = u * u + v * v
    c = math.sqrt(-2 * math.log(r) / r)
    _gauss_cache = v * c
    return u * c


def box_muller() -> float:
    """Draws a normal sample squeezed into the open interval (0, 1).

    The standard normal from the Box-Muller transform is scaled by 1/10 and
    shifted to 0.5; samples landing outside (0, 1) are drawn again.
    """
    u = 0.0
    v = 0.0
    while u == 0:
        u = random.random()
    while v == 0:
        v = random.random()
    num = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
    num = num / 10.0 + 0.5
    if num >= 1 or num <= 0:
        return box_muller()
    return num


def randn(mean: float, std: float) -> float:
    """Sample of N(mean, std**2)."""
    return mean + gauss_random() * std


def randf(low: float, high: float) -> float:
    """Uniform float sample in [low, high)."""
    return random.random() * (high - low) + low


def randi(low: float, high: float) -> int:
    """Uniform integer sample in [low, high)."""
    return math.floor(random.random() * (high - low) + low)


def skewed_randn(mean: float, std: float, skew: float) -> float:
    """Normal-shaped sample whose shape is bent by `skew`.

    `skew == 1` reproduces `randn` restricted to roughly (-5, 5) standard
    deviations. Other skew factors shift the mass left (> 1) or right (< 1);
    the mean and variance of the skewed variants are not corrected.
    """
    num = box_muller()
    num = math.pow(num, skew)
    num = (num - 0.5) * 10.0
    return num * std + mean


def fill_randn(arr: MutableSequence[float], mean: float, std: float) -> None:
    """Fills `arr` in place with `randn(mean, std)` samples."""
    for i in range(len(arr)):
        arr[i] = randn(mean, std)


def fill_rand(arr: MutableSequence[float], low: float, high: float) -> None:
    """Fills `arr` in place with `randf(low, high)` samples."""
    for i in range(len(arr)):
        arr[i] = randf(low, high)


def fill_const(arr: MutableSequence[float], c: float) -> None:
    """Fills `arr` in place with the constant `c`."""
    for i in range(len(arr)):
        arr[i] = c


def zeros(n: int) -> List[float]:
    return [0.0] * n


def ones(n: int) -> List[float]:
    return [1.0] * n


def sum(values: Sequence[float]) -> float:
    return operators.sum(values)


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def median(values: Sequence[float]) -> float:
    """Middle value, or the mean of the two middle values for even lengths."""
    ordered = sorted(values)
    half = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[half]
    return (ordered[half - 1] + ordered[half]) / 2.0


def var(values: Sequence[float], normalization: str = "unbiased") -> float:
    """Variance of `values`.

    Args:
    ----
        values: the sample.
        normalization: `unbiased` divides the squared deviations by n - 1,
            `uncorrected` by n and `biased` by n + 1.

    Returns:
    -------
        float: The variance, 0 for a single element sample with `unbiased`.

    """
    n = len(values)
    if normalization == "unbiased":
        denominator = n - 1
    elif normalization == "uncorrected":
        denominator = n
    elif normalization == "biased":
        denominator = n + 1
    else:
        raise ValueError(f"Unknown normalization {normalization!r}")
    if denominator <= 0:
        return 0.0
    m = mean(values)
    deviations = operators.map(lambda x: (x - m) * (x - m), values)
    return sum(deviations) / denominator


def std(values: Sequence[float], normalization: str = "unbiased") -> float:
    return math.sqrt(var(values, normalization))


def mode(values: Sequence[float]) -> List[float]:
    """All values with the highest number of occurrences, sorted ascending."""
    counts: dict = {}
    for x in values:
        counts[x] = counts.get(x, 0) + 1
    if not counts:
        return []
    top = max(counts.values())
    return sorted(x for x, c in counts.items() if c == top)


def softmax(values: Sequence[float]) -> List[float]:
    """Exponentially scales the values and normalizes them to sum up to 1.

    The maximum is subtracted before exponentiating, which leaves the result
    unchanged but keeps `exp` from overflowing.
    """
    top = max(values)
    exps = operators.map(lambda x: operators.exp(x - top), values)
    total = sum(exps)
    return operators.map(lambda x: x / total, exps)


def argmax(values: Sequence[float]) -> int:
    """Index of the first maximal value."""
    best = 0
    for i in range(1, len(values)):
        if values[i] > values[best]:
            best = i
    return best


def sample_weighted(probabilities: Sequence[float]) -> int:
    """Draws an index according to the given weights.

    Returns the first index whose running sum exceeds a uniform sample from
    [0, 1), or 0 when no such index exists (e.g. all weights are zero).
    """
    r = random.random()
    x = 0.0
    for i, p in enumerate(probabilities):
        x += p
        if x > r:
            return i
    return 0
