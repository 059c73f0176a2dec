"""
Return statistics.

Closed-form statistics of a return series: standard deviation and the
(non-normalised) Sharpe and Sortino ratios.  Used by the bar report on
close-to-close returns.
"""

from __future__ import annotations

from typing import Sequence
import math

from ..errors import InvalidArgumentError, UnimplementedFeatureError


def _check_count(values: Sequence[float], sample: bool, what: str) -> int:
    n = len(values)
    if n == 0:
        raise InvalidArgumentError(f"Illegal number of {what} (zero)")
    if sample and n == 1:
        raise InvalidArgumentError(f"Illegal number of {what} (one)")
    return n


def standard_deviation(values: Sequence[float], sample: bool = False) -> float:
    """Return the standard deviation of `values`.

    Parameters
    ----------
    values : sequence of float
    sample : bool
        Whether the values are a sample (divide by ``n - 1``) rather
        than the whole population (divide by ``n``).
    """
    n = _check_count(values, sample, "values")
    mean = sum(values) / n
    sq_sum = sum((v - mean) ** 2 for v in values)
    if sample:
        n -= 1
    return math.sqrt(sq_sum / n)


def sharpe_ratio(returns: Sequence[float], compound: bool = False, sample: bool = False) -> float:
    """Return the non-normalised Sharpe ratio of `returns`.

    A series without dispersion has a ratio of 0.0.
    """
    n = _check_count(returns, sample, "returns")
    if compound:
        raise UnimplementedFeatureError("Processing of compounding returns not yet implemented")
    mean_ret = sum(returns) / n
    std_dev = standard_deviation(returns, sample)
    return mean_ret / std_dev if std_dev > 0 else 0.0


def sortino_ratio(returns: Sequence[float], compound: bool = False, sample: bool = False) -> float:
    """Return the non-normalised Sortino ratio of `returns`.

    Only losses count towards the deviation; gains are replaced by zero.
    """
    n = _check_count(returns, sample, "returns")
    if compound:
        raise UnimplementedFeatureError("Processing of compounding returns not yet implemented")
    mean_ret = sum(returns) / n
    downside = [min(r, 0.0) for r in returns]
    std_dev = standard_deviation(downside, sample)
    return mean_ret / std_dev if std_dev > 0 else 0.0
