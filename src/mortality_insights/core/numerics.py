"""
Numeric helpers with explicit defaults for degenerate inputs.

Every ratio and normalisation in the engine goes through these so that a
zero denominator never turns into NaN further downstream.
"""

import numpy as np


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Return numerator / denominator, or default when the denominator is 0."""
    if denominator == 0:
        return default
    return numerator / denominator


def safe_std(values: np.ndarray) -> float:
    """Population standard deviation, with 1.0 substituted for 0."""
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return 1.0
    std = float(np.std(values))
    return std if std != 0 else 1.0


def zscore_columns(matrix: np.ndarray) -> np.ndarray:
    """
    Z-score normalise each column of a 2-D array.

    Columns are centred on their mean and divided by their population
    standard deviation (see safe_std for the zero-variance default).
    """
    matrix = np.asarray(matrix, dtype=float)
    if matrix.size == 0:
        return matrix.copy()
    means = matrix.mean(axis=0)
    stds = np.array([safe_std(matrix[:, j]) for j in range(matrix.shape[1])])
    return (matrix - means) / stds


def round2(value: float) -> float:
    return round(float(value), 2)
