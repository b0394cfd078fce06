"""
Multiple Linear Regression Module.

Fits suicide rate against a caller-selected set of predictors:
- Feature extraction (raw, log-scaled and one-hot predictors)
- Z-score normalisation
- Ordinary least squares via the normal equations, solved with
  Gaussian elimination and partial pivoting
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

import numpy as np
import pandas as pd

from mortality_insights.config import AGE_BANDS
from mortality_insights.core.numerics import safe_divide, zscore_columns
from mortality_insights.core.records import Record
from mortality_insights.exceptions import InsufficientDataError

logger = logging.getLogger(__name__)

# Relative to the largest entry of the system matrix
PIVOT_TOLERANCE = 1e-9


def _age_indicator(band: str) -> Callable[[Record], float]:
    return lambda r: 1.0 if band in r.age else 0.0


FEATURE_EXTRACTORS: dict[str, Callable[[Record], float]] = {
    "gdp_per_capita": lambda r: r.gdp_per_capita,
    "year": lambda r: float(r.year),
    "population": lambda r: math.log(r.population + 1),
    "sex_male": lambda r: 1.0 if r.sex == "male" else 0.0,
    **{name: _age_indicator(band) for name, band in AGE_BANDS.items()},
}


@dataclass
class RegressionModel:
    """Fitted linear model on normalised predictors."""
    coefficients: dict[str, float]
    intercept: float
    r_squared: float
    predictions: list[float] = field(repr=False)

    @property
    def predictors(self) -> list[str]:
        return list(self.coefficients)

    @property
    def n_samples(self) -> int:
        return len(self.predictions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "coefficients": self.coefficients,
            "intercept": self.intercept,
            "r_squared": self.r_squared,
            "n_samples": self.n_samples,
        }

    def coefficients_frame(self) -> pd.DataFrame:
        """Coefficients sorted by absolute magnitude, largest first."""
        df = pd.DataFrame({
            "predictor": list(self.coefficients),
            "coefficient": list(self.coefficients.values()),
        })
        order = df["coefficient"].abs().sort_values(ascending=False, kind="mergesort").index
        return df.loc[order].reset_index(drop=True)


def feature_value(record: Record, predictor: str) -> float:
    """Derived scalar for one predictor; unknown predictors map to 0."""
    extractor = FEATURE_EXTRACTORS.get(predictor)
    return extractor(record) if extractor else 0.0


def build_feature_matrix(records: Sequence[Record], predictors: Sequence[str]) -> np.ndarray:
    """Rows are records, columns are predictors in the order given."""
    return np.array(
        [[feature_value(r, p) for p in predictors] for r in records],
        dtype=float,
    ).reshape(len(records), len(predictors))


def gaussian_elimination(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Solve a @ x = b for square a.

    Forward elimination swaps in the row with the largest-magnitude pivot
    at each step, then back-substitution recovers x. A column whose best
    pivot is numerically zero (a constant or collinear predictor) is left
    as a free variable fixed at 0.
    """
    n = a.shape[0]
    augmented = np.hstack([
        np.asarray(a, dtype=float),
        np.asarray(b, dtype=float).reshape(n, 1),
    ])
    tolerance = PIVOT_TOLERANCE * max(1.0, float(np.max(np.abs(augmented[:, :n]), initial=0.0)))

    pivot_columns: list[int] = []
    row = 0
    for col in range(n):
        if row == n:
            break
        pivot_row = row + int(np.argmax(np.abs(augmented[row:, col])))
        if abs(augmented[pivot_row, col]) <= tolerance:
            continue
        if pivot_row != row:
            augmented[[row, pivot_row]] = augmented[[pivot_row, row]]

        for k in range(row + 1, n):
            factor = augmented[k, col] / augmented[row, col]
            augmented[k, col:] -= factor * augmented[row, col:]

        pivot_columns.append(col)
        row += 1

    if len(pivot_columns) < n:
        free = sorted(set(range(n)) - set(pivot_columns))
        logger.warning("Normal equations are singular; fixing columns %s at 0", free)

    x = np.zeros(n)
    for r in range(len(pivot_columns) - 1, -1, -1):
        col = pivot_columns[r]
        x[col] = (augmented[r, n] - augmented[r, col + 1:n] @ x[col + 1:]) / augmented[r, col]

    return x


def solve_least_squares(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Solve the normal equations (X'X) w = X'y."""
    return gaussian_elimination(x.T @ x, x.T @ y)


def r_squared(y: np.ndarray, predictions: np.ndarray) -> float:
    """Coefficient of determination clamped to [0, 1]."""
    ss_res = float(np.sum((y - predictions) ** 2))
    ss_tot = float(np.sum((y - y.mean()) ** 2))
    return float(np.clip(1 - safe_divide(ss_res, ss_tot, default=0.0), 0.0, 1.0))


def fit_linear_model(records: Sequence[Record], predictors: Sequence[str]) -> RegressionModel:
    """
    Fit suicide rate on the selected predictors.

    Args:
        records: Record set.
        predictors: Predictor names (see config.AVAILABLE_PREDICTORS).
            Repeated names are fitted once.

    Returns:
        RegressionModel with coefficients on the z-scored predictors.

    Raises:
        ValueError: If no predictors are given.
        InsufficientDataError: If there are not more records than predictors.
    """
    predictors = list(dict.fromkeys(predictors))
    if not predictors:
        raise ValueError("At least one predictor is required")
    if len(records) <= len(predictors):
        raise InsufficientDataError(
            f"Need more than {len(predictors)} records for {len(predictors)} predictors, "
            f"got {len(records)}"
        )

    unknown = [p for p in predictors if p not in FEATURE_EXTRACTORS]
    if unknown:
        logger.warning("Unknown predictors %s contribute a constant 0 column", unknown)

    features = zscore_columns(build_feature_matrix(records, predictors))
    x = np.hstack([np.ones((len(records), 1)), features])
    y = np.array([r.suicides_per_100k for r in records], dtype=float)

    weights = solve_least_squares(x, y)
    predictions = x @ weights

    model = RegressionModel(
        coefficients={p: float(w) for p, w in zip(predictors, weights[1:])},
        intercept=float(weights[0]),
        r_squared=r_squared(y, predictions),
        predictions=predictions.tolist(),
    )
    logger.debug(
        "Fitted %d predictors on %d records, R2=%.4f",
        len(predictors), len(records), model.r_squared,
    )
    return model
