"""
Modeling module: OLS regression with dummy-coded categoricals, one-way ANOVA and Tukey HSD.
"""

from dataclasses import dataclass, field
from itertools import combinations
from typing import Any, Optional

import numpy as np
import pandas as pd
import statsmodels.api as sm
import statsmodels.formula.api as smf
from statsmodels.stats.multicomp import pairwise_tukeyhsd
from statsmodels.tools.tools import add_constant

from .errors import DataShapeError, ModelFitError


@dataclass(frozen=True)
class FittedModel:
    """Read-only result of a regression or ANOVA fit."""
    kind: str
    response: str
    predictors: tuple
    nobs: int
    coefficients: pd.DataFrame
    rsquared: float
    rsquared_adj: float
    fvalue: float
    f_pvalue: float
    anova_table: Optional[pd.DataFrame] = None
    pairwise: Optional[pd.DataFrame] = None
    results: Any = field(default=None, repr=False, compare=False)

    @property
    def params(self) -> pd.Series:
        return self.coefficients.set_index("term")["estimate"]

    def summary(self) -> str:
        return self.results.summary().as_text()


def _as_frame(dataset, columns):
    """Select `columns` from a DataFrame or a mapping of equal-length sequences."""
    missing = [c for c in columns if c not in dataset]
    if missing:
        raise DataShapeError(f"Columns not found in dataset: {missing}")

    if isinstance(dataset, pd.DataFrame):
        return dataset[list(columns)].copy()

    lengths = {c: len(dataset[c]) for c in columns}
    if len(set(lengths.values())) > 1:
        raise DataShapeError(f"Column lengths differ: {lengths}")

    data = {}
    for c in columns:
        values = dataset[c]
        if isinstance(values, (pd.Series, pd.Categorical)):
            data[c] = pd.Series(values).reset_index(drop=True)
        else:
            data[c] = list(values)
    return pd.DataFrame(data)


def _is_categorical(s: pd.Series) -> bool:
    if isinstance(s.dtype, pd.CategoricalDtype):
        return True
    return pd.api.types.is_object_dtype(s.dtype) or pd.api.types.is_string_dtype(s.dtype)


def _as_categorical(s: pd.Series) -> pd.Series:
    if isinstance(s.dtype, pd.CategoricalDtype):
        return s
    # Plain labels: categories are the sorted distinct values
    return s.astype("category")


def expand_dummies(frame, column):
    """
    Indicator columns for every category of `column` except the first (reference).

    Categories come from the column's dtype, not from the values present, so
    the output columns are fixed by the label set.

    Returns:
        DataFrame of float 0/1 columns named "{column}[T.{label}]"
    """
    s = _as_categorical(frame[column])
    categories = list(s.cat.categories)
    return pd.DataFrame(
        {f"{column}[T.{label}]": (s == label).astype(float).to_numpy() for label in categories[1:]},
        index=frame.index,
    )


def _design_matrix(frame, predictor_columns):
    parts = []
    for col in predictor_columns:
        if _is_categorical(frame[col]):
            parts.append(expand_dummies(frame, col))
            continue

        values = pd.to_numeric(frame[col], errors="coerce").astype(float)
        if values.isna().any():
            raise DataShapeError(f"Predictor '{col}' has non-numeric or missing values")
        if np.ptp(values.to_numpy()) == 0:
            raise ModelFitError(f"Predictor '{col}' has zero variance")
        parts.append(values.to_frame(col))

    X = pd.concat(parts, axis=1) if parts else pd.DataFrame(index=frame.index)
    return add_constant(X, has_constant="add")


def _coefficient_table(results):
    return pd.DataFrame({
        "term": results.params.index,
        "estimate": results.params.values,
        "std_err": results.bse.values,
        "t": results.tvalues.values,
        "p_value": results.pvalues.values,
    }).reset_index(drop=True)


def fit_ols(dataset, response_column, predictor_columns):
    """
    Fit an ordinary least-squares regression with an intercept.

    Args:
        dataset: DataFrame or mapping of column name -> sequence
        response_column: Name of the response column
        predictor_columns: Continuous and/or categorical predictor names;
            categoricals are dummy-coded against their first category

    Returns:
        FittedModel
    """
    predictor_columns = list(predictor_columns)
    if not predictor_columns:
        raise DataShapeError("At least one predictor column is required")
    frame = _as_frame(dataset, [response_column] + predictor_columns)

    y = pd.to_numeric(frame[response_column], errors="coerce").astype(float)
    if y.isna().any():
        raise DataShapeError(f"Response '{response_column}' has non-numeric or missing values")

    X = _design_matrix(frame, predictor_columns)
    n, k = X.shape
    if n <= k:
        raise ModelFitError(f"{n} observations for {k} parameters; no residual degrees of freedom")
    if np.linalg.matrix_rank(X.to_numpy()) < k:
        raise ModelFitError(f"Design matrix is singular for predictors {predictor_columns}")

    results = sm.OLS(y, X).fit()

    return FittedModel(
        kind="ols",
        response=response_column,
        predictors=tuple(predictor_columns),
        nobs=int(results.nobs),
        coefficients=_coefficient_table(results),
        rsquared=float(results.rsquared),
        rsquared_adj=float(results.rsquared_adj),
        fvalue=float(results.fvalue),
        f_pvalue=float(results.f_pvalue),
        results=results,
    )


def _tukey_table(y, groups, alpha):
    tukey = pairwise_tukeyhsd(endog=y, groups=groups, alpha=alpha)
    pairs = list(combinations(tukey.groupsunique, 2))
    table = pd.DataFrame({
        "group1": [str(g1) for g1, _ in pairs],
        "group2": [str(g2) for _, g2 in pairs],
        "meandiff": tukey.meandiffs,
        "lower": tukey.confint[:, 0],
        "upper": tukey.confint[:, 1],
        "p_adj": tukey.pvalues,
        "reject": tukey.reject,
    })
    return table.sort_values(["group1", "group2"]).reset_index(drop=True)


def fit_anova(dataset, response_column, group_column, alpha=0.05):
    """
    One-way ANOVA of `response_column` across `group_column`, with Tukey HSD.

    Args:
        dataset: DataFrame or mapping of column name -> sequence
        response_column: Numeric response
        group_column: Categorical grouping column
        alpha: Family-wise error rate for the Tukey intervals

    Returns:
        FittedModel with `anova_table` (between/within rows) and `pairwise`
        (one row per unordered group pair, ordered by label)
    """
    frame = _as_frame(dataset, [response_column, group_column])
    y = pd.to_numeric(frame[response_column], errors="coerce").astype(float)
    if y.isna().any():
        raise DataShapeError(f"Response '{response_column}' has non-numeric or missing values")

    groups = _as_categorical(frame[group_column]).cat.remove_unused_categories()
    if len(groups.cat.categories) < 2:
        raise ModelFitError(f"'{group_column}' needs at least 2 groups, found {len(groups.cat.categories)}")
    if len(y) <= len(groups.cat.categories):
        raise ModelFitError(f"{len(y)} observations for {len(groups.cat.categories)} groups")

    group_means = y.groupby(groups.to_numpy()).transform("mean")
    if ((y - group_means) ** 2).sum() == 0:
        raise ModelFitError(f"'{response_column}' has zero variance within every group")

    model_frame = pd.DataFrame({"y": y.to_numpy(), "group": groups.to_numpy()})
    model_frame["group"] = pd.Categorical(model_frame["group"], categories=groups.cat.categories)
    results = smf.ols("y ~ C(group)", data=model_frame).fit()

    raw = sm.stats.anova_lm(results, typ=1)

    anova_table = pd.DataFrame({
        "source": ["between", "within"],
        "df": raw["df"].to_numpy(),
        "sum_sq": raw["sum_sq"].to_numpy(),
        "mean_sq": raw["mean_sq"].to_numpy(),
        "F": raw["F"].to_numpy(),
        "p_value": raw["PR(>F)"].to_numpy(),
    })

    coefficients = _coefficient_table(results)
    coefficients["term"] = coefficients["term"].str.replace("C(group)", group_column, regex=False)

    pairwise = _tukey_table(y.to_numpy(), groups.astype(str).to_numpy(), alpha)

    return FittedModel(
        kind="anova",
        response=response_column,
        predictors=(group_column,),
        nobs=int(results.nobs),
        coefficients=coefficients,
        rsquared=float(results.rsquared),
        rsquared_adj=float(results.rsquared_adj),
        fvalue=float(anova_table.loc[0, "F"]),
        f_pvalue=float(anova_table.loc[0, "p_value"]),
        anova_table=anova_table,
        pairwise=pairwise,
        results=results,
    )
