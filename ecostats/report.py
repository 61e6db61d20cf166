"""
Report module: console output for fitted models.
"""

import numpy as np
import pandas as pd


def print_section(title):
    print("\n" + "=" * 80)
    print(title)
    print("=" * 80)


def print_ols(model, label):
    """Print the statsmodels summary and a compact coefficient table."""
    print(f"\n[{label}] {model.response} ~ {' + '.join(model.predictors)}")
    print("\n" + model.summary())
    print(f"\nR²: {model.rsquared:.4f}  Adj R²: {model.rsquared_adj:.4f}  "
          f"F: {model.fvalue:.3f} (p={model.f_pvalue:.4g})")


def print_anova(model):
    """Print the one-way ANOVA table followed by the Tukey HSD comparisons."""
    print(f"\n[ANOVA] {model.response} ~ {model.predictors[0]}")
    print(model.anova_table.to_string(index=False, float_format=lambda v: f"{v:.4f}"))

    print(f"\n[Tukey HSD] pairwise differences ({len(model.pairwise)} pairs)")
    print(model.pairwise.to_string(index=False, float_format=lambda v: f"{v:.4f}"))


def model_comparison(models):
    """
    Side-by-side fit statistics for several OLS models.

    Args:
        models: dict of label -> FittedModel

    Returns:
        DataFrame with one column per model
    """
    metrics = ['N', 'R-squared', 'Adj. R-squared', 'AIC', 'BIC', 'Residual Std Err']
    data = {'Metric': metrics}
    for label, model in models.items():
        res = model.results
        data[label] = [
            model.nobs,
            f"{model.rsquared:.4f}",
            f"{model.rsquared_adj:.4f}",
            f"{res.aic:.2f}",
            f"{res.bic:.2f}",
            f"{np.sqrt(res.mse_resid):.4f}",
        ]
    return pd.DataFrame(data)


def run_summary(seed, elevation, models, anova, figures):
    """Collect headline numbers of a run into a JSON-friendly dict."""
    return {
        "seed": seed,
        "first_elevation": float(elevation["elevation"].iloc[0]),
        "models": {
            label: {
                "params": {k: float(v) for k, v in model.params.items()},
                "rsquared": model.rsquared,
                "f_pvalue": model.f_pvalue,
            }
            for label, model in models.items()
        },
        "anova": {
            "F": anova.fvalue,
            "p_value": anova.f_pvalue,
            "pairs": anova.pairwise.to_dict(orient="records"),
        },
        "figures": [str(p) for p in figures],
    }
