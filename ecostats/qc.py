"""
Quality Control (QC) module: Assertions on the synthesized datasets.
"""

import numpy as np
import pandas as pd


def check_row_count(df, expected):
    """Assert the dataset has the expected number of rows."""
    assert len(df) == expected, f"Expected {expected} rows, found {len(df)}"
    return f"✓ Row count is {expected}"


def check_bounds(df, col, lower, upper):
    """Assert every value of `col` lies in [lower, upper]."""
    out = ((df[col] < lower) | (df[col] > upper)).sum()
    assert out == 0, f"{out} values of {col} outside [{lower}, {upper}]"
    return f"✓ {col} in [{lower}, {upper}] (min={df[col].min():.2f}, max={df[col].max():.2f})"


def check_linear_relationship(df, x_col, y_col, slope, intercept):
    """Assert y == x * slope + intercept exactly, row by row."""
    expected = df[x_col] * slope + intercept
    mismatched = (df[y_col] != expected).sum()
    assert mismatched == 0, f"{mismatched} rows where {y_col} != {x_col} * {slope:.4f} + {intercept}"
    return f"✓ {y_col} = {x_col} * {slope:.4f} + {intercept} for all {len(df)} rows"


def check_noise_bound(df, noisy_col, base_col, lower, upper):
    """Assert noisy - base lies in [lower, upper]."""
    diff = df[noisy_col] - df[base_col]
    out = ((diff < lower) | (diff > upper)).sum()
    assert out == 0, f"{out} rows where {noisy_col} - {base_col} is outside [{lower}, {upper}]"
    return f"✓ {noisy_col} - {base_col} in [{lower}, {upper}]"


def check_cyclic_labels(df, col, labels):
    """Assert row i carries labels[i mod k]."""
    labels = list(labels)
    expected = [labels[i % len(labels)] for i in range(len(df))]
    mismatched = int((np.asarray(df[col].astype(str)) != np.asarray(expected)).sum())
    assert mismatched == 0, f"{mismatched} rows of {col} break the cyclic order {labels}"
    return f"✓ {col} cycles through {labels}"


def check_integer_counts(df, cols):
    """Assert count columns are integer typed and non-negative."""
    for col in cols:
        assert pd.api.types.is_integer_dtype(df[col]), f"{col} is not integer typed"
        assert (df[col] >= 0).all(), f"Negative counts in {col}"
    return f"✓ Integer, non-negative counts: {list(cols)}"


def print_qc_report(checks):
    """
    Print formatted QC report.

    Args:
        checks: List of (name, check_func, kwargs) tuples

    Returns:
        True if every check passed
    """
    print("\n" + "=" * 80)
    print("QUALITY CONTROL REPORT")
    print("=" * 80)

    passed = True
    for name, check_func, kwargs in checks:
        try:
            result = check_func(**kwargs)
            print(f"\n{name}")
            print(f"  {result}")
        except AssertionError as e:
            passed = False
            print(f"\n❌ {name}")
            print(f"  ERROR: {e}")

    print("\n" + "=" * 80)
    return passed
