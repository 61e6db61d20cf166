"""
Closed label sets for the categorical columns.
"""
from enum import Enum

import pandas as pd


class Climate(str, Enum):
    WET = "Wet"
    MODERATE = "Moderate"
    DRY = "Dry"


class TreeSpecies(str, Enum):
    CEDAR = "Cedar"
    FIR = "Douglas-fir"
    HEMLOCK = "Hemlock"


def labels(enum_cls):
    """Labels of an enum in declaration order."""
    return [member.value for member in enum_cls]


def categorical(values, enum_cls) -> pd.Categorical:
    """Wrap `values` as an ordered categorical whose categories are the full enum."""
    return pd.Categorical(values, categories=labels(enum_cls), ordered=True)
