"""
Synthetic Ecology Statistics Pipeline
Package for synthesizing toy ecology datasets, fitting OLS/ANOVA models and exporting figures.
"""

__version__ = "1.0.0"

# Lazy imports to keep matplotlib/statsmodels out of `import ecostats`
# Import submodules as needed in code

__all__ = [
    "config",
    "errors",
    "categories",
    "sampling",
    "synthesis",
    "modeling",
    "plotting",
    "io",
    "qc",
    "report",
    "pipeline",
]
