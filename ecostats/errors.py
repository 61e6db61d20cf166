"""
Errors raised by the pipeline. Every one of them aborts the run.
"""


class EcostatsError(Exception):
    """Base class for pipeline errors."""


class InvalidParameter(EcostatsError, ValueError):
    """Bad distribution bounds/moments or an invalid plot configuration."""


class DataShapeError(EcostatsError, ValueError):
    """Columns feeding a model fit are missing or have mismatched lengths."""


class ModelFitError(EcostatsError):
    """Degenerate fit: zero-variance predictor, singular design, too few groups."""


class ExportError(EcostatsError, OSError):
    """A figure or table could not be written."""

    def __init__(self, path, cause):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not write {path}: {cause}")
