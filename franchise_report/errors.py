"""
errors.py — Export failure types.

An export fails in one of two places: getting the metrics, or rendering the
document. Everything else (formatting, saving) works on validated data.
"""


class ReportError(Exception):
    """Base class for every failure surfaced by an export run."""


class MetricsFetchError(ReportError):
    """The metrics snapshot could not be obtained from its source."""


class MetricsValidationError(MetricsFetchError):
    """The metrics source answered, but the payload is not a valid snapshot."""


class ReportRenderError(ReportError):
    """A renderer raised while building the PDF, workbook or dashboard."""

    def __init__(self, fmt: str, message: str):
        super().__init__(f"{fmt}: {message}")
        self.fmt = fmt
