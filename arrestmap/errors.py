"""
arrestmap/errors.py
-------------------
Error kinds raised by the encoding, splitting and prediction steps.

All of them mean the input data or configuration is wrong, not that
something transient happened, so nothing in the pipeline retries on
them: the failing script stops and the message names the offending
row or value.
"""


class PipelineError(ValueError):
    """Base class for data/configuration defects found by the pipeline."""


class MalformedTimestamp(PipelineError):
    """A date, time or day-of-week value could not be parsed."""

    def __init__(self, field: str, value, row=None):
        self.field = field
        self.value = value
        self.row   = row
        where = f" at row {row!r}" if row is not None else ""
        super().__init__(f"Malformed {field} value {value!r}{where}")


class UnknownCategory(PipelineError):
    """A category was not present when the label index was built."""

    def __init__(self, category, row=None):
        self.category = category
        self.row      = row
        where = f" at row {row!r}" if row is not None else ""
        super().__init__(
            f"Category {category!r}{where} is not in the label index. "
            "The label index is fixed once built; retrain to add categories."
        )


class InsufficientClassSamples(PipelineError):
    """A class is too rare to be represented on both sides of a split."""

    def __init__(self, label, count: int, minimum: int, side: str | None = None):
        self.label   = label
        self.count   = count
        self.minimum = minimum
        self.side    = side
        if side is None:
            message = (
                f"Class {label!r} has {count} record(s); "
                f"stratified splitting needs at least {minimum}."
            )
        else:
            message = (
                f"The {side} side would hold {count} record(s) for {minimum} "
                "classes; every class needs at least one record on each side."
            )
        super().__init__(message)


class ShapeMismatch(PipelineError):
    """A probability matrix does not have the expected shape."""

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual   = actual
        super().__init__(
            f"Probability matrix has shape {actual}, expected {expected}"
        )
