class ReportError(Exception):
    """Base class for errors that abort a report run."""


class NotFoundError(ReportError, FileNotFoundError):
    pass


class ParseError(ReportError, ValueError):
    pass


class DegenerateColumnError(ReportError, ValueError):
    def __init__(self, column: str, value: float):
        self.column = column
        self.value = value
        super().__init__(
            f"Column '{column}' is constant (min == max == {value}); cannot min-max normalize."
        )


class DimensionMismatchError(ReportError, ValueError):
    pass


class SplitMismatchError(ReportError, ValueError):
    pass


class InsufficientClassesError(ReportError, ValueError):
    pass
