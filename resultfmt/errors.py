"""Error taxonomy for encoders and views.

Every error carries a fixed message. Errors raised by a result set are
never wrapped: they propagate to the caller unchanged.
"""

from __future__ import annotations


class Error(Exception):
    """Base class for all resultfmt errors."""

    message = "resultfmt error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class ResultSetIsNil(Error):
    message = "result set is nil"


class ResultSetHasNoColumns(Error):
    message = "result set has no columns"


class InvalidFormat(Error):
    message = "invalid format"


class InvalidLineStyle(Error):
    message = "invalid line style"


class InvalidTemplate(Error):
    message = "invalid template"


class InvalidFieldSeparator(Error):
    message = "invalid field separator"


class InvalidColumnParams(Error):
    message = "invalid column params"


class PagerError(Error):
    message = "pager exited with an error"


# --- Crosstab errors ---


class CrosstabError(Error):
    """Base class for crosstab view construction errors."""


class CrosstabResultMustHaveAtLeast3Columns(CrosstabError):
    message = "crosstab result must have at least 3 columns"


class CrosstabDataColumnMustBeSpecified(CrosstabError):
    message = "data column must be specified when query returns more than three columns"


class CrosstabVerticalAndHorizontalColumnsMustNotBeSame(CrosstabError):
    message = "crosstab vertical and horizontal columns must not be same"


class CrosstabVerticalColumnNotInResult(CrosstabError):
    message = "crosstab vertical column not in result"


class CrosstabHorizontalColumnNotInResult(CrosstabError):
    message = "crosstab horizontal column not in result"


class CrosstabDataColumnNotInResult(CrosstabError):
    message = "crosstab data column not in result"


class CrosstabHorizontalSortColumnNotInResult(CrosstabError):
    message = "crosstab horizontal sort column not in result"


class CrosstabDuplicateVerticalAndHorizontalValue(CrosstabError):
    message = "crosstab duplicate vertical and horizontal value"


class CrosstabHorizontalSortColumnIsNotANumber(CrosstabError):
    message = "crosstab horizontal sort column is not a number"
