"""
Custom exceptions for the CSV import pipeline with structured error context.

Every failure the pipeline can produce is represented here. Each exception
carries a human-readable message (shown verbatim to the operator) and an
optional ``details`` mapping for diagnosis (detected headers, a sample of the
offending record, ...).

Exception Hierarchy:
    ImportPipelineError (base)
    ├── InvalidImportRequestError
    ├── InputError
    │   ├── EmptyInputError
    │   ├── ParseError
    │   └── MissingColumnsError
    └── StagingError
        ├── StagingDeleteError
        ├── StagingInsertError
        └── TransformProcedureError
"""

from typing import Optional, Dict, Any, List
from datetime import datetime, timezone


class ImportPipelineError(Exception):
    """
    Base exception for all import pipeline errors.

    Attributes:
        message: Human-readable error message
        details: Diagnostic information returned to the caller
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.details = details or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        # Chain original exception if provided
        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with details."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            base_msg += f" | Details: {details_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Request Errors
# ============================================================================

class InvalidImportRequestError(ImportPipelineError):
    """
    Raised when the request shape is wrong (unknown kind, payload too short).

    Raised before any parsing takes place.
    """
    pass


# ============================================================================
# Input Errors
# ============================================================================

class InputError(ImportPipelineError):
    """Base exception for problems with the uploaded file itself."""
    pass


class EmptyInputError(InputError):
    """Raised when the file has fewer than two non-blank lines."""
    pass


class ParseError(InputError):
    """
    Raised when a line cannot be split into cells.

    Details should include:
        - line_number: 1-based line number (after blank lines are dropped)
        - expected, actual: cell counts, for rows that do not match the header
    """

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        details = dict(details or {})
        if line_number is not None:
            details["line_number"] = line_number
        super().__init__(message, details, original_exception)
        self.line_number = line_number


class MissingColumnsError(InputError):
    """
    Raised when required canonical columns are absent from the header.

    Details include the missing fields and the detected headers so the
    operator can see how the file was read.
    """

    def __init__(
        self,
        missing: List[str],
        headers: List[str],
        normalized_headers: List[str],
        delimiter: str
    ):
        self.missing = list(missing)
        super().__init__(
            f"Missing required columns: {', '.join(self.missing)}",
            details={
                "missing": self.missing,
                "headers": list(headers),
                "normalized_headers": list(normalized_headers),
                "delimiter": delimiter,
            }
        )


# ============================================================================
# Staging Errors
# ============================================================================

class StagingError(ImportPipelineError):
    """Base exception for failures talking to the staging store."""
    pass


class StagingDeleteError(StagingError):
    """
    Raised when clearing the staging table fails.

    The table is left in whatever state the store left it in.
    """
    pass


class StagingInsertError(StagingError):
    """
    Raised when a batch insert fails.

    Batches before the failing one remain in the staging table. Details
    include:
        - batch: 1-based number of the failing batch
        - offset: index of the failing batch's first record
        - example: the failing batch's first record
    """
    pass


class TransformProcedureError(StagingError):
    """
    Raised when the transform procedure fails after staging succeeded.

    The staging table is fully populated but production tables were not
    updated; the procedure should be re-run, the file does not need to be
    uploaded again.
    """
    pass
