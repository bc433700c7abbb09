"""Domain errors and failure typing."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class TransportError(PipelineError):
    """Raised when the endpoint could not be reached or the transfer timed out."""

    error_code = "TRANSPORT_ERROR"


class RemoteError(PipelineError):
    """Raised when the endpoint answered with a non-success status."""

    error_code = "REMOTE_ERROR"

    def __init__(self, status: int, message: str | None = None) -> None:
        self.status = status
        super().__init__(message or f"HTTP request failed with status: {status}")


class ParseError(PipelineError):
    """Raised when a response body is not the expected JSON shape."""

    error_code = "PARSE_ERROR"


class EmptyDatasetError(PipelineError):
    """Raised when a structurally valid response carries zero elements."""

    error_code = "EMPTY_DATASET"

    def __init__(self, message: str = "Query failed, found 0 elements.", remark: str | None = None) -> None:
        self.remark = remark
        super().__init__(message)


class ClockError(PipelineError):
    """Raised when the system wall clock cannot be read."""

    error_code = "CLOCK_ERROR"


class IoError(PipelineError):
    """Raised when an output file cannot be written."""

    error_code = "IO_ERROR"
