"""
Custom error classes for Intent Signal Hub.
Structured error handling with error codes across all modules.

Hierarchy:
    HubError
    ├── APIError
    │   └── APIPausedError
    ├── DataError
    │   ├── ConfigError
    │   ├── FormatError
    │   └── RetrievalError
    └── IngestError
        ├── PartialInsertError
        └── TotalInsertError
"""


class HubError(Exception):
    """Base exception for all Intent Signal Hub errors."""

    def __init__(self, message: str, code: str = "UNKNOWN", details: dict = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(f"[{code}] {message}")

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}


# --- API Errors ---

class APIError(HubError):
    """Base class for external API errors."""

    def __init__(self, message: str, code: str = "API_ERROR",
                 status_code: int = None, url: str = None, **kwargs):
        self.status_code = status_code
        self.url = url
        details = {"status_code": status_code, "url": url, **kwargs}
        super().__init__(message, code=code, details=details)


class APIPausedError(APIError):
    """Outbound API calls are switched off by configuration."""

    def __init__(self, service: str):
        super().__init__(
            f"API calls to '{service}' are paused (PAUSE_API_CALLS=true)",
            code="API_PAUSED", service=service,
        )


# --- Data Errors ---

class DataError(HubError):
    """Base class for data processing errors."""
    pass


class ConfigError(DataError):
    """Missing or invalid configuration."""

    def __init__(self, message: str, setting: str = None):
        super().__init__(
            message, code="CONFIG_ERROR",
            details={"setting": setting},
        )


class FormatError(DataError):
    """Uploaded file is empty or its header row is incomplete."""

    def __init__(self, message: str, missing_columns: list = None):
        self.missing_columns = missing_columns or []
        super().__init__(
            message, code="FORMAT_INVALID",
            details={"missing_columns": self.missing_columns},
        )


class RetrievalError(DataError):
    """Fetching intent records from the store failed."""

    def __init__(self, message: str, source: str = None, cause: Exception = None):
        super().__init__(
            message, code="RETRIEVAL_FAILED",
            details={"source": source, "cause": str(cause) if cause else None},
        )


# --- Ingest Errors ---

class IngestError(HubError):
    """Base class for batch insert failures."""

    def __init__(self, message: str, code: str, inserted: int,
                 failed_batches: int, total_batches: int):
        self.inserted = inserted
        self.failed_batches = failed_batches
        self.total_batches = total_batches
        super().__init__(
            message, code=code,
            details={
                "inserted": inserted,
                "failed_batches": failed_batches,
                "total_batches": total_batches,
            },
        )


class PartialInsertError(IngestError):
    """Some batches failed but at least one row was saved."""

    def __init__(self, inserted: int, failed_batches: int, total_batches: int):
        super().__init__(
            f"{failed_batches} batches failed to insert, "
            f"but {inserted} rows were saved.",
            code="INSERT_PARTIAL", inserted=inserted,
            failed_batches=failed_batches, total_batches=total_batches,
        )


class TotalInsertError(IngestError):
    """Every batch failed; nothing was persisted."""

    def __init__(self, failed_batches: int, total_batches: int, cause: Exception = None):
        msg = "Failed to insert data"
        if cause:
            msg += f": {cause}"
        super().__init__(
            msg, code="INSERT_FAILED", inserted=0,
            failed_batches=failed_batches, total_batches=total_batches,
        )
