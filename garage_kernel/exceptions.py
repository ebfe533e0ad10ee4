"""
Typed exception hierarchy for the garage reporting kernel.

Every error carries a machine-readable ``code`` class attribute and keeps
its context as attributes rather than only in the message, so the JSON
log formatter and HTTP adapters can serialise it without parsing strings.

Hierarchy::

    GarageKernelError (base)
    |
    +-- ExportError
    |   +-- ExportAccessDeniedError
    |   +-- UnknownExportError
    |
    +-- ConfigurationError

Only the export errors are allowed to abort a report request. Everything
else the valuation engine meets (malformed dates, empty scope, stock that
outruns purchase lots, missing categories) is absorbed with a documented
fallback and never surfaces as an exception.

Codes:

Category   | Code                  | When raised
-----------|-----------------------|---------------------------------------------
Export     | EXPORT_ACCESS_DENIED  | Caller lacks the export-data permission
           | UNKNOWN_EXPORT        | Export key is not one the report offers
-----------|-----------------------|---------------------------------------------
Config     | CONFIGURATION_ERROR   | Module config values fail validation
"""


class GarageKernelError(Exception):
    """
    Base exception for all garage kernel errors.

    All subclasses must define a ``code`` class attribute.
    """

    code: str = "GARAGE_KERNEL_ERROR"


# Export-related exceptions


class ExportError(GarageKernelError):
    """Base exception for report export errors."""

    code: str = "EXPORT_ERROR"


class ExportAccessDeniedError(ExportError):
    """Caller may not export data; raised before any rows are computed."""

    code: str = "EXPORT_ACCESS_DENIED"

    def __init__(self, report: str, actor_id: str | None = None):
        self.report = report
        self.actor_id = actor_id
        super().__init__(f"Export access denied for report: {report}")


class UnknownExportError(ExportError):
    """The requested export key is not offered by the report."""

    code: str = "UNKNOWN_EXPORT"

    def __init__(self, report: str, export_key: str):
        self.report = report
        self.export_key = export_key
        super().__init__(
            f"Unknown export requested for report {report}: {export_key!r}"
        )


# Configuration exceptions


class ConfigurationError(GarageKernelError, ValueError):
    """A module configuration value is invalid."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")
