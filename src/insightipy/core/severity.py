"""Log level to backend severity mapping."""

from insightipy.core.models import LogEventLevel, SeverityLevel

_SEVERITY_BY_LEVEL: dict[LogEventLevel, SeverityLevel] = {
    LogEventLevel.VERBOSE: SeverityLevel.VERBOSE,
    LogEventLevel.DEBUG: SeverityLevel.VERBOSE,
    LogEventLevel.INFORMATION: SeverityLevel.INFORMATION,
    LogEventLevel.WARNING: SeverityLevel.WARNING,
    LogEventLevel.ERROR: SeverityLevel.ERROR,
    LogEventLevel.FATAL: SeverityLevel.CRITICAL,
}


def to_severity_level(level: LogEventLevel) -> SeverityLevel | None:
    """Map a log event level to the backend severity.

    Verbose and Debug both map to Verbose; Fatal maps to Critical.

    Args:
        level: The log event level.

    Returns:
        The backend severity, or None for a value outside LogEventLevel.
    """
    return _SEVERITY_BY_LEVEL.get(level)
