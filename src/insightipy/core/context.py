"""Context initializers applied to every tracked telemetry record."""

import platform
from functools import cached_property

from insightipy.core.models import TelemetryContext


class ApplicationVersionContextInitializer:
    """Stamps the application version onto records that do not carry one.

    A ``version`` property on the log event takes precedence, since it is
    copied into the context during conversion.
    """

    def __init__(self, application_version: str) -> None:
        if application_version is None:
            raise TypeError("application_version must not be None")
        self._application_version = application_version

    def initialize(self, context: TelemetryContext) -> None:
        if context is None:
            return
        if not (context.component_version or "").strip():
            context.component_version = self._application_version


class OsVersionContextInitializer:
    """Stamps the host operating system onto every record.

    Args:
        os_version: Explicit OS description. Defaults to platform.platform(),
            computed on first use.
    """

    def __init__(self, os_version: str | None = None) -> None:
        self._explicit = os_version

    @cached_property
    def os_version(self) -> str:
        if self._explicit and self._explicit.strip():
            return self._explicit
        return platform.platform()

    def initialize(self, context: TelemetryContext) -> None:
        if context is None:
            return
        context.device_os_version = self.os_version
