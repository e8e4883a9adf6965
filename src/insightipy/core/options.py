"""Sink configuration, env-var driven.

All settings have safe defaults; nothing is read implicitly inside the
conversion pipeline. Build the options once at the outermost wiring layer
and hand them to ``create_sink``.

Environment variables:
    INSIGHTIPY_TELEMETRY_KIND=traces (default) | events
    INSIGHTIPY_USE_JSON_FORMATTER=true (default) | false (dotted flattening)
    INSIGHTIPY_INCLUDE_LOG_LEVEL=<unset> | true | false
    INSIGHTIPY_INCLUDE_RENDERED_MESSAGE=<unset> | true | false
    INSIGHTIPY_INCLUDE_MESSAGE_TEMPLATE=<unset> | true | false
    INSIGHTIPY_APPLICATION_VERSION=<unset>

An unset include flag keeps the selected converter's default.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace

from insightipy.core.converters import (
    EventTelemetryConverter,
    TelemetryConverterBase,
    TraceTelemetryConverter,
)
from insightipy.core.exceptions import ConfigurationError
from insightipy.core.formatters import DottedValueFormatter, JsonValueFormatter
from insightipy.core.forwarding import PropertyForwardingOptions
from insightipy.core.ports import ValueFormatterPort

_ENV_PREFIX = "INSIGHTIPY_"
_TRUE_VALUES = ("1", "true", "on", "yes")
_FALSE_VALUES = ("0", "false", "off", "no", "")

TELEMETRY_KINDS = ("traces", "events")


def _env_bool(
    env: Mapping[str, str], name: str, default: bool | None = None
) -> bool | None:
    raw = env.get(_ENV_PREFIX + name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{_ENV_PREFIX}{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class SinkOptions:
    """Options selecting the converter and formatter for a sink.

    Attributes:
        telemetry_kind: "traces" or "events".
        use_json_formatter: True for compact JSON values, False for dotted
            flattening.
        include_log_level: Forward ``LogLevel``.
        include_rendered_message: Forward ``RenderedMessage``.
        include_message_template: Forward ``MessageTemplate``.
            For the three include flags, None keeps the selected
            converter's default.
        application_version: Stamped onto records without a version.
    """

    telemetry_kind: str = "traces"
    use_json_formatter: bool = True
    include_log_level: bool | None = None
    include_rendered_message: bool | None = None
    include_message_template: bool | None = None
    application_version: str | None = None

    def __post_init__(self) -> None:
        if self.telemetry_kind not in TELEMETRY_KINDS:
            raise ConfigurationError(
                f"telemetry_kind must be one of {TELEMETRY_KINDS}, "
                f"got {self.telemetry_kind!r}"
            )

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "SinkOptions":
        """Read options from INSIGHTIPY_* environment variables.

        Args:
            env: Mapping to read instead of os.environ.
        """
        env = os.environ if env is None else env
        return cls(
            telemetry_kind=env.get(_ENV_PREFIX + "TELEMETRY_KIND", "traces")
            .strip()
            .lower(),
            use_json_formatter=_env_bool(env, "USE_JSON_FORMATTER", True),
            include_log_level=_env_bool(env, "INCLUDE_LOG_LEVEL"),
            include_rendered_message=_env_bool(env, "INCLUDE_RENDERED_MESSAGE"),
            include_message_template=_env_bool(env, "INCLUDE_MESSAGE_TEMPLATE"),
            application_version=env.get(_ENV_PREFIX + "APPLICATION_VERSION") or None,
        )

    def to_forwarding_options(
        self, base: PropertyForwardingOptions = PropertyForwardingOptions()
    ) -> PropertyForwardingOptions:
        """Apply the flags that are set on top of base."""
        overrides = {
            name: value
            for name, value in (
                ("include_log_level", self.include_log_level),
                ("include_rendered_message", self.include_rendered_message),
                ("include_message_template", self.include_message_template),
            )
            if value is not None
        }
        return replace(base, **overrides)

    def build_value_formatter(self) -> ValueFormatterPort:
        if self.use_json_formatter:
            return JsonValueFormatter()
        return DottedValueFormatter()

    def build_converter(self) -> TelemetryConverterBase:
        """Build the converter these options describe."""
        converter_cls = (
            EventTelemetryConverter
            if self.telemetry_kind == "events"
            else TraceTelemetryConverter
        )
        return converter_cls(
            value_formatter=self.build_value_formatter(),
            forwarding=self.to_forwarding_options(converter_cls.default_forwarding),
        )
