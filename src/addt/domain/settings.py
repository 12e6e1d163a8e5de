"""
Settings domain models.

Config files hold settings records whose fields may be left unset.
Each field is a SettingValue so a more specific file can tell "not
configured here" apart from an explicit false or empty string. The
merge engine folds those records into fully populated resolved configs.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, get_args

from pydantic import BaseModel, ConfigDict, Field, GetCoreSchemaHandler
from pydantic_core import core_schema

T = TypeVar("T")

DEFAULT_SERVICE_NAME = "addt"

OTEL_PROTOCOLS: tuple[str, ...] = ("http/json", "http/protobuf", "grpc")


class SettingValue(Generic[T]):
    """
    A config cell that is either absent or holds a value.

    Two present cells are equal when their values are equal; absent is
    only equal to absent.
    """

    __slots__ = ("_present", "_value")

    def __init__(self, present: bool = False, value: T | None = None) -> None:
        self._present = present
        self._value = value if present else None

    @classmethod
    def absent(cls) -> SettingValue[Any]:
        return cls()

    @classmethod
    def of(cls, value: T) -> SettingValue[T]:
        return cls(present=True, value=value)

    @property
    def is_present(self) -> bool:
        return self._present

    @property
    def value(self) -> T:
        if not self._present:
            raise ValueError("Absent setting has no value")
        return self._value  # type: ignore[return-value]

    def get(self, default: T) -> T:
        """Return the value, or the default when absent."""
        return self._value if self._present else default  # type: ignore[return-value]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SettingValue):
            return NotImplemented
        if not self._present or not other._present:
            return self._present == other._present
        return self._value == other._value

    def __hash__(self) -> int:
        return hash((self._present, self._value))

    def __repr__(self) -> str:
        if not self._present:
            return "SettingValue.absent()"
        return f"SettingValue.of({self._value!r})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        # Raw YAML values validate against the inner type; None means unset.
        args = get_args(source_type)
        inner = handler.generate_schema(args[0]) if args else core_schema.any_schema()

        return core_schema.union_schema(
            [
                core_schema.is_instance_schema(cls),
                core_schema.no_info_after_validator_function(
                    lambda _: cls.absent(), core_schema.none_schema()
                ),
                core_schema.no_info_after_validator_function(cls.of, inner),
            ],
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda v: v.get(None)
            ),
        )


def _unset() -> SettingValue[Any]:
    return SettingValue.absent()


class SettingsRecord(BaseModel):
    """Base for records whose fields are all SettingValue cells."""

    model_config = ConfigDict(frozen=True, extra="allow")

    def present_values(self) -> dict[str, Any]:
        """Field name to value for every present field."""
        values: dict[str, Any] = {}
        for name in type(self).model_fields:
            cell: SettingValue[Any] = getattr(self, name)
            if cell.is_present:
                values[name] = cell.value
        return values

    def with_value(self, name: str, value: Any) -> SettingsRecord:
        """Return a copy with one field set (validated against its type)."""
        return self.model_validate(
            {**(self.model_extra or {}), **self.present_values(), name: value}
        )

    def without_value(self, name: str) -> SettingsRecord:
        """Return a copy with one field unset."""
        return self.model_copy(update={name: SettingValue.absent()})


class OtelSettings(SettingsRecord):
    """The `otel:` section of a config file."""

    enabled: SettingValue[bool] = Field(default_factory=_unset, description="Enable OTEL")
    endpoint: SettingValue[str] = Field(default_factory=_unset, description="OTLP endpoint")
    protocol: SettingValue[str] = Field(
        default_factory=_unset, description="http/json, http/protobuf, or grpc"
    )
    service_name: SettingValue[str] = Field(
        default_factory=_unset, description="Service name for telemetry"
    )
    headers: SettingValue[str] = Field(
        default_factory=_unset, description="OTLP headers (key=value,key2=value2)"
    )


class OtelConfig(BaseModel):
    """Telemetry configuration with defaults applied."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    # host.docker.internal reaches the host from inside the container
    endpoint: str = "http://host.docker.internal:4318"
    protocol: str = "http/json"
    service_name: str = DEFAULT_SERVICE_NAME
    headers: str = ""


class FirewallSettings(SettingsRecord):
    """The `firewall` / `firewall_mode` keys of a config file."""

    enabled: SettingValue[bool] = Field(
        default_factory=_unset, description="Enable network firewall"
    )
    mode: SettingValue[str] = Field(
        default_factory=_unset, description="strict, permissive, or off"
    )


class FirewallConfig(BaseModel):
    """Firewall switches with defaults applied."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    mode: str = "strict"


class ResourceAttrs(BaseModel):
    """Runtime context attached to every telemetry payload."""

    model_config = ConfigDict(frozen=True)

    extension: str = Field(default="", description='e.g. "claude"')
    provider: str = Field(default="", description='e.g. "podman"')
    version: str = Field(default="", description="addt version")
    project: str = Field(default="", description="Project directory name")


DEFAULT_OTEL_CONFIG = OtelConfig()
DEFAULT_FIREWALL_CONFIG = FirewallConfig()
