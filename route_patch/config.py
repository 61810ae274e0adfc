"""Configuration objects for route-patch.

The configuration may be read from a YAML file and then overridden by command
line flags, for example:

```yaml
sourceDir: apps/routes
outputPath: apps/routes-patch/kustomization.yaml
namespace: app
target:
  name: main-application
baseEntries:
- prefix: /
  name: frontend
strict: true
```
"""

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any

import aiofiles
from mashumaro import DataClassDictMixin, field_options
from mashumaro.codecs.yaml import yaml_decode
from mashumaro.config import BaseConfig
from mashumaro.exceptions import MissingField, InvalidFieldValue
import yaml

from .exceptions import ConfigException
from .manifest import (
    CONTOUR_GROUP,
    CONTOUR_VERSION,
    DEFAULT_LIST_FIELD,
    HTTP_PROXY_KIND,
    RouteEntry,
    TargetSelector,
)

__all__ = [
    "BaseEntryConfig",
    "TargetConfig",
    "GeneratorConfig",
    "read_config",
]

_LOGGER = logging.getLogger(__name__)

DEFAULT_SUFFIX = "-route"
DEFAULT_EXTENSIONS = [".yaml", ".yml"]
DEFAULT_PATH_TEMPLATE = "/{identifier}"
IDENTIFIER_PLACEHOLDER = "{identifier}"


class _Config(BaseConfig):
    omit_none = True
    serialize_by_alias = True


def _decode_bool(value: Any) -> bool:
    """Accept only YAML booleans, rejecting strings such as "false"."""
    if not isinstance(value, bool):
        raise ValueError(f"Expected true or false, got {value!r}")
    return value


@dataclass
class BaseEntryConfig(DataClassDictMixin):
    """A route that is always present regardless of the directory contents."""

    prefix: str
    name: str
    namespace: str | None = None

    @classmethod
    def from_str(cls, value: str) -> "BaseEntryConfig":
        """Parse a `prefix=namespace/name` or `prefix=name` flag value."""
        prefix, sep, ref = value.partition("=")
        if not sep or not prefix or not ref:
            raise ValueError(f"Expected prefix=namespace/name from '{value}'")
        namespace, sep, name = ref.rpartition("/")
        if not name:
            raise ValueError(f"Expected prefix=namespace/name from '{value}'")
        return cls(prefix=prefix, name=name, namespace=namespace if sep else None)

    Config = _Config


@dataclass
class TargetConfig(DataClassDictMixin):
    """Identity of the primary resource that owns the route list."""

    name: str | None = None
    kind: str = HTTP_PROXY_KIND
    group: str | None = CONTOUR_GROUP
    version: str | None = CONTOUR_VERSION
    namespace: str | None = None

    Config = _Config


@dataclass
class GeneratorConfig(DataClassDictMixin):
    """Configuration for a single run of the generator."""

    source_dir: Path | None = field(
        default=None, metadata=field_options(alias="sourceDir")
    )
    """Directory holding the satellite manifests."""

    output_path: Path | None = field(
        default=None, metadata=field_options(alias="outputPath")
    )
    """File the patch document is written to."""

    namespace: str | None = None
    """Namespace of the satellite resources."""

    target: TargetConfig = field(default_factory=TargetConfig)
    """The primary resource, defaulting to the satellite namespace."""

    list_field: str = field(
        default=DEFAULT_LIST_FIELD, metadata=field_options(alias="listField")
    )
    """JSON pointer of the list replaced in the primary resource."""

    base_entries: list[BaseEntryConfig] = field(
        default_factory=list, metadata=field_options(alias="baseEntries")
    )
    """Entries always present in the route list."""

    strict: bool = field(
        default=False, metadata=field_options(deserialize=_decode_bool)
    )
    """Fail when a manifest's declared name disagrees with its file name."""

    suffix: str = DEFAULT_SUFFIX
    """File name suffix (before the extension) that selects satellite manifests."""

    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    """File extensions that select satellite manifests."""

    path_template: str = field(
        default=DEFAULT_PATH_TEMPLATE, metadata=field_options(alias="pathTemplate")
    )
    """Template for the path prefix of a derived entry."""

    reference_includes_suffix: bool = field(
        default=True,
        metadata=field_options(
            alias="referenceIncludesSuffix", deserialize=_decode_bool
        ),
    )
    """Whether the referenced resource name keeps the file name suffix."""

    Config = _Config

    def update(self, **overrides: Any) -> "GeneratorConfig":
        """Return a copy with any non-None overrides applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        target_values = {
            k: values.pop(f"target_{k}")
            for k in ("name", "kind", "group", "version", "namespace")
            if f"target_{k}" in values
        }
        data = {**self.__dict__, **values}
        data["target"] = TargetConfig(**{**self.target.__dict__, **target_values})
        return GeneratorConfig(**data)

    def validate(self, require_output: bool = True) -> None:
        """Raise a ConfigException if the configuration can't be used."""
        if self.source_dir is None:
            raise ConfigException("Missing required source directory")
        if require_output and self.output_path is None:
            raise ConfigException("Missing required output path")
        if not self.namespace:
            raise ConfigException("Missing required namespace")
        if not self.target.name:
            raise ConfigException("Missing required target resource name")
        if not self.target.kind:
            raise ConfigException("Missing required target resource kind")
        if not self.list_field.startswith("/"):
            raise ConfigException(
                f"List field must be a JSON pointer starting with '/': {self.list_field}"
            )
        if IDENTIFIER_PLACEHOLDER not in self.path_template:
            raise ConfigException(
                f"Path template must contain {IDENTIFIER_PLACEHOLDER}: {self.path_template}"
            )
        try:
            self.path_template.format(identifier="identifier")
        except (KeyError, IndexError, ValueError, AttributeError) as err:
            raise ConfigException(
                f"Path template may only use {IDENTIFIER_PLACEHOLDER}: "
                f"{self.path_template}: {err!r}"
            ) from err
        if not self.path_template.startswith("/"):
            raise ConfigException(
                f"Path template must start with '/': {self.path_template}"
            )
        for name in ("strict", "reference_includes_suffix"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigException(
                    f"Setting {name} must be true or false: {getattr(self, name)!r}"
                )
        if not self.extensions:
            raise ConfigException("At least one file extension is required")
        for entry in self.base_entries:
            if not entry.prefix.startswith("/"):
                raise ConfigException(
                    f"Base entry prefix must start with '/': {entry.prefix}"
                )

    def target_selector(self) -> TargetSelector:
        """Return the selector for the primary resource."""
        return TargetSelector(
            kind=self.target.kind,
            name=self.target.name or "",
            namespace=self.target.namespace or self.namespace or "",
            group=self.target.group,
            version=self.target.version,
        )

    def base_route_entries(self) -> list[RouteEntry]:
        """Return the configured base entries as route entries."""
        return [
            RouteEntry(
                path_prefix=entry.prefix,
                namespace=entry.namespace or self.namespace or "",
                name=entry.name,
                source=(
                    f"base entry {entry.prefix}="
                    f"{entry.namespace or self.namespace}/{entry.name}"
                ),
            )
            for entry in self.base_entries
        ]


async def read_config(config_path: Path) -> GeneratorConfig:
    """Return the generator configuration stored in a YAML file."""
    try:
        async with aiofiles.open(str(config_path)) as config_file:
            content = await config_file.read()
    except OSError as err:
        raise ConfigException(
            f"Unable to read config file {config_path}: {err}"
        ) from err
    if not content.strip():
        _LOGGER.debug("Config file %s is empty, using defaults", config_path)
        return GeneratorConfig()
    try:
        return yaml_decode(content, GeneratorConfig)
    except (
        yaml.YAMLError,
        MissingField,
        InvalidFieldValue,
        ValueError,
        TypeError,
    ) as err:
        raise ConfigException(f"Invalid config file {config_path}: {err}") from err
