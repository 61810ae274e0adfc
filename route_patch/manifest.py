"""Representation of the records that flow through the route patch pipeline.

A `RouteSource` is one satellite manifest discovered on disk, a `RouteEntry` is
one item destined for the primary resource's route list, and a `PatchDocument`
is the complete replacement list plus the selector for the primary resource.
All of them are rebuilt from the source directory on every run.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig

__all__ = [
    "RouteSource",
    "RouteEntry",
    "TargetSelector",
    "PatchDocument",
]

KUSTOMIZE_COMPONENT_API_VERSION = "kustomize.config.k8s.io/v1alpha1"
KUSTOMIZE_COMPONENT_KIND = "Component"
CONTOUR_GROUP = "projectcontour.io"
CONTOUR_VERSION = "v1"
HTTP_PROXY_KIND = "HTTPProxy"
DEFAULT_LIST_FIELD = "/spec/includes"
BASE_ENTRY_SOURCE = "base entry"


class BaseManifest(DataClassDictMixin):
    """Base class for all route patch records."""

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True


@dataclass(frozen=True, order=True)
class RouteSource(BaseManifest):
    """One discovered satellite manifest file."""

    identifier: str
    """Identifier derived from the file name with the suffix removed."""

    source_path: Path = field(compare=False)
    """Location of the file, kept for diagnostics."""

    declared_name: str | None = field(default=None, compare=False)
    """The metadata.name declared inside the manifest, if it could be read."""

    @property
    def label(self) -> str:
        return str(self.source_path)


@dataclass(frozen=True, order=True)
class RouteEntry(BaseManifest):
    """One entry in the primary resource's route list."""

    path_prefix: str = field(metadata=field_options(alias="pathPrefix"))
    """The path prefix routed to the satellite resource."""

    namespace: str
    """Namespace of the satellite resource."""

    name: str
    """Name of the satellite resource."""

    source: str = field(default=BASE_ENTRY_SOURCE, compare=False)
    """Where the entry came from, used in error messages."""

    @property
    def target_reference(self) -> str:
        """Fully qualified reference to the satellite resource."""
        return f"{self.namespace}/{self.name}"

    def include(self) -> dict[str, Any]:
        """Return the entry as an item of the primary resource's list field."""
        return {
            "name": self.name,
            "namespace": self.namespace,
            "conditions": [{"prefix": self.path_prefix}],
        }


@dataclass(frozen=True)
class TargetSelector(BaseManifest):
    """Identifies the primary resource the patch is applied to."""

    kind: str
    name: str
    namespace: str
    group: str | None = None
    version: str | None = None

    def selector(self) -> dict[str, Any]:
        """Return the kustomize patch target selector."""
        result: dict[str, Any] = {}
        if self.group:
            result["group"] = self.group
        if self.version:
            result["version"] = self.version
        result["kind"] = self.kind
        result["name"] = self.name
        result["namespace"] = self.namespace
        return result

    def __str__(self) -> str:
        return f"{self.kind}/{self.namespace}/{self.name}"


@dataclass
class PatchDocument(BaseManifest):
    """The complete replacement route list for the primary resource.

    The `entries` are the whole list: applying the document replaces the list
    at `list_field` rather than merging into it.
    """

    target: TargetSelector
    """Selector for the primary resource."""

    list_field: str = field(
        default=DEFAULT_LIST_FIELD, metadata=field_options(alias="listField")
    )
    """JSON pointer of the list field that is replaced."""

    entries: list[RouteEntry] = field(default_factory=list)
    """Ordered route entries."""

    def operations(self) -> list[dict[str, Any]]:
        """Return the JSON6902 operations that replace the list field."""
        return [
            {
                "op": "replace",
                "path": self.list_field,
                "value": [entry.include() for entry in self.entries],
            }
        ]
