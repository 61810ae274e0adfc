"""Library for deriving route entries from route sources.

The mapping from a file name to a route is an explicit `DerivationRule` rather
than string handling spread through the pipeline. With the default rule the
file `login-route.yaml` in namespace `app` becomes:

  path prefix:       /login
  target reference:  app/login-route

Whether the reference keeps the `-route` suffix is configurable with
`reference_includes_suffix`, and the satellite manifest is expected to declare
that same name. In strict mode any disagreement is an error.
"""

from collections.abc import Iterable
from dataclasses import dataclass
import logging

from .config import DEFAULT_PATH_TEMPLATE, DEFAULT_SUFFIX, GeneratorConfig
from .exceptions import IdentifierMismatchError
from .manifest import RouteEntry, RouteSource

__all__ = [
    "DerivationRule",
    "derive_entry",
    "derive_entries",
]

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DerivationRule:
    """Rule mapping a route source identifier to a route entry."""

    namespace: str
    """Namespace of every satellite resource."""

    suffix: str = DEFAULT_SUFFIX
    """Suffix stripped from the file name to form the identifier."""

    path_template: str = DEFAULT_PATH_TEMPLATE
    """Template for the path prefix, formatted with `identifier`."""

    reference_includes_suffix: bool = True
    """Whether the referenced resource name is `identifier + suffix`."""

    strict: bool = False
    """Raise instead of warn when the declared name differs."""

    check_names: bool = True
    """Whether the route sources carry declared names to compare against."""

    @classmethod
    def from_config(cls, config: GeneratorConfig) -> "DerivationRule":
        """Build the rule from the generator configuration."""
        return cls(
            namespace=config.namespace or "",
            suffix=config.suffix,
            path_template=config.path_template,
            reference_includes_suffix=config.reference_includes_suffix,
            strict=config.strict,
        )

    def path_prefix(self, identifier: str) -> str:
        return self.path_template.format(identifier=identifier)

    def resource_name(self, identifier: str) -> str:
        """Name the satellite manifest is expected to declare."""
        if self.reference_includes_suffix:
            return f"{identifier}{self.suffix}"
        return identifier


def derive_entry(source: RouteSource, rule: DerivationRule) -> RouteEntry:
    """Return the route entry for a single route source."""
    name = rule.resource_name(source.identifier)
    if source.declared_name != name:
        if rule.strict:
            raise IdentifierMismatchError(
                source.source_path, name, source.declared_name
            )
        if source.declared_name is not None:
            _LOGGER.warning(
                "Route source %s declares name '%s' but is referenced as '%s'",
                source.source_path,
                source.declared_name,
                name,
            )
        elif rule.check_names:
            _LOGGER.warning(
                "Route source %s declares no metadata.name, expected '%s'",
                source.source_path,
                name,
            )
    return RouteEntry(
        path_prefix=rule.path_prefix(source.identifier),
        namespace=rule.namespace,
        name=name,
        source=source.label,
    )


def derive_entries(
    sources: Iterable[RouteSource], rule: DerivationRule
) -> list[RouteEntry]:
    """Return the route entries for all route sources, ordered by identifier."""
    return [derive_entry(source, rule) for source in sorted(sources)]
