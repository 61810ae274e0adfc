"""Library for common command line flags."""

from argparse import (
    ArgumentParser,
    BooleanOptionalAction,
    Action,
    ArgumentError,
    Namespace,
)
import logging
import pathlib
from typing import Any

from route_patch.config import BaseEntryConfig, GeneratorConfig, read_config

_LOGGER = logging.getLogger(__name__)


class BaseEntryAppendAction(Action):
    """Append a prefix=namespace/name pair to the argument list."""

    def __call__(
        self,
        parser: ArgumentParser,
        namespace: Namespace,
        values: Any,
        option_string: str | None = None,
    ) -> None:
        values = values.split(",")
        if not values[0]:
            return
        result = getattr(namespace, self.dest) or []
        for value in values:
            try:
                entry = BaseEntryConfig.from_str(value)
            except ValueError:
                raise ArgumentError(
                    self, f"Expected prefix=namespace/name format from '{value}'"
                )
            result.append(entry)
        setattr(namespace, self.dest, result)


def add_config_flags(args: ArgumentParser) -> None:
    """Add flags that populate the generator configuration."""
    args.add_argument(
        "--config",
        type=pathlib.Path,
        default=None,
        help="YAML file with generator configuration, overridden by flags",
    )
    args.add_argument(
        "--source-dir",
        type=pathlib.Path,
        default=None,
        help="Directory containing the satellite route manifests",
    )
    args.add_argument(
        "--output-path",
        type=pathlib.Path,
        default=None,
        help="File the generated patch is written to",
    )
    args.add_argument(
        "--namespace",
        "-n",
        type=str,
        default=None,
        help="Namespace of the satellite route resources",
    )
    args.add_argument(
        "--target-name",
        type=str,
        default=None,
        help="Name of the primary resource that owns the route list",
    )
    args.add_argument(
        "--target-kind",
        type=str,
        default=None,
        help="Kind of the primary resource (default HTTPProxy)",
    )
    args.add_argument(
        "--target-group",
        type=str,
        default=None,
        help="API group of the primary resource (default projectcontour.io)",
    )
    args.add_argument(
        "--target-version",
        type=str,
        default=None,
        help="API version of the primary resource (default v1)",
    )
    args.add_argument(
        "--target-namespace",
        type=str,
        default=None,
        help="Namespace of the primary resource, defaults to --namespace",
    )
    args.add_argument(
        "--list-field",
        type=str,
        default=None,
        help="JSON pointer of the route list replaced in the primary resource",
    )
    args.add_argument(
        "--base-entry",
        dest="base_entries",
        action=BaseEntryAppendAction,
        default=None,
        help="Route always present, as prefix=namespace/name (may be repeated)",
    )
    args.add_argument(
        "--strict",
        action=BooleanOptionalAction,
        default=None,
        help="Fail when a manifest's declared name differs from its file name",
    )
    args.add_argument(
        "--suffix",
        type=str,
        default=None,
        help="File name suffix that selects route manifests (default -route)",
    )
    args.add_argument(
        "--extension",
        dest="extensions",
        action="append",
        default=None,
        help="File extension that selects route manifests (may be repeated)",
    )
    args.add_argument(
        "--path-template",
        type=str,
        default=None,
        help="Template for derived path prefixes (default /{identifier})",
    )
    args.add_argument(
        "--reference-includes-suffix",
        action=BooleanOptionalAction,
        default=None,
        help="Reference resources by identifier plus suffix (default true)",
    )


async def build_config(  # type: ignore[no-untyped-def]
    config: pathlib.Path | None = None,
    source_dir: pathlib.Path | None = None,
    output_path: pathlib.Path | None = None,
    namespace: str | None = None,
    target_name: str | None = None,
    target_kind: str | None = None,
    target_group: str | None = None,
    target_version: str | None = None,
    target_namespace: str | None = None,
    list_field: str | None = None,
    base_entries: list[BaseEntryConfig] | None = None,
    strict: bool | None = None,
    suffix: str | None = None,
    extensions: list[str] | None = None,
    path_template: str | None = None,
    reference_includes_suffix: bool | None = None,
    **kwargs,  # pylint: disable=unused-argument
) -> GeneratorConfig:
    """Return the generator configuration from the config file and flags."""
    base = await read_config(config) if config is not None else GeneratorConfig()
    return base.update(
        source_dir=source_dir,
        output_path=output_path,
        namespace=namespace,
        target_name=target_name,
        target_kind=target_kind,
        target_group=target_group,
        target_version=target_version,
        target_namespace=target_namespace,
        list_field=list_field,
        base_entries=base_entries,
        strict=strict,
        suffix=suffix,
        extensions=extensions,
        path_template=path_template,
        reference_includes_suffix=reference_includes_suffix,
    )
