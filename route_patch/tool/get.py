"""Route-patch get action."""

import logging
from argparse import (
    ArgumentParser,
    _SubParsersAction as SubParsersAction,
)
from typing import cast, Any

from route_patch import orchestrator

from .format import (
    PrintFormatter,
    YamlFormatter,
    JsonFormatter,
    StructFormatter,
)
from . import selector


_LOGGER = logging.getLogger(__name__)


class GetEntriesAction:
    """Get the route entries that would be generated."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "entries",
                aliases=["entry", "routes"],
                help="Get the assembled route entries",
                description="Print the route entries derived from the source directory",
            ),
        )
        selector.add_config_flags(args)
        args.add_argument(
            "--output",
            "-o",
            choices=["table", "yaml", "json"],
            default="table",
            help="Output format of the command",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        output: str,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        config = await selector.build_config(**kwargs)
        result = await orchestrator.build_document(config, require_output=False)
        entries = result.document.entries
        data: list[dict[str, Any]]
        formatter: StructFormatter
        if output in ("yaml", "json"):
            data = [entry.to_dict() for entry in entries]
            formatter = YamlFormatter() if output == "yaml" else JsonFormatter()
        else:
            data = [
                {
                    "path": entry.path_prefix,
                    "reference": entry.target_reference,
                    "source": entry.source,
                }
                for entry in entries
            ]
            if not data:
                print("no route entries found")
                return
            formatter = PrintFormatter()
        formatter.print(data)


class GetAction:
    """Route-patch get action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "get",
                help="Print information about the generated route list",
                description="Print information about the generated route list",
            ),
        )
        subcmds = args.add_subparsers(
            title="Available commands",
            required=True,
        )
        GetEntriesAction.register(subcmds)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        # No-op given subcommands are always the dispatch target
