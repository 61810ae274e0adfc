"""Route-patch generate action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import logging
from typing import cast

from route_patch import orchestrator

from . import selector

_LOGGER = logging.getLogger(__name__)


class GenerateAction:
    """Route-patch generate action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "generate",
                help="Generate the route list patch from a directory of route manifests",
                description="""Scans the source directory for route manifests and
                    writes a kustomize Component that replaces the route list of
                    the primary resource. The output file is replaced atomically
                    and is left untouched if any step fails.""",
            ),
        )
        selector.add_config_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        config = await selector.build_config(**kwargs)
        result = await orchestrator.generate(config)
        print(result.summary)
