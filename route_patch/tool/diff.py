"""Route-patch diff action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import difflib
import logging
from pathlib import Path
from typing import cast, Generator

from route_patch import orchestrator, serializer
from route_patch.exceptions import StaleOutputException

from . import selector

_LOGGER = logging.getLogger(__name__)


def unified_diff(
    existing: str | None, content: str, label: str, n: int
) -> Generator[str, None, None]:
    """Generate a unified diff from the existing output to the new content."""
    yield from difflib.unified_diff(
        a=(existing or "").splitlines(),
        b=content.splitlines(),
        fromfile=f"a/{label}",
        tofile=f"b/{label}",
        n=n,
        lineterm="",
    )


class DiffAction:
    """Route-patch diff action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "diff",
                help="Diff the generated route list patch against the output file",
                description="""Renders the route list patch without writing it and
                    prints a unified diff against the current output file.""",
            ),
        )
        args.add_argument(
            "--unified",
            "-u",
            type=int,
            default=3,
            help="output NUM (default 3) lines of unified context",
        )
        args.add_argument(
            "--check",
            action="store_true",
            help="Exit with an error when the output file is out of date",
        )
        selector.add_config_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        unified: int,
        check: bool,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        config = await selector.build_config(**kwargs)
        result = await orchestrator.build_document(config)
        output_path = cast(Path, result.output_path)
        existing = await serializer.read_existing(output_path)
        if existing == result.content:
            _LOGGER.info("Output %s is up to date", output_path)
            return
        for line in unified_diff(existing, result.content, str(output_path), unified):
            print(line)
        if check:
            raise StaleOutputException(
                f"Output {output_path} is out of date, run generate"
            )
