"""Library for assembling route entries into a patch document."""

from collections.abc import Iterable
import logging

from .exceptions import PathCollisionError
from .manifest import DEFAULT_LIST_FIELD, PatchDocument, RouteEntry, TargetSelector

__all__ = [
    "assemble",
]

_LOGGER = logging.getLogger(__name__)


def assemble(
    target: TargetSelector,
    entries: Iterable[RouteEntry],
    base_entries: Iterable[RouteEntry] = (),
    list_field: str = DEFAULT_LIST_FIELD,
) -> PatchDocument:
    """Return the patch document holding exactly the base and derived entries.

    Entries are ordered by path prefix using code point order so the output
    does not depend on the input order or the locale. Two entries with the same
    path prefix raise a PathCollisionError naming both sources.
    """
    by_prefix: dict[str, RouteEntry] = {}
    ordered_input = sorted(entries, key=lambda e: (e.path_prefix, e.source))
    for entry in [*base_entries, *ordered_input]:
        if (existing := by_prefix.get(entry.path_prefix)) is not None:
            raise PathCollisionError(entry.path_prefix, existing.source, entry.source)
        by_prefix[entry.path_prefix] = entry
    ordered = [by_prefix[prefix] for prefix in sorted(by_prefix)]
    _LOGGER.debug("Assembled %d route entries for %s", len(ordered), target)
    return PatchDocument(target=target, list_field=list_field, entries=ordered)
