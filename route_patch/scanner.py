"""Library for discovering satellite route manifests in a directory.

Only files directly inside the source directory whose name ends with the
configured suffix and extension are selected, e.g. `login-route.yaml` yields
the identifier `login`. Everything else in the directory is ignored since it
may be unrelated content.

```python
from route_patch import scanner

sources = await scanner.scan(Path("apps/routes"))
for source in sorted(sources):
    print(source.identifier, source.source_path)
```
"""

from collections.abc import Iterable
import logging
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os
from aiofiles.ospath import isdir, isfile
import yaml

from .config import DEFAULT_EXTENSIONS, DEFAULT_SUFFIX
from .exceptions import (
    DuplicateIdentifierError,
    EmptyIdentifierError,
    StorageException,
)
from .manifest import RouteSource

__all__ = [
    "SourcePattern",
    "scan",
    "read_declared_name",
]

_LOGGER = logging.getLogger(__name__)


class SourcePattern:
    """Naming convention used to select satellite manifests."""

    def __init__(
        self, suffix: str = DEFAULT_SUFFIX, extensions: Iterable[str] | None = None
    ) -> None:
        """Initialize SourcePattern."""
        self._suffix = suffix
        self._extensions = list(
            extensions if extensions is not None else DEFAULT_EXTENSIONS
        )

    def identifier(self, filename: str) -> str | None:
        """Return the identifier for a matching file name, or None if no match."""
        if filename.startswith("."):
            return None
        for extension in self._extensions:
            ending = f"{self._suffix}{extension}"
            if filename.endswith(ending):
                return filename[: len(filename) - len(ending)]
        return None

    def __str__(self) -> str:
        return ",".join(f"*{self._suffix}{ext}" for ext in self._extensions)


def _find_name(doc: Any) -> str | None:
    if not isinstance(doc, dict):
        return None
    metadata = doc.get("metadata")
    if not isinstance(metadata, dict):
        return None
    name = metadata.get("name")
    return str(name) if name else None


async def read_declared_name(path: Path) -> str | None:
    """Return the metadata.name of the first document in the file that has one.

    Returns None when the file can't be parsed or no document declares a name.
    """
    try:
        async with aiofiles.open(str(path)) as manifest_file:
            content = await manifest_file.read()
    except OSError as err:
        raise StorageException(f"Unable to read route source {path}: {err}") from err
    try:
        for doc in yaml.safe_load_all(content):
            if name := _find_name(doc):
                return name
    except yaml.YAMLError as err:
        _LOGGER.warning("Unable to parse route source %s: %s", path, err)
    return None


async def scan(
    source_dir: Path,
    pattern: SourcePattern | None = None,
    read_names: bool = True,
) -> frozenset[RouteSource]:
    """Return the route sources found directly inside the directory.

    The result is a set; callers must establish their own ordering.
    """
    if pattern is None:
        pattern = SourcePattern()
    if not await isdir(source_dir):
        raise StorageException(f"Route source directory does not exist: {source_dir}")
    try:
        filenames = await aiofiles.os.listdir(str(source_dir))
    except OSError as err:
        raise StorageException(
            f"Unable to read route source directory {source_dir}: {err}"
        ) from err

    found: dict[str, Path] = {}
    for filename in sorted(filenames):
        if (identifier := pattern.identifier(filename)) is None:
            _LOGGER.debug("Skipping %s not matching %s", filename, pattern)
            continue
        path = source_dir / filename
        if not await isfile(path):
            _LOGGER.debug("Skipping %s which is not a file", path)
            continue
        if not identifier:
            raise EmptyIdentifierError(path)
        if (existing := found.get(identifier)) is not None:
            raise DuplicateIdentifierError(identifier, existing, path)
        found[identifier] = path

    sources = []
    for identifier, path in found.items():
        declared_name = await read_declared_name(path) if read_names else None
        sources.append(
            RouteSource(
                identifier=identifier, source_path=path, declared_name=declared_name
            )
        )
    _LOGGER.debug("Found %d route sources in %s", len(sources), source_dir)
    return frozenset(sources)
