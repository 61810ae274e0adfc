"""Library for rendering and writing the patch document.

The document is rendered as a kustomize Component holding a single JSON6902
patch that replaces the route list of the primary resource:

```yaml
apiVersion: kustomize.config.k8s.io/v1alpha1
kind: Component
patches:
- target:
    kind: HTTPProxy
    name: main-application
    namespace: app
  patch: |
    - op: replace
      path: /spec/includes
      value: ...
```

The output file is replaced atomically so readers never see a partial file.
"""

import logging
import os
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os
import aiofiles.tempfile
import yaml

from .exceptions import StorageException
from .manifest import (
    KUSTOMIZE_COMPONENT_API_VERSION,
    KUSTOMIZE_COMPONENT_KIND,
    PatchDocument,
)

__all__ = [
    "component",
    "render",
    "write_patch",
    "read_existing",
]

_LOGGER = logging.getLogger(__name__)

HEADER = "# Code generated by route-patch. DO NOT EDIT.\n"
DEFAULT_FILE_MODE = 0o644

_chmod = aiofiles.os.wrap(os.chmod)


class _Dumper(yaml.SafeDumper):
    """Dumper that writes multi-line strings as literal blocks."""


def _str_presenter(dumper: yaml.SafeDumper, data: str) -> Any:
    """Represent multi-line yaml strings as you'd expect.

    See https://github.com/yaml/pyyaml/issues/240
    """
    return dumper.represent_scalar(
        "tag:yaml.org,2002:str", data, style="|" if data.count("\n") > 0 else None
    )


_Dumper.add_representer(str, _str_presenter)


def _dump(data: Any) -> str:
    return yaml.dump(data, Dumper=_Dumper, sort_keys=False, default_flow_style=False)


def component(document: PatchDocument) -> dict[str, Any]:
    """Return the kustomize Component object for the patch document."""
    return {
        "apiVersion": KUSTOMIZE_COMPONENT_API_VERSION,
        "kind": KUSTOMIZE_COMPONENT_KIND,
        "patches": [
            {
                "target": document.target.selector(),
                "patch": _dump(document.operations()),
            }
        ],
    }


def render(document: PatchDocument) -> str:
    """Render the patch document to text.

    The same document always renders to the same text.
    """
    return HEADER + _dump(component(document))


async def read_existing(output_path: Path) -> str | None:
    """Return the current contents of the output file, or None if missing."""
    try:
        async with aiofiles.open(str(output_path)) as output_file:
            return await output_file.read()
    except FileNotFoundError:
        return None
    except OSError as err:
        raise StorageException(f"Unable to read {output_path}: {err}") from err


async def _file_mode(output_path: Path) -> int:
    try:
        result = await aiofiles.os.stat(str(output_path))
    except FileNotFoundError:
        return DEFAULT_FILE_MODE
    return result.st_mode & 0o777


async def write_patch(output_path: Path, content: str) -> None:
    """Atomically replace the output file with the content.

    The content is written to a temporary file in the same directory and then
    renamed over the output path. On failure the temporary file is removed and
    any existing output file is left untouched.
    """
    tmp_name: str | None = None
    try:
        mode = await _file_mode(output_path)
        async with aiofiles.tempfile.NamedTemporaryFile(
            mode="w",
            dir=str(output_path.parent),
            prefix=f".{output_path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp_file:
            tmp_name = str(tmp_file.name)
            await tmp_file.write(content)
            await tmp_file.flush()
        await _chmod(tmp_name, mode)
        await aiofiles.os.replace(tmp_name, str(output_path))
    except OSError as err:
        if tmp_name is not None:
            try:
                await aiofiles.os.remove(tmp_name)
            except FileNotFoundError:
                pass
        raise StorageException(f"Unable to write {output_path}: {err}") from err
    _LOGGER.debug("Wrote %d bytes to %s", len(content), output_path)
