"""Shared fixtures for route-patch tests."""

from collections.abc import Callable
from pathlib import Path
import shutil

import pytest

TESTDATA_DIR = Path("tests/testdata")

ROUTE_TEMPLATE = """---
apiVersion: projectcontour.io/v1
kind: HTTPProxy
metadata:
  name: {name}
  namespace: app
spec:
  routes:
  - services:
    - name: {name}
      port: 80
"""


@pytest.fixture(name="source_dir")
def source_dir_fixture(tmp_path: Path) -> Path:
    """Directory holding the example route manifests."""
    path = tmp_path / "routes"
    shutil.copytree(TESTDATA_DIR / "routes", path)
    return path


@pytest.fixture(name="write_route")
def write_route_fixture() -> Callable[[Path, str, str | None], Path]:
    """Write a route manifest declaring the given name."""

    def _write(directory: Path, filename: str, name: str | None = None) -> Path:
        path = directory / filename
        path.write_text(ROUTE_TEMPLATE.format(name=name or path.stem))
        return path

    return _write
