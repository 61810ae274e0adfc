"""Tests for running the route patch pipeline."""

from collections.abc import Callable
from pathlib import Path
import random

import pytest
import yaml

from route_patch import orchestrator
from route_patch.config import BaseEntryConfig, GeneratorConfig, TargetConfig
from route_patch.exceptions import (
    ConfigException,
    DuplicateIdentifierError,
    IdentifierMismatchError,
    PathCollisionError,
    StorageException,
)

WriteRoute = Callable[..., Path]


def make_config(  # type: ignore[no-untyped-def]
    source_dir: Path, output_path: Path | None, **kwargs
) -> GeneratorConfig:
    return GeneratorConfig(
        source_dir=source_dir,
        output_path=output_path,
        namespace="app",
        target=TargetConfig(name="main-application"),
        **kwargs,
    )


def routes(output_path: Path) -> list[tuple[str, str]]:
    """Return the (prefix, reference) pairs written to the output file."""
    doc = yaml.safe_load(output_path.read_text())
    ops = yaml.safe_load(doc["patches"][0]["patch"])
    return [
        (item["conditions"][0]["prefix"], f"{item['namespace']}/{item['name']}")
        for item in ops[0]["value"]
    ]


async def test_generate(source_dir: Path, tmp_path: Path) -> None:
    """Test generating the patch for the example routes."""
    output = tmp_path / "kustomization.yaml"
    result = await orchestrator.generate(
        make_config(
            source_dir,
            output,
            base_entries=[BaseEntryConfig(prefix="/", name="frontend")],
            strict=True,
        )
    )
    assert result.source_count == 3
    assert result.base_count == 1
    assert result.entry_count == 4
    assert result.summary == (
        f"Discovered 3 route sources, wrote 4 entries (1 base) to {output}"
    )
    assert output.read_text() == result.content
    assert routes(output) == [
        ("/", "app/frontend"),
        ("/login", "app/login-route"),
        ("/logout", "app/logout-route"),
        ("/profile", "app/profile-route"),
    ]

    doc = yaml.safe_load(output.read_text())
    assert doc["patches"][0]["target"] == {
        "group": "projectcontour.io",
        "version": "v1",
        "kind": "HTTPProxy",
        "name": "main-application",
        "namespace": "app",
    }


async def test_idempotent(source_dir: Path, tmp_path: Path) -> None:
    """Test running twice produces byte identical output."""
    output = tmp_path / "kustomization.yaml"
    config = make_config(source_dir, output)
    await orchestrator.generate(config)
    first = output.read_bytes()
    await orchestrator.generate(config)
    assert output.read_bytes() == first


async def test_removed_source(source_dir: Path, tmp_path: Path) -> None:
    """Test a removed file disappears and other entries are unchanged."""
    output = tmp_path / "kustomization.yaml"
    config = make_config(source_dir, output)
    await orchestrator.generate(config)
    before = routes(output)
    before_lines = output.read_text().splitlines()
    assert before_lines[-1].strip() == "- prefix: /profile"

    (source_dir / "profile-route.yaml").unlink()
    await orchestrator.generate(config)

    after = routes(output)
    assert after == [route for route in before if route[0] != "/profile"]
    assert "profile" not in output.read_text()
    assert output.read_text().splitlines() == before_lines[:-4]


async def test_creation_order(tmp_path: Path, write_route: WriteRoute) -> None:
    """Test the order files are created in does not change the output."""
    names = [f"svc{i:02d}" for i in range(20)]
    outputs = []
    for attempt in range(3):
        source_dir = tmp_path / f"routes{attempt}"
        source_dir.mkdir()
        shuffled = list(names)
        random.Random(attempt).shuffle(shuffled)
        for name in shuffled:
            write_route(source_dir, f"{name}-route.yaml")
        output = tmp_path / f"out{attempt}.yaml"
        await orchestrator.generate(make_config(source_dir, output))
        outputs.append(output.read_bytes())
    assert outputs[0] == outputs[1] == outputs[2]


async def test_empty_directory(tmp_path: Path) -> None:
    """Test an empty directory yields only the base entries."""
    source_dir = tmp_path / "routes"
    source_dir.mkdir()
    output = tmp_path / "kustomization.yaml"

    await orchestrator.generate(make_config(source_dir, output))
    assert routes(output) == []

    await orchestrator.generate(
        make_config(
            source_dir,
            output,
            base_entries=[BaseEntryConfig(prefix="/", name="frontend")],
        )
    )
    assert routes(output) == [("/", "app/frontend")]


async def test_reference_without_suffix(
    tmp_path: Path, write_route: WriteRoute
) -> None:
    """Test referencing satellites by the bare identifier."""
    source_dir = tmp_path / "routes"
    source_dir.mkdir()
    write_route(source_dir, "login-route.yaml", "login")
    output = tmp_path / "kustomization.yaml"

    await orchestrator.generate(
        make_config(source_dir, output, reference_includes_suffix=False, strict=True)
    )
    assert routes(output) == [("/login", "app/login")]


@pytest.mark.parametrize(
    ("setup", "kwargs", "exc"),
    [
        (
            lambda d, w: [w(d, "login-route.yaml"), w(d, "login-route.yml")],
            {},
            DuplicateIdentifierError,
        ),
        (
            lambda d, w: [w(d, "login-route.yaml", "signin-route")],
            {"strict": True},
            IdentifierMismatchError,
        ),
    ],
)
async def test_failure_leaves_output(
    tmp_path: Path,
    write_route: WriteRoute,
    setup: Callable[[Path, WriteRoute], None],
    kwargs: dict,  # type: ignore[type-arg]
    exc: type[Exception],
) -> None:
    """Test a failed run does not touch the existing output file."""
    source_dir = tmp_path / "routes"
    source_dir.mkdir()
    setup(source_dir, write_route)
    output = tmp_path / "kustomization.yaml"
    output.write_text("previous\n")

    with pytest.raises(exc):
        await orchestrator.generate(make_config(source_dir, output, **kwargs))
    assert output.read_text() == "previous\n"
    assert sorted(p.name for p in tmp_path.iterdir()) == [
        "kustomization.yaml",
        "routes",
    ]


async def test_base_collision(tmp_path: Path, write_route: WriteRoute) -> None:
    """Test a derived entry colliding with a base entry is rejected."""
    source_dir = tmp_path / "routes"
    source_dir.mkdir()
    write_route(source_dir, "home-route.yaml")
    output = tmp_path / "kustomization.yaml"

    with pytest.raises(PathCollisionError) as exc_info:
        await orchestrator.generate(
            make_config(
                source_dir,
                output,
                base_entries=[BaseEntryConfig(prefix="/home", name="frontend")],
            )
        )
    assert exc_info.value.first == "base entry /home=app/frontend"
    assert exc_info.value.second == str(source_dir / "home-route.yaml")
    assert not output.exists()


async def test_missing_source_dir(tmp_path: Path) -> None:
    """Test a missing source directory is a storage error."""
    with pytest.raises(StorageException):
        await orchestrator.generate(
            make_config(tmp_path / "missing", tmp_path / "out.yaml")
        )


async def test_invalid_config(tmp_path: Path) -> None:
    """Test the configuration is validated before scanning."""
    with pytest.raises(ConfigException):
        await orchestrator.generate(GeneratorConfig(source_dir=tmp_path))


async def test_build_document_without_output(source_dir: Path) -> None:
    """Test building the document does not require an output path."""
    result = await orchestrator.build_document(
        make_config(source_dir, None), require_output=False
    )
    assert [entry.path_prefix for entry in result.document.entries] == [
        "/login",
        "/logout",
        "/profile",
    ]
    assert result.output_path is None


async def test_duplicate_base_entries(source_dir: Path, tmp_path: Path) -> None:
    """Test two base entries with one prefix name both references."""
    with pytest.raises(PathCollisionError) as exc_info:
        await orchestrator.generate(
            make_config(
                source_dir,
                tmp_path / "kustomization.yaml",
                base_entries=[
                    BaseEntryConfig(prefix="/", name="frontend"),
                    BaseEntryConfig(prefix="/", name="web", namespace="legacy"),
                ],
            )
        )
    assert exc_info.value.first == "base entry /=app/frontend"
    assert exc_info.value.second == "base entry /=legacy/web"
    assert "legacy/web" in str(exc_info.value)


async def test_unknown_path_template_field(
    source_dir: Path, tmp_path: Path
) -> None:
    """Test a template field other than the identifier is a config error."""
    output = tmp_path / "kustomization.yaml"
    with pytest.raises(ConfigException, match="version"):
        await orchestrator.generate(
            make_config(source_dir, output, path_template="/{identifier}/{version}")
        )
    assert not output.exists()


async def test_missing_name_warning(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """Test a manifest declaring no name is generated with a warning."""
    source_dir = tmp_path / "routes"
    source_dir.mkdir()
    (source_dir / "login-route.yaml").write_text("kind: HTTPProxy\n")
    output = tmp_path / "kustomization.yaml"

    await orchestrator.generate(make_config(source_dir, output))
    assert routes(output) == [("/login", "app/login-route")]
    assert "declares no metadata.name" in caplog.text
