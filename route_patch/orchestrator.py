"""Runs the route patch pipeline from a configuration.

The stages run one after another: scan the source directory, derive a route
entry per source, assemble the patch document, then render and write it. Any
failure stops the run before the output file is touched.

```python
from route_patch import config, orchestrator

result = await orchestrator.generate(
    config.GeneratorConfig(
        source_dir=Path("apps/routes"),
        output_path=Path("apps/routes-patch/kustomization.yaml"),
        namespace="app",
        target=config.TargetConfig(name="main-application"),
    )
)
print(result.summary)
```
"""

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import cast

from . import assembler, deriver, scanner, serializer
from .config import GeneratorConfig
from .manifest import PatchDocument

__all__ = [
    "GenerateResult",
    "build_document",
    "generate",
]

_LOGGER = logging.getLogger(__name__)


@dataclass
class GenerateResult:
    """Outcome of a generator run."""

    document: PatchDocument
    """The assembled patch document."""

    content: str
    """The rendered output text."""

    output_path: Path | None
    """Where the output is written."""

    source_count: int
    """Number of route sources discovered."""

    base_count: int
    """Number of configured base entries."""

    @property
    def entry_count(self) -> int:
        return len(self.document.entries)

    @property
    def summary(self) -> str:
        return (
            f"Discovered {self.source_count} route sources, "
            f"wrote {self.entry_count} entries "
            f"({self.base_count} base) to {self.output_path}"
        )


async def build_document(
    config: GeneratorConfig, require_output: bool = True
) -> GenerateResult:
    """Run the pipeline up to rendering without writing any output."""
    config.validate(require_output=require_output)
    source_dir = cast(Path, config.source_dir)

    rule = deriver.DerivationRule.from_config(config)
    pattern = scanner.SourcePattern(config.suffix, config.extensions)
    sources = await scanner.scan(source_dir, pattern, read_names=rule.check_names)
    _LOGGER.info(
        "Found %d route sources matching %s in %s",
        len(sources),
        pattern,
        source_dir,
    )
    entries = deriver.derive_entries(sources, rule)
    base_entries = config.base_route_entries()
    document = assembler.assemble(
        config.target_selector(),
        entries,
        base_entries=base_entries,
        list_field=config.list_field,
    )
    return GenerateResult(
        document=document,
        content=serializer.render(document),
        output_path=config.output_path,
        source_count=len(sources),
        base_count=len(base_entries),
    )


async def generate(config: GeneratorConfig) -> GenerateResult:
    """Run the pipeline and atomically write the output file."""
    result = await build_document(config)
    await serializer.write_patch(cast(Path, result.output_path), result.content)
    _LOGGER.info(result.summary)
    return result
