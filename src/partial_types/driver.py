"""File selection, generation and output routing for multiple source files."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO

from partial_types.config import GeneratorOptions
from partial_types.emitter import GeneratedUnit
from partial_types.errors import GenerationError
from partial_types.generator import Generator
from partial_types.log import get_logger
from partial_types.parsing import GoParser

logger = get_logger(__name__)

GO_SUFFIX = ".go"


def find_sources(directory: Path | str, patterns: list[str]) -> list[Path]:
    """Return the files below *directory* matching any glob pattern.

    Patterns are relative to *directory* and may use ``**``. The result is
    deduplicated and sorted.
    """
    base = Path(directory)
    found: set[Path] = set()
    for pattern in patterns:
        for path in base.glob(pattern):
            if path.is_file():
                found.add(path)
    return sorted(found)


def generate_source(
    source: str,
    options: GeneratorOptions,
    path: str | None = None,
    parser: GoParser | None = None,
) -> GeneratedUnit:
    """Parse Go source text and generate its partial types."""
    parser = parser or GoParser()
    unit = parser.parse(source, path=path)
    return Generator(options).generate(unit)


def generate_file(
    path: Path, options: GeneratorOptions, parser: GoParser | None = None
) -> GeneratedUnit:
    """Read, parse and generate one Go source file."""
    with open(path, encoding="utf-8") as f:
        source = f.read()
    return generate_source(source, options, path=str(path), parser=parser)


def is_file_output(out: Path | str) -> bool:
    return str(out).endswith(GO_SUFFIX)


def output_path(source: Path, out: Path | str) -> Path:
    """Return where the unit generated from *source* is written.

    An *out* ending in ``.go`` is the output file itself; otherwise it is a
    directory receiving a file named like the source.
    """
    if is_file_output(out):
        return Path(out)
    return Path(out) / source.name


def write_unit(unit: GeneratedUnit, source: Path, out: Path | str) -> Path:
    """Write *unit* to its output path, creating directories as needed."""
    target = output_path(source, out)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(unit.render(), encoding="utf-8")
    logger.info("Wrote %s", target)
    return target


@dataclass
class RunResult:
    """Outcome of generating several files."""

    written: list[Path] = field(default_factory=list)
    failures: list[tuple[Path, Exception]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def run(
    sources: list[Path],
    options: GeneratorOptions,
    out: Path | str | None = None,
    dry_run: bool = False,
    keep_going: bool = False,
    as_json: bool = False,
    stdout: IO[str] | None = None,
) -> RunResult:
    """Generate every source file in order.

    With *dry_run* the generated code is printed instead of written. By
    default the run stops at the first file that fails; with *keep_going*
    the remaining files are still generated and every failure is recorded.

    Raises:
        ValueError: If several sources would be written into one ``.go`` file.
    """
    stdout = stdout or sys.stdout
    if not dry_run:
        if out is None:
            raise ValueError("No output file or directory given")
        if is_file_output(out) and len(sources) > 1:
            raise ValueError(
                f"Cannot write {len(sources)} source files into the single file {out}"
            )

    result = RunResult()
    parser = GoParser()
    printed: list[dict] = []

    for i, source in enumerate(sources):
        try:
            unit = generate_file(source, options, parser=parser)
            if dry_run:
                if as_json:
                    printed.append(unit.to_dict())
                else:
                    print(f"// Source: {source}", file=stdout)
                    print(unit.render(), file=stdout)
                    if i != len(sources) - 1:
                        print("---", file=stdout)
            else:
                result.written.append(write_unit(unit, source, out))
        except (GenerationError, OSError) as exc:
            logger.error("Could not generate %s: %s", source, exc)
            result.failures.append((source, exc))
            if not keep_going:
                break

    if as_json and dry_run:
        print(json.dumps(printed, indent=2), file=stdout)
    return result
