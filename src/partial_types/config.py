"""Generator options and loading them from a JSON file."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

DEFAULT_PACKAGE = "partial"
DEFAULT_STRUCT_TAG = "particle"

# JSON config keys and the option they set
_CONFIG_KEYS = {
    "package": "package_name",
    "structTag": "struct_tag",
    "typePrefix": "type_prefix",
    "pruneImports": "prune_imports",
}


@dataclass(frozen=True)
class GeneratorOptions:
    """Options controlling code generation.

    Attributes:
        package_name: Package clause of the generated file.
        struct_tag: Struct tag read for map keys; empty disables tag lookup.
        type_prefix: Prepended to every generated type name.
        prune_imports: Emit only the imports generated code refers to.
    """

    package_name: str = DEFAULT_PACKAGE
    struct_tag: str = DEFAULT_STRUCT_TAG
    type_prefix: str = ""
    prune_imports: bool = False

    def __post_init__(self) -> None:
        if not self.package_name:
            raise ValueError("Package name must not be empty")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GeneratorOptions:
        """Create options from a dict using the JSON config key names."""
        unknown = sorted(set(data) - set(_CONFIG_KEYS))
        if unknown:
            raise ValueError(f"Unknown config keys: {unknown}")
        kwargs = {_CONFIG_KEYS[key]: value for key, value in data.items()}
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {key: getattr(self, attr) for key, attr in _CONFIG_KEYS.items()}

    def merged(self, **overrides: Any) -> GeneratorOptions:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def load_options(path: Path | str) -> GeneratorOptions:
    """Load generator options from a JSON file."""
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    return GeneratorOptions.from_dict(data)
