"""TOML config loading for mendparse.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILENAME = "mendparse.toml"


@dataclass(frozen=True)
class RepairConfig:
    repair: bool = True
    max_edits: int | None = None
    replace_cost: int = 1


DEFAULT_CONFIG = RepairConfig()


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find mendparse.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(
                f"No {CONFIG_FILENAME} found in any parent directory"
            )
        path = parent


def load_config(path: Path) -> RepairConfig:
    """Parse the [repair] table of a mendparse.toml file into a RepairConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    if "repair" not in data:
        return DEFAULT_CONFIG

    rep = data["repair"]
    max_edits = rep.get("max_edits")
    if max_edits is not None and max_edits < 0:
        raise ValueError(f"repair.max_edits must be >= 0, got {max_edits}")
    replace_cost = rep.get("replace_cost", 1)
    if replace_cost < 1:
        raise ValueError(f"repair.replace_cost must be >= 1, got {replace_cost}")

    return RepairConfig(
        repair=rep.get("enabled", True),
        max_edits=max_edits,
        replace_cost=replace_cost,
    )
