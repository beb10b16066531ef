"""Simulation artifacts and builder.

GridArtifacts bundles the config and result of one run with a deterministic
SHA256 computed over the canonical JSON dump.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING, Any

import orjson
from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from dcagrid.engine.config import GridConfig
    from dcagrid.engine.simulator import SimulationResult


class GridArtifacts(BaseModel):
    """Simulation artifacts container."""

    model_config = ConfigDict(extra="forbid")

    config: dict[str, Any] = Field(description="GridConfig as dict")
    positions: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Positions (GridPosition as dict)",
    )
    summary: dict[str, Any] = Field(description="GridSummary as dict")
    sha256: str = Field(description="SHA256 of canonical JSON dump (computed)")

    @classmethod
    def compute_sha256(cls, data: dict[str, Any]) -> str:
        """Compute SHA256 of canonical JSON dump.

        Args:
            data: Dict to hash (without sha256 field).

        Returns:
            64-character hex SHA256 digest.
        """
        canonical = orjson.dumps(data, option=orjson.OPT_SORT_KEYS)
        return hashlib.sha256(canonical).hexdigest()


def build_artifacts(config: GridConfig, result: SimulationResult) -> GridArtifacts:
    """Build artifacts with deterministic SHA256.

    Args:
        config: Configuration the result was produced from.
        result: Simulation result.

    Returns:
        GridArtifacts with all data and computed SHA256.
    """
    data = {
        "config": config.model_dump(mode="json"),
        "positions": [p.model_dump(mode="json") for p in result.positions],
        "summary": result.summary.model_dump(mode="json"),
    }
    return GridArtifacts(**data, sha256=GridArtifacts.compute_sha256(data))


def dump_artifacts_json(artifacts: GridArtifacts) -> bytes:
    """Dump artifacts to indented JSON bytes with sorted keys."""
    return orjson.dumps(
        artifacts.model_dump(mode="json"),
        option=orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2,
    )
