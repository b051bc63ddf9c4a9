"""Generation settings for Loom.

Settings come from three places, later ones winning:
1. Defaults below
2. LOOM_* environment variables (main() loads a .env file into the environment first)
3. Explicit overrides, e.g. command-line flags
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field


class SelectionPolicy(Enum):
    """How the next cell to collapse is chosen."""

    RANDOM = "random"            # Uniform among unassigned cells
    MIN_ENTROPY = "min-entropy"  # Fewest candidate tiles first, random among ties


class ContradictionPolicy(Enum):
    """What to do when no tile suits every assigned neighbour."""

    FALLBACK = "fallback"  # Assign a random tile from the whole tileset
    RAISE = "raise"        # Stop and raise ContradictionError


# Environment variable for each setting
ENV_VARS: dict[str, str] = {
    "width": "LOOM_WIDTH",
    "height": "LOOM_HEIGHT",
    "seed": "LOOM_SEED",
    "selection": "LOOM_SELECTION",
    "on_contradiction": "LOOM_ON_CONTRADICTION",
}


class GenerationConfig(BaseModel):
    """Parameters for one generation run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    width: int = Field(default=25, gt=0)
    height: int = Field(default=25, gt=0)
    seed: int | None = None  # None = fresh seed each run
    selection: SelectionPolicy = SelectionPolicy.RANDOM
    on_contradiction: ContradictionPolicy = ContradictionPolicy.FALLBACK

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> GenerationConfig:
        """Build a config from LOOM_* variables plus explicit overrides.

        Overrides set to None are ignored, so unset command-line flags
        fall through to the environment.

        Raises:
            pydantic.ValidationError: If a value is invalid
        """
        env = os.environ if environ is None else environ

        values: dict[str, Any] = {}
        for field_name, var in ENV_VARS.items():
            raw = env.get(var)
            if raw is not None and raw.strip():
                values[field_name] = raw.strip()

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(values)
