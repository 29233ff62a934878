from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field


ENV_PREFIX = "MATECHECK_"


class EngineConfig(BaseModel):
    """Search settings shared by the CLI, UCI adapter and HTTP API."""

    depth: int = Field(default=3, ge=1, le=8, description="Search depth in plies")
    movetime_ms: Optional[int] = Field(default=None, ge=1, description="Search time budget")
    mate_distance: bool = Field(default=False, description="Prefer shorter mates")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Build a config from ``MATECHECK_*`` environment variables.

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for name in ("depth", "movetime_ms", "mate_distance"):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None and raw != "":
                values[name] = raw
        return cls.model_validate(values)

    def merged(self, **overrides: Any) -> "EngineConfig":
        """Return a copy with the non-``None`` overrides applied and validated."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return type(self).model_validate(data)
