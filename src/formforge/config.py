"""Form configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass
class FormConfig:
    """Behavioral switches for a FormController.

    Attributes:
        disabled: Reported to fields through is_form_disabled()
        prevent_external_invalidation: Server/injected errors annotate fields
            without forcing them invalid
        path_separator: Separator used when nesting field names into a model
    """

    disabled: bool = False
    prevent_external_invalidation: bool = False
    path_separator: str = "."

    @classmethod
    def from_env(cls) -> FormConfig:
        """Create config from environment variables.

        Reads:
        1. FORMFORGE_DISABLED
        2. FORMFORGE_PREVENT_EXTERNAL_INVALIDATION
        3. FORMFORGE_PATH_SEPARATOR (default ".")
        """
        return cls(
            disabled=_env_flag("FORMFORGE_DISABLED", False),
            prevent_external_invalidation=_env_flag(
                "FORMFORGE_PREVENT_EXTERNAL_INVALIDATION", False
            ),
            path_separator=os.environ.get("FORMFORGE_PATH_SEPARATOR") or ".",
        )
