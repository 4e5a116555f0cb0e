"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import ClassVar


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings.

    ``_prefix`` is prepended (with an underscore) to each field name to form
    the environment variable; ``_env_names`` maps fields to fixed names.
    """

    _prefix: ClassVar[str] = ""
    _env_names: ClassVar[dict[str, str]] = {}

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


__all__ = ["Settings"]
