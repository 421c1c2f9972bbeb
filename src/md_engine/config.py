"""Editor behaviour settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from md_engine.runtime.telemetry import ENV_PREFIX

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class EditorConfig:
    """Settings consumed by :class:`~md_engine.buffer.session.EditorSession`.

    Only behaviour lives here; fonts, themes and window geometry belong to the
    host UI.
    """

    history_limit: int = 1000
    initial_gap: int = 1024
    tab_size: int = 4
    use_spaces_for_tabs: bool = True
    auto_indent: bool = True
    word_wrap: bool = True
    show_line_numbers: bool = True

    def __post_init__(self) -> None:
        if self.history_limit < 1:
            raise ValueError("history_limit must be >= 1")
        if self.initial_gap < 0:
            raise ValueError("initial_gap must be >= 0")
        if self.tab_size < 1:
            raise ValueError("tab_size must be >= 1")

    @property
    def indent_unit(self) -> str:
        return " " * self.tab_size if self.use_spaces_for_tabs else "\t"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EditorConfig":
        """Build a config from ``MD_ENGINE_*`` variables, e.g. ``MD_ENGINE_TAB_SIZE``.

        Unset variables keep their defaults; malformed ones raise ``ValueError``.
        """

        source = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}
        for item in fields(cls):
            raw = source.get(f"{ENV_PREFIX}{item.name.upper()}")
            if raw is None:
                continue
            default = item.default
            if isinstance(default, bool):
                overrides[item.name] = _parse_flag(item.name, raw)
            else:
                try:
                    overrides[item.name] = int(raw)
                except ValueError as exc:
                    raise ValueError(f"{item.name} expects an integer, got {raw!r}") from exc
        return cls(**overrides)


def _parse_flag(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} expects a boolean flag, got {raw!r}")


__all__ = ["EditorConfig"]
