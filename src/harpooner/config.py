"""Runtime configuration loaded from config.json.

Every recognised option is an explicit dataclass field. Unknown keys are
rejected so a typo in the config file fails loudly instead of being ignored.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path("~/.config/harpooner/config.json")
DEFAULT_DATA_DIR = "~/.local/share/harpooner"
DEFAULT_LOG_FILE = "~/.cache/harpooner/harpooner.log"

BORDER_STYLES = ("rounded", "square", "double", "heavy", "ascii")

# Keys the open bookmark list handles before any global binding
SURFACE_KEYS = ("\n", "\r", "d", "j", "k", "J", "K")


def _check_keys(section: str, payload: dict, allowed: set[str]) -> None:
    unknown = sorted(set(payload) - allowed)
    if unknown:
        raise ConfigError(f"Unknown {section} option(s): {', '.join(unknown)}")


def _positive_int(payload: dict, key: str, default: int) -> int:
    try:
        value = int(payload.get(key, default))
    except (TypeError, ValueError) as err:
        raise ConfigError(f"{key} must be an integer") from err
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got {value}")
    return value


def _as_str(payload: dict, key: str, default: str) -> str:
    value = payload.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string, got {type(value).__name__}")
    return value


def _as_bool(payload: dict, key: str, default: bool) -> bool:
    value = payload.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false")
    return value


@dataclass(frozen=True)
class UISettings:
    """Appearance and behaviour of the bookmark surface."""

    width_ratio: float = 0.5
    max_width: int = 100
    fallback_width: int = 60
    height_in_lines: int = 12
    border: str = "rounded"
    title: str = "Harpooner Bookmarks"
    save_on_toggle: bool = True
    show_numbers: bool = True

    @classmethod
    def from_dict(cls, payload: dict) -> UISettings:
        """Create UISettings from a raw dictionary, defaults for missing keys."""
        if not isinstance(payload, dict):
            raise ConfigError("ui must be an object")
        _check_keys("ui", payload, set(cls.__dataclass_fields__))

        try:
            width_ratio = float(payload.get("width_ratio", cls.width_ratio))
        except (TypeError, ValueError) as err:
            raise ConfigError("width_ratio must be a number") from err
        if not 0 < width_ratio <= 1:
            raise ConfigError(f"width_ratio must be in (0, 1], got {width_ratio}")

        border = _as_str(payload, "border", cls.border)
        if border not in BORDER_STYLES:
            raise ConfigError(
                f"border must be one of {', '.join(BORDER_STYLES)}, got {border!r}"
            )

        return cls(
            width_ratio=width_ratio,
            max_width=_positive_int(payload, "max_width", cls.max_width),
            fallback_width=_positive_int(payload, "fallback_width", cls.fallback_width),
            height_in_lines=_positive_int(payload, "height_in_lines", cls.height_in_lines),
            border=border,
            title=_as_str(payload, "title", cls.title),
            save_on_toggle=_as_bool(payload, "save_on_toggle", cls.save_on_toggle),
            show_numbers=_as_bool(payload, "show_numbers", cls.show_numbers),
        )


def _default_nav() -> tuple[tuple[str, int], ...]:
    return (("1", 1), ("2", 2), ("3", 3), ("4", 4))


@dataclass(frozen=True)
class Keymaps:
    """Global key bindings. An empty string disables a binding."""

    add_file: str = "a"
    toggle_ui: str = "e"
    save_list: str = "s"
    load_list: str = "l"
    nav: tuple[tuple[str, int], ...] = field(default_factory=_default_nav)

    # Keys the application reserves for itself
    RESERVED = ("q", "?")

    @classmethod
    def from_dict(cls, payload: dict) -> Keymaps:
        """Create Keymaps from a raw dictionary and validate the bindings."""
        if not isinstance(payload, dict):
            raise ConfigError("keymaps must be an object")
        _check_keys("keymaps", payload, {"add_file", "toggle_ui", "save_list", "load_list", "nav"})

        nav_raw = payload.get("nav")
        if nav_raw is None:
            nav = _default_nav()
        elif isinstance(nav_raw, dict):
            nav_items: list[tuple[str, int]] = []
            for trigger, index in nav_raw.items():
                if isinstance(index, bool) or not isinstance(index, int):
                    raise ConfigError(f"nav index for {trigger!r} must be an integer")
                nav_items.append((str(trigger), index))
            nav = tuple(sorted(nav_items, key=lambda item: item[1]))
        else:
            raise ConfigError("keymaps.nav must be an object mapping key to index")

        keymaps = cls(
            add_file=_as_str(payload, "add_file", cls.add_file),
            toggle_ui=_as_str(payload, "toggle_ui", cls.toggle_ui),
            save_list=_as_str(payload, "save_list", cls.save_list),
            load_list=_as_str(payload, "load_list", cls.load_list),
            nav=nav,
        )
        keymaps.validate()
        return keymaps

    def validate(self) -> None:
        """Raise ConfigError for malformed, duplicate or reserved triggers."""
        seen: dict[str, str] = {}
        bindings = [
            ("add_file", self.add_file),
            ("toggle_ui", self.toggle_ui),
            ("save_list", self.save_list),
            ("load_list", self.load_list),
        ]
        for trigger, index in self.nav:
            if index <= 0:
                raise ConfigError(f"nav index must be positive, got {index}")
            bindings.append((f"nav {index}", trigger))

        for name, trigger in bindings:
            if trigger == "":
                continue
            if len(trigger) != 1:
                raise ConfigError(f"{name} must be a single key, got {trigger!r}")
            if trigger in self.RESERVED:
                raise ConfigError(f"{name} cannot use reserved key {trigger!r}")
            if trigger in SURFACE_KEYS:
                raise ConfigError(f"{name} cannot use bookmark list key {trigger!r}")
            if trigger in seen:
                raise ConfigError(f"Key {trigger!r} bound to both {seen[trigger]} and {name}")
            seen[trigger] = name

    def nav_index(self, key: str) -> int | None:
        """Return the list index bound to ``key``, if any."""
        for trigger, index in self.nav:
            if trigger and trigger == key:
                return index
        return None


@dataclass(frozen=True)
class Config:
    """Runtime configuration loaded from config.json."""

    data_dir: Path
    log_file: Path
    save_on_exit: bool = True
    editor_command: tuple[str, ...] | None = None
    ui: UISettings = field(default_factory=UISettings)
    keymaps: Keymaps = field(default_factory=Keymaps)

    @classmethod
    def from_dict(cls, payload: dict) -> Config:
        """Create a Config object from a raw dictionary."""
        if not isinstance(payload, dict):
            raise ConfigError("Config root must be an object")
        _check_keys(
            "config",
            payload,
            {"data_dir", "log_file", "save_on_exit", "editor_command", "ui", "keymaps"},
        )

        data_dir = Path(
            os.path.expanduser(_as_str(payload, "data_dir", DEFAULT_DATA_DIR))
        ).resolve()
        log_file = Path(
            os.path.expanduser(_as_str(payload, "log_file", DEFAULT_LOG_FILE))
        ).resolve()

        editor_raw: Any = payload.get("editor_command")
        editor_command: tuple[str, ...] | None
        if editor_raw is None:
            editor_command = None
        elif isinstance(editor_raw, str):
            editor_command = tuple(editor_raw.split())
        elif isinstance(editor_raw, list) and all(isinstance(p, str) for p in editor_raw):
            editor_command = tuple(editor_raw)
        else:
            raise ConfigError("editor_command must be a string or a list of strings")
        if editor_command is not None and not editor_command:
            raise ConfigError("editor_command must not be empty")

        return cls(
            data_dir=data_dir,
            log_file=log_file,
            save_on_exit=_as_bool(payload, "save_on_exit", True),
            editor_command=editor_command,
            ui=UISettings.from_dict(payload.get("ui", {})),
            keymaps=Keymaps.from_dict(payload.get("keymaps", {})),
        )

    @classmethod
    def default(cls) -> Config:
        """Configuration used when no config file exists."""
        return cls.from_dict({})


def load_config(path: Path) -> Config:
    """Load configuration from the provided path.

    A missing file yields the defaults; unreadable or invalid JSON raises
    ConfigError.
    """
    if not path.exists():
        return Config.default()
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError) as err:
        raise ConfigError(f"Failed to read config {path}: {err}") from err
    return Config.from_dict(data)
