"""Path utilities: canonical store location and per-OS tool directories."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from relay.core.errors import InvalidNameError

STORE_DIR = ".agent-relay"


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from start to find a directory containing .agent-relay/ or .git/."""
    current = (start or Path.cwd()).resolve()
    for parent in [current, *current.parents]:
        if (parent / STORE_DIR).is_dir():
            return parent
        if (parent / ".git").exists():
            return parent
    return None


def store_path(project_root: Path | None = None) -> Path:
    """Return the .agent-relay/ path for a project."""
    root = project_root or find_project_root()
    if root is None:
        raise FileNotFoundError("Not inside a project with an .agent-relay store or git repo")
    return root / STORE_DIR


# Tool directory resolution. Every helper accepts an explicit home so adapters
# can be pointed at a fake home directory.


def home_dir(home: Path | None = None) -> Path:
    return home if home is not None else Path.home()


def xdg_config_home(home: Path | None = None) -> Path:
    """$XDG_CONFIG_HOME, or ~/.config. The variable is ignored for a fake home."""
    if home is None:
        env = os.environ.get("XDG_CONFIG_HOME")
        if env:
            return Path(env)
    return home_dir(home) / ".config"


def app_config_dir(app: str, home: Path | None = None) -> Path:
    """Per-user application config directory, following each OS's convention."""
    base = home_dir(home)
    if sys.platform == "darwin":
        return base / "Library" / "Application Support" / app
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA") if home is None else None
        return Path(appdata) / app if appdata else base / "AppData" / "Roaming" / app
    return xdg_config_home(home) / app


def check_name(name: str) -> str:
    """Return name unchanged if it is usable as a single path component.

    Names are identities and are case-sensitive, so nothing is rewritten;
    anything that could escape its directory is rejected.
    """
    if not name or not name.strip():
        raise InvalidNameError("Resource name cannot be empty")
    if name in (".", "..") or "/" in name or "\\" in name or "\x00" in name:
        raise InvalidNameError(f"Invalid resource name: {name!r}")
    return name
