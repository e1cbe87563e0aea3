"""Settings management for the Booklist client.

Settings are persisted as JSON in ``_BOOKLIST_DIR/booklist-settings.json``.
The file is created with defaults on first launch; users edit it directly
and restart the app to apply changes.
"""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

_BOOKLIST_DIR = Path.home() / ".booklist"
_DEFAULT_SETTINGS_PATH = _BOOKLIST_DIR / "booklist-settings.json"


@dataclass
class Settings:
    """Application settings persisted as JSON.

    Attributes
    ----------
    api_url : str
        Root URL of the remote book store.
    timeout : float
        HTTP request timeout in seconds.
    send_image_on_update : bool
        Whether updates also send ``image_url``. The store's update
        endpoint only takes title and author, so this defaults to off.
    log_path : str
        Path to the structured log file. Relative paths are resolved from
        ``_BOOKLIST_DIR/``.
    activity_path : str
        Path to the change history file, resolved like ``log_path``.
    """

    api_url: str = "http://localhost:5001"
    timeout: float = 10.0
    send_image_on_update: bool = False
    log_path: str = "data/booklist.log"
    activity_path: str = "data/activity.log"

    def resolve_log_path(self) -> Path:
        """Resolve ``log_path`` to an absolute path.

        Relative paths are resolved from ``_BOOKLIST_DIR/``.

        Returns
        -------
        Path
            Absolute, resolved path to the log file.
        """
        p = Path(self.log_path).expanduser()
        if not p.is_absolute():
            p = _BOOKLIST_DIR / p
        return p.resolve()

    def resolve_activity_path(self) -> Path:
        """Resolve ``activity_path`` the same way as ``log_path``."""
        p = Path(self.activity_path).expanduser()
        if not p.is_absolute():
            p = _BOOKLIST_DIR / p
        return p.resolve()


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from a JSON file.

    Creates the default settings file if it does not exist.

    Parameters
    ----------
    path : Path, optional
        Path to the settings file. Defaults to
        ``_BOOKLIST_DIR/booklist-settings.json``.

    Returns
    -------
    Settings
        Loaded (or default) application settings.
    """
    path = path or _DEFAULT_SETTINGS_PATH
    if not path.exists():
        settings = Settings()
        save_settings(settings, path)
        return settings
    try:
        data = json.loads(path.read_text())
        return Settings(
            api_url=data.get("api_url", "http://localhost:5001"),
            timeout=float(data.get("timeout", 10.0)),
            send_image_on_update=bool(data.get("send_image_on_update", False)),
            log_path=data.get("log_path", "data/booklist.log"),
            activity_path=data.get("activity_path", "data/activity.log"),
        )
    except (json.JSONDecodeError, AttributeError, TypeError, ValueError):
        return Settings()


def save_settings(settings: Settings, path: Optional[Path] = None) -> None:
    """Write settings to a JSON file.

    Creates parent directories if they do not exist.

    Parameters
    ----------
    settings : Settings
        The settings to persist.
    path : Path, optional
        Destination file path. Defaults to
        ``_BOOKLIST_DIR/booklist-settings.json``.
    """
    path = path or _DEFAULT_SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(settings), indent=2) + "\n")
