"""
YAML configuration for the planner.

The file (config.yaml in the working directory unless a path is given) is
created with defaults on first run. A .env file next to it, one level up, or
in the working directory is read into os.environ first, and string values
written as ${VAR} or $VAR are replaced from the environment. With watch=True
edits to the file are picked up and announced to registered callbacks.
"""
import logging
import os
import re
import time
from collections import namedtuple
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import yaml
from watchdog.events import FileModifiedEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

AnalyticsSettings = namedtuple(
    "AnalyticsSettings",
    [
        "upcoming_window_days",
        "upcoming_limit",
        "weekly_window_days",
        "streak_lookback_days",
        "recent_sessions_limit",
    ],
)

DEFAULT_ANALYTICS = AnalyticsSettings(
    upcoming_window_days=7,
    upcoming_limit=5,
    weekly_window_days=7,
    streak_lookback_days=30,
    recent_sessions_limit=4,
)

# (section, key) of values that name files; None is the top level
PATH_KEYS = (("logging", "file"), ("database", "path"), (None, "seed"))

_ENV_LINE_RE = re.compile(r'^([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$')


def default_config() -> Dict[str, Any]:
    return {
        "database": {"path": "~/.academic_planner/planner.db"},
        "api": {"host": "127.0.0.1", "port": 8765},
        "logging": {"level": "INFO"},
        "analytics": dict(DEFAULT_ANALYTICS._asdict()),
    }


def load_env_file(env_file: Path) -> None:
    """KEY=VALUE lines into os.environ; variables already set win."""
    logger.info(f"Loading environment variables from: {env_file}")
    try:
        lines = env_file.read_text().splitlines()
    except OSError as e:
        logger.warning(f"Could not read {env_file}: {e}")
        return
    for line in lines:
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        match = _ENV_LINE_RE.match(line)
        if not match:
            continue
        key, value = match.groups()
        if key not in os.environ:
            os.environ[key] = value.strip('"').strip("'")
            logger.debug(f"Loaded env var: {key}")


def substitute_env(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: substitute_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [substitute_env(item) for item in value]
    if isinstance(value, str):
        if value.startswith('${') and value.endswith('}'):
            return os.environ.get(value[2:-1], value)
        if value.startswith('$') and len(value) > 1:
            return os.environ.get(value[1:], value)
    return value


def config_diff(old: Dict[str, Any], new: Dict[str, Any], prefix: str = "") -> Iterator[Tuple[str, str, Any, Any]]:
    """Yield (change, dotted.key, old, new) with change one of added/removed/changed."""
    for key in sorted(set(old) | set(new), key=str):
        path = f"{prefix}.{key}" if prefix else str(key)
        if key not in new:
            yield "removed", path, old[key], None
        elif key not in old:
            yield "added", path, None, new[key]
        elif isinstance(old[key], dict) and isinstance(new[key], dict):
            yield from config_diff(old[key], new[key], path)
        elif old[key] != new[key]:
            yield "changed", path, old[key], new[key]


class ConfigFileWatcher(FileSystemEventHandler):
    """Calls config.reload() when the config file is modified, at most once per cooldown."""

    def __init__(self, config: "Config", cooldown: float = 1.0):
        self.config = config
        self.cooldown = cooldown
        self._last_reload = 0.0

    def on_modified(self, event):
        if not isinstance(event, FileModifiedEvent):
            return
        if event.src_path != str(self.config.config_file):
            return
        now = time.time()
        if now - self._last_reload < self.cooldown:
            return
        self._last_reload = now
        try:
            self.config.reload()
        except Exception as e:
            logger.error(f"Error handling config change: {e}")


class Config:
    def __init__(self, config_path: Optional[str] = None, watch: bool = True):
        self.config_file = Path(config_path).resolve() if config_path else Path.cwd() / "config.yaml"
        self.config_dir = self.config_file.parent
        self.data: Dict[str, Any] = {}
        self.change_callbacks: List[Callable[[Dict[str, Any]], None]] = []
        self.observer = None
        self._reloading = False
        logger.debug(f"Using config file: {self.config_file}")

        env_file = self._find_env_file()
        if env_file is not None:
            load_env_file(env_file)

        self._write_defaults_if_missing()
        self.data = self._read() or default_config()

        if watch:
            self.observer = Observer()
            self.observer.schedule(ConfigFileWatcher(self), str(self.config_dir), recursive=False)
            self.observer.start()
            logger.info(f"Watching {self.config_dir} for config changes")

    def _find_env_file(self) -> Optional[Path]:
        for candidate in (self.config_dir / ".env", self.config_dir.parent / ".env", Path.cwd() / ".env"):
            if candidate.exists():
                return candidate
        logger.debug("No .env file found")
        return None

    def _write_defaults_if_missing(self) -> None:
        if self.config_file.exists():
            return
        self.config_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Writing default config file: {self.config_file}")
        self.config_file.write_text(yaml.dump(default_config(), sort_keys=False))

    def _read(self) -> Optional[Dict[str, Any]]:
        """Parsed file contents, or None when the file is unreadable or not a mapping."""
        try:
            with open(self.config_file) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading config {self.config_file}: {e}")
            return None
        if not isinstance(data, dict):
            logger.error(f"Config {self.config_file} must be a mapping at the top level")
            return None

        data = substitute_env(data)
        for section, key in PATH_KEYS:
            holder = data.get(section) if section else data
            if isinstance(holder, dict) and isinstance(holder.get(key), str):
                holder[key] = os.path.expanduser(holder[key])
        return data

    def register_change_callback(self, callback: Callable[[Dict[str, Any]], None]) -> None:
        self.change_callbacks.append(callback)

    def reload(self) -> None:
        """Re-read the file; a broken file keeps the current settings."""
        if self._reloading:
            return
        self._reloading = True
        try:
            # Editors may still be writing
            time.sleep(0.1)
            new_data = self._read()
            if new_data is None:
                logger.info("Keeping previous configuration")
                return

            old_data, self.data = self.data, new_data
            for change, path, old, new in config_diff(old_data, new_data):
                if change == "changed":
                    logger.info(f"Config changed: {path}: {old} -> {new}")
                elif change == "added":
                    logger.info(f"Config added: {path}: {new}")
                else:
                    logger.info(f"Config removed: {path}: {old}")

            for callback in self.change_callbacks:
                try:
                    callback(self.data)
                except Exception as e:
                    logger.error(f"Error in config change callback: {e}", exc_info=True)
        finally:
            self._reloading = False

    def cleanup(self) -> None:
        if self.observer is not None:
            self.observer.stop()
            self.observer.join()
            self.observer = None

    def get_section(self, name: str) -> Dict[str, Any]:
        section = self.data.get(name)
        return section if isinstance(section, dict) else {}

    def analytics_settings(self) -> AnalyticsSettings:
        """Analytics windows and caps; missing, invalid or non-positive values fall back to defaults."""
        section = self.get_section("analytics")
        values = {}
        for key, default in DEFAULT_ANALYTICS._asdict().items():
            raw = section.get(key, default)
            try:
                value = type(default)(raw)
            except (TypeError, ValueError):
                logger.warning(f"Invalid analytics.{key}: {raw!r}, using {default}")
                value = default
            if value <= 0:
                logger.warning(f"Non-positive analytics.{key}: {raw!r}, using {default}")
                value = default
            values[key] = value
        return AnalyticsSettings(**values)
