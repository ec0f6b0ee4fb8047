# store_config.py
from __future__ import annotations

import configparser
import logging
import os
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from errors import ConfigurationError
from models import PatternSet

logger = logging.getLogger(__name__)

SECTION = "filters"
OPTIONS = ("include_names", "include_descriptions", "exclude_names", "exclude_descriptions")

DEFAULT_CONFIG_TEXT = """\
# pulse-switcher config file
#
# pulse-switcher lists the available PulseAudio sinks, filters them down to a
# list of matching devices and switches the default sink to the next entry of
# that list, in the order the server enumerates them. If the current default
# is not a matching device, the first matching device is chosen.
#
# Each option takes one regular expression per line. A device is included when
# its name matches any include_names pattern OR its description matches any
# include_descriptions pattern. With no include patterns at all, every device
# is included. Patterns match anywhere in the text; use (?i) for
# case-insensitive matching. Each line is stripped of surrounding spaces, and
# lines starting with # or ; are comments, so write [ ] or \\x20 for a
# significant space and \\# for a leading #.
#
# Example:
#   include_names =
#       (?i)astro.*a50.*game
#       analog-stereo

[filters]
include_names =
include_descriptions =

# Devices matching these are dropped even when an include pattern matched.
exclude_names =
exclude_descriptions =
"""


def _windows_appdata_dir() -> Path:
    appdata = os.environ.get("APPDATA")
    if appdata:
        return Path(appdata)
    return Path.home() / "AppData" / "Roaming"


def _linux_xdg_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def user_config_dir(app_name: str) -> Path:
    sysname = (platform.system() or "").lower()
    if sysname.startswith("windows"):
        return _windows_appdata_dir() / app_name
    return _linux_xdg_config_dir() / app_name


def _split_patterns(raw: str) -> List[str]:
    return [line.strip() for line in raw.splitlines() if line.strip()]


def parse_pattern_set(text: str, source: str = "<string>") -> PatternSet:
    # interpolation would eat the '%' in patterns
    cfg = configparser.ConfigParser(interpolation=None, default_section="__unused__")
    try:
        cfg.read_string(text, source=source)
    except configparser.Error as e:
        raise ConfigurationError(f"parse failed: {e}") from e

    extra = [s for s in cfg.sections() if s != SECTION]
    if extra:
        raise ConfigurationError(f"unknown section(s): {', '.join(extra)}")
    if not cfg.has_section(SECTION):
        return PatternSet()

    unknown = [k for k in cfg.options(SECTION) if k not in OPTIONS]
    if unknown:
        raise ConfigurationError(f"unknown option(s) in [{SECTION}]: {', '.join(unknown)}")

    values = {k: _split_patterns(cfg.get(SECTION, k, fallback="")) for k in OPTIONS}
    return PatternSet(**values)


def load_pattern_set(path: Path) -> PatternSet:
    logger.debug("loading config file %s", path)
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"failed to load '{path}': read failed: {e}") from e
    try:
        return parse_pattern_set(text, source=str(path))
    except ConfigurationError as e:
        raise ConfigurationError(f"failed to load '{path}': {e}") from e


@dataclass(frozen=True)
class ConfigStore:
    app_name: str = "pulse-switcher"
    filename: str = "config.ini"
    override: Optional[Path] = None

    @property
    def dir_path(self) -> Path:
        if self.override is not None:
            return self.override.parent
        return user_config_dir(self.app_name)

    @property
    def file_path(self) -> Path:
        if self.override is not None:
            return self.override
        return self.dir_path / self.filename

    def ensure_exists(self) -> bool:
        """Write the example config if there is none. True if a file was written."""
        if self.file_path.exists():
            return False
        try:
            self.dir_path.mkdir(parents=True, exist_ok=True)
            self.file_path.write_text(DEFAULT_CONFIG_TEXT, encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"failed to write '{self.file_path}': {e}") from e
        return True

    def load(self) -> PatternSet:
        """
        An explicit path must exist. The default path is optional: without it
        every device is eligible.
        """
        if self.override is not None:
            return load_pattern_set(self.override)
        if not self.file_path.is_file():
            logger.debug("default config file %s not found, using default", self.file_path)
            return PatternSet()
        return load_pattern_set(self.file_path)


def default_pattern_set() -> PatternSet:
    return ConfigStore().load()
