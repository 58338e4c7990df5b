# tuiedit/utils/utils.py
"""
tuiedit.utils.utils
===================

Configuration loading and small shared helpers.

- Embedded defaults: ``DEFAULT_CONFIG`` is the complete configuration the
  editor needs to start. It is always loaded first.
- User overrides: ``~/.config/tuiedit/config.toml`` is parsed with ``toml``
  and deep-merged on top of the defaults. A missing or broken user file only
  costs a log line.
- Environment: ``TUIEDIT_LOCALE`` overrides ``editor.locale``. The ``.env``
  file in the config directory is loaded by ``main.py`` via python-dotenv.
- First run: ``ensure_user_config_exists`` writes a commented config and a
  ``.env`` template so users have something to edit.
- Helpers: ``deep_merge``, ``hex_to_xterm`` colour conversion and
  ``get_file_icon`` for the header row.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import toml

logger = logging.getLogger("tuiedit")

# --- Constants ---
CALM_BG_IDX = 236
WHITE_FG_IDX = 255

CONFIG_DIR_ENV = "TUIEDIT_CONFIG_DIR"
LOCALE_ENV = "TUIEDIT_LOCALE"

ENV_TEMPLATE = """# tuiedit environment overrides
# UI language: en-US, es-ES, fr-FR or de-DE
TUIEDIT_LOCALE=
# Set to 1 to write raw key and mouse events to keytrace.log
TUIEDIT_KEYTRACE=0
"""

CONFIG_HEADER = """# tuiedit configuration
# Values here are merged over the built-in defaults; delete what you do not change.
"""

DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "tab_size": 4, "use_spaces": True, "locale": "en-US",
        "default_language": "Plain Text", "confirm_quit": True,
    },
    "mouse": {"enabled": True, "double_click_ms": 500, "column_tolerance": 2, "scroll_step": 3},
    "render": {"throttle_ms": 16, "input_timeout_ms": 100, "truncation_marker": "…", "filler_glyph": "~"},
    "highlighting": {"enabled": True},
    "linting": {"enabled": True, "max_line_length": 100, "python_max_line_length": 79},
    "keybindings": {
        "quit": ["ctrl+q"], "save_file": ["ctrl+s"], "open_file": ["ctrl+o"],
        "new_file": ["ctrl+n"], "goto_line": ["ctrl+g", "ctrl+l"],
        "duplicate_line": ["ctrl+d"], "delete_line": ["ctrl+k"],
        "toggle_highlighting": ["ctrl+h", "f5"], "toggle_linting": ["ctrl+e", "f4"],
        "cycle_language": ["f7"], "select_all": ["ctrl+a"], "cancel_operation": ["esc"],
        "handle_up": ["up"], "handle_down": ["down"], "handle_left": ["left"], "handle_right": ["right"],
        "handle_home": ["home"], "handle_end": ["end"],
        "handle_page_up": ["pageup"], "handle_page_down": ["pagedown"],
        "document_start": ["ctrl+home"], "document_end": ["ctrl+end"],
        "word_left": ["ctrl+left"], "word_right": ["ctrl+right"],
        "extend_selection_up": ["shift+up"], "extend_selection_down": ["shift+down"],
        "extend_selection_left": ["shift+left"], "extend_selection_right": ["shift+right"],
        "select_to_home": ["shift+home"], "select_to_end": ["shift+end"],
        "select_to_document_start": ["ctrl+shift+home"], "select_to_document_end": ["ctrl+shift+end"],
        "extend_word_left": ["ctrl+shift+left"], "extend_word_right": ["ctrl+shift+right"],
        "handle_enter": ["enter"], "handle_backspace": ["backspace"],
        "delete": ["delete"], "tab": ["tab"],
    },
    "colors": {
        "default": "#C9D1D9", "comment": "#8B949E", "keyword": "#FF7B72", "string": "#A5D6FF",
        "number": "#79C0FF", "function": "#D2A8FF", "constant": "#79C0FF", "type": "#F2CC60",
        "operator": "#FF7B72", "decorator": "#D2A8FF", "builtin": "#FFA657", "variable": "#C9D1D9",
        "tag": "#7EE787", "attribute": "#79C0FF", "error": "#F85149",
        "selection_bg": "#264F78", "header_bg": "#1F6FEB",
    },
    "logging": {
        "file_level": "DEBUG", "console_level": "WARNING", "log_to_console": False,
        "separate_error_log": False, "log_dir": "",
    },
    "file_icons": {
        "python": "🐍", "rust": "🦀", "javascript": "📜", "typescript": "📑", "html": "🌐",
        "css": "🎨", "json": "📊", "xml": "📰", "yaml": "⚙️", "toml": "❄️", "markdown": "📗",
        "text": "📝", "default": "📝",
    },
    "supported_formats": {
        "python": ["py", "pyw"], "rust": ["rs"], "javascript": ["js", "mjs", "cjs", "jsx"],
        "typescript": ["ts", "tsx"], "html": ["html", "htm"], "css": ["css"], "json": ["json"],
        "xml": ["xml", "svg"], "yaml": ["yaml", "yml"], "toml": ["toml"],
        "markdown": ["md", "markdown"], "text": ["txt", "log", "rst"],
    },
}


# --- Helper Functions ---

def get_config_dir() -> Path:
    """``$TUIEDIT_CONFIG_DIR`` if set, otherwise ``~/.config/tuiedit``."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "tuiedit"


def ensure_user_config_exists(config_dir: Optional[Path] = None) -> None:
    """Creates ``config.toml`` and ``.env`` templates in the config directory if missing."""
    try:
        config_dir = config_dir or get_config_dir()
        user_config_path = config_dir / "config.toml"
        user_env_path = config_dir / ".env"

        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            user_config_path.write_text(CONFIG_HEADER + toml.dumps(DEFAULT_CONFIG), encoding="utf-8")
            logger.info(f"Created user config template at: {user_config_path}")

        if not user_env_path.exists():
            user_env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
            logger.info(f"Created user .env template at: {user_env_path}")

    except Exception as e:
        logger.critical(f"Could not create user configuration files: {e}", exc_info=True)


def load_config(config_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Loads the embedded defaults and merges the user's config.toml over them.
    """
    final_config = copy.deepcopy(DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    config_dir = config_dir or get_config_dir()
    ensure_user_config_exists(config_dir)

    user_config_path = config_dir / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except Exception as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    env_locale = os.environ.get(LOCALE_ENV, "").strip()
    if env_locale:
        final_config["editor"]["locale"] = env_locale
        logger.debug(f"Locale overridden from environment: {env_locale}")

    return final_config


def get_file_icon(filename: Optional[str], config: Dict[str, Any]) -> str:
    """
    Returns the header icon for a filename.

    Matches the extension against ``supported_formats`` and looks the group
    up in ``file_icons``. Unknown or missing names get the ``default`` icon.
    """
    if not isinstance(config, dict):
        return "📝"

    file_icons = config.get("file_icons", {})
    supported_formats = config.get("supported_formats", {})
    default_icon = file_icons.get("default", "📝")

    if not filename:
        return default_icon

    _, extension = os.path.splitext(os.path.basename(filename.lower()))
    if not extension:
        return default_icon

    ext_without_dot = extension[1:]
    for icon_key, extensions_list in supported_formats.items():
        if isinstance(extensions_list, list) and ext_without_dot in extensions_list:
            return file_icons.get(icon_key, default_icon)
    return default_icon


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def hex_to_xterm(hex_color: str) -> int:
    """
    Converts a hexadecimal color string to the nearest xterm-256 color index.
    """
    hex_color = hex_color.lstrip("#")
    if len(hex_color) != 6:
        return WHITE_FG_IDX
    try:
        r, g, b = (int(hex_color[i:i+2], 16) for i in (0, 2, 4))
    except ValueError:
        return WHITE_FG_IDX

    if r == g == b:
        if r < 8:
            return 16
        if r > 248:
            return 231
        return round(((r - 8) / 247) * 24) + 232

    return int(
        16
        + (36 * round(r / 255 * 5))
        + (6 * round(g / 255 * 5))
        + round(b / 255 * 5)
    )
