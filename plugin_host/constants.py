"""Global constants for the plugin host."""

import os
from pathlib import Path

# Directory paths
HOST_ROOT = Path(__file__).resolve().parent.parent

_data_dir_env = os.getenv("PLUGIN_HOST_DATA_DIR", "")
if _data_dir_env:
    _data_dir_path = Path(_data_dir_env)
    DATA_DIR = _data_dir_path if _data_dir_path.is_absolute() else (HOST_ROOT / _data_dir_path).resolve()
else:
    DATA_DIR = HOST_ROOT / "data"

PLUGIN_PREFERENCES_FILE = Path(
    os.getenv("PLUGIN_PREFERENCES_FILE", str(DATA_DIR / "plugin_preferences.json"))
)

# Built-in plugins, in catalog order ("module:function")
BUILTIN_PLUGINS = [
    "plugins.bundled.timer.plugin:register",
    "plugins.bundled.todo.plugin:register",
    "plugins.bundled.open_website.plugin:register",
    "plugins.bundled.clock.plugin:register",
    "plugins.bundled.stopwatch.plugin:register",
]

# Built-ins that may be absent from a deployment
OPTIONAL_BUILTIN_PLUGINS = [
    "plugins.bundled.stopwatch.plugin:register",
]

# Fixed delay before tool-call acknowledgements are sent back to the model (seconds)
ACK_DELAY_SECONDS = 0.2

# Simulated package processing time (seconds), scaled by INSTALL_DELAY_SCALE
ARCHIVE_INSTALL_DELAY = 1.0
SCRIPT_INSTALL_DELAY = 1.0
REPOSITORY_INSTALL_DELAY = 1.5
INSTALL_DELAY_SCALE = float(os.getenv("INSTALL_DELAY_SCALE", "1.0"))

# Live model configuration
LIVE_MODEL = os.getenv("LIVE_MODEL", "models/gemini-2.0-flash-exp")
LIVE_VOICE = os.getenv("LIVE_VOICE", "Aoede")
LIVE_RESPONSE_MODALITY = os.getenv("LIVE_RESPONSE_MODALITY", "audio")
ENABLE_GOOGLE_SEARCH = os.getenv("ENABLE_GOOGLE_SEARCH", "true").lower() in ("1", "true", "yes", "on")
