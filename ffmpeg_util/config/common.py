"""
Common configuration settings used throughout the application.

This module contains globally shared configuration settings and constants for
logging, external tool locations and temporary file management. It also
handles the loading of user-specific configuration from an external YAML file,
allowing for easy customization without modifying the source code.

The values here are only defaults. Objects that need a temp root or a binary
path (`MediaPipeline`, `TempWorkspace`, `FFmpegEngine`, `FFprobeClient`)
receive them as constructor arguments.
"""
from pathlib import Path
import yaml
from loguru import logger

# --- User-Defined Path Configuration ---
# This block loads user-specific paths from a 'config.user.yaml' file located
# at the project root, for example:
#
#   paths:
#     ffmpeg_dir: /opt/ffmpeg/bin
#     temp_dir: /mnt/ramdisk
#     error_log_dir: ./ffmpeg_util_errors

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
USER_CONFIG_PATH = PROJECT_ROOT / "config.user.yaml"

# The directory containing the ffmpeg and ffprobe executables. If None, the
# executables are expected to be on the system's PATH.
MODULE_PATH: Path | None = None

# Root under which temporary workspaces are created. None means the system
# default temp directory (as chosen by `tempfile`).
TEMP_DIR_ROOT: Path | None = None

# Directory receiving `error.txt` when an engine invocation fails. None
# disables the file-based error log (console logging still happens).
ERROR_LOG_DIR: Path | None = None


def load_user_config(config_path: Path) -> dict:
    """
    Reads the `paths` section of a user YAML config.

    Returns an empty dict when the file is missing or cannot be parsed; a
    broken config file is logged and otherwise ignored.
    """
    if not config_path.is_file():
        logger.debug(f"User config '{config_path}' not found. Relying on system PATH for executables.")
        return {}
    try:
        with config_path.open("r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not load or parse '{config_path}': {e}")
        return {}
    if not isinstance(user_config, dict):
        return {}
    return user_config.get("paths") or {}


_paths_config = load_user_config(USER_CONFIG_PATH)
if _paths_config.get("ffmpeg_dir"):
    MODULE_PATH = Path(_paths_config["ffmpeg_dir"])
if _paths_config.get("temp_dir"):
    TEMP_DIR_ROOT = Path(_paths_config["temp_dir"])
if _paths_config.get("error_log_dir"):
    ERROR_LOG_DIR = Path(_paths_config["error_log_dir"]).resolve()


def executable_path(name: str, module_path: Path | None = None) -> str:
    """Returns `<module_path>/<name>` when a tool directory is configured, else the bare name."""
    module_path = module_path if module_path is not None else MODULE_PATH
    if module_path:
        return str(Path(module_path) / name)
    return name


FFMPEG_BINARY = executable_path("ffmpeg")
FFPROBE_BINARY = executable_path("ffprobe")


# --- Logging Configuration ---

# The format string for the Loguru logger.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{process} - <level>{message}</level>"
)

# The filename of the text file that records every executed FFmpeg command.
COMMAND_TEXT = "cmd.txt"


# --- Temporary Workspace Settings ---

# Prefix used for workspace directories when the caller gives no hint.
DEFAULT_WORKSPACE_HINT = "ffmpeg_util"

# Length of the random suffix appended to workspace names. Together with the
# timestamp this keeps concurrently created workspaces apart.
WORKSPACE_RANDOM_LENGTH = 8

# Prefix of generated concat manifest files.
MANIFEST_PREFIX = "filelist"
