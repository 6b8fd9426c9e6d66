"""
rxcommon.base.logging

Typed, emoji-enhanced logging for rxren.

Features:
 - Custom RxLogger subclass with Rich flag and log file attribute
 - Unified setup for Rich + standard logging, always on stderr
   (stdout is reserved for rename lines)
 - Optional per-run log file when a log directory is configured
 - Config-driven defaults (logging level, Rich toggle, log directory)
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, cast

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

ROOT_LOGGER_NAME = "rxren"

# ----------------------------------------------------------------------
# LEVEL STYLE METADATA
# ----------------------------------------------------------------------

ANSI_RESET = "\033[0m"

LEVEL_STYLES: Dict[int, Dict[str, str]] = {
    logging.DEBUG: {"emoji": "🐛", "ansi": "\033[36m", "rich": "bright_cyan"},
    logging.INFO: {"emoji": "ℹ️", "ansi": "\033[32m", "rich": "green"},
    logging.WARNING: {"emoji": "⚠️", "ansi": "\033[33m", "rich": "yellow"},
    logging.ERROR: {"emoji": "❌", "ansi": "\033[31m", "rich": "red"},
    logging.CRITICAL: {"emoji": "💥", "ansi": "\033[95m", "rich": "bold magenta"},
}
DEFAULT_STYLE = LEVEL_STYLES[logging.INFO]

_ORIGINAL_RECORD_FACTORY = logging.getLogRecordFactory()


def _rx_record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
    record = _ORIGINAL_RECORD_FACTORY(*args, **kwargs)
    style = LEVEL_STYLES.get(record.levelno, DEFAULT_STYLE)
    record.level_emoji = style.get("emoji", "")  # type: ignore[attr-defined]
    record.level_color = style.get("ansi", "")  # type: ignore[attr-defined]
    record.level_rich_style = style.get("rich", "")  # type: ignore[attr-defined]
    return record


logging.setLogRecordFactory(_rx_record_factory)


# ----------------------------------------------------------------------
# FORMATTERS
# ----------------------------------------------------------------------

class ColorEmojiFormatter(logging.Formatter):
    """Console formatter that injects colored level names and emojis."""

    def format(self, record: logging.LogRecord) -> str:
        original_level_display = getattr(record, "level_display", None)
        emoji = getattr(record, "level_emoji", "")
        ansi_color = getattr(record, "level_color", "")

        display = f"{emoji} {record.levelname}" if emoji else record.levelname
        if ansi_color:
            display = f"{ansi_color}{display}{ANSI_RESET}"

        record.level_display = display  # type: ignore[attr-defined]
        try:
            return super().format(record)
        finally:
            if original_level_display is None:
                delattr(record, "level_display")
            else:
                record.level_display = original_level_display  # type: ignore[attr-defined]


class EmojiFormatter(logging.Formatter):
    """File formatter that prefixes log lines with the computed emoji."""

    def format(self, record: logging.LogRecord) -> str:
        if not getattr(record, "level_emoji", ""):
            style = LEVEL_STYLES.get(record.levelno, DEFAULT_STYLE)
            record.level_emoji = style.get("emoji", "")  # type: ignore[attr-defined]
        return super().format(record)


class RxRichHandler(RichHandler):
    """Rich console handler with emoji-enhanced level column."""

    def get_level_text(self, record: logging.LogRecord) -> Text:
        style = LEVEL_STYLES.get(record.levelno, DEFAULT_STYLE)
        emoji = getattr(record, "level_emoji", "")
        style_name = style.get("rich", "")

        text = Text()
        if emoji:
            text.append(f"{emoji} ", style=style_name or None)
        if style_name:
            text.append(record.levelname, style=style_name)
        else:
            text.append(record.levelname)
        return text


# ----------------------------------------------------------------------
# LOGGER CLASS
# ----------------------------------------------------------------------

class RxLogger(logging.Logger):
    """Logger with Rich flag and optional log file."""

    rich_enabled: bool = False
    log_file: Optional[Path] = None


# ----------------------------------------------------------------------
# CONFIG-DRIVEN DEFAULTS
# ----------------------------------------------------------------------

_DEFAULT_SETTINGS_CACHE: Dict[str, Any] | None = None


def _normalize_level(value: Any) -> str:
    if isinstance(value, str):
        candidate = value.strip().upper()
        if candidate in logging._nameToLevel:  # type: ignore[attr-defined]
            return candidate
    elif isinstance(value, int):
        label = logging.getLevelName(value)
        if isinstance(label, str) and not label.startswith("Level "):
            return label
    return "INFO"


def _normalize_use_rich(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"auto", "default", ""}:
            return None
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    return None


def _load_default_logging_settings() -> Dict[str, Any]:
    global _DEFAULT_SETTINGS_CACHE
    if _DEFAULT_SETTINGS_CACHE is None:
        from rxcommon.shared.loader import default_config_path, load_logging_config

        config_path = default_config_path()
        try:
            raw = load_logging_config(config_path) if config_path else {}
        except (OSError, ValueError) as exc:
            logging.getLogger(ROOT_LOGGER_NAME).debug("Ignoring default logging config: %s", exc)
            raw = {}

        _DEFAULT_SETTINGS_CACHE = {
            "level": _normalize_level(raw.get("level")),
            "use_rich": _normalize_use_rich(raw.get("use_rich")),
            "log_dir": raw.get("log_dir"),
            "file_prefix": raw.get("file_prefix"),
        }
    return dict(_DEFAULT_SETTINGS_CACHE)


def _resolve_use_rich(value: Optional[bool]) -> bool:
    if value is None:
        return sys.stderr.isatty()
    return bool(value)


# ----------------------------------------------------------------------
# BASE LOGGER SETUP
# ----------------------------------------------------------------------

def setup_logging(
    level: str | int | None = None,
    use_rich: bool | str | None = None,
    log_dir: Optional[Path | str] = None,
    file_prefix: Optional[str] = None,
) -> RxLogger:
    """
    Configure and return the global rxren logger.

    Args:
        level: Desired logging level. Defaults to the value in config.yaml (INFO if unset).
        use_rich: Force-enable or disable the Rich handler. None or "auto" means "Rich when stderr is a TTY".
        log_dir: Directory for the per-run log file. No file is written when unset.
        file_prefix: Prefix for generated log filenames.
    """
    defaults = _load_default_logging_settings()
    resolved_level = _normalize_level(level if level is not None else defaults.get("level"))
    resolved_use_rich = _resolve_use_rich(
        _normalize_use_rich(use_rich) if use_rich is not None else defaults.get("use_rich")
    )
    resolved_log_dir = log_dir or defaults.get("log_dir")
    resolved_file_prefix = file_prefix or defaults.get("file_prefix") or ROOT_LOGGER_NAME

    logging.setLoggerClass(RxLogger)
    logger = cast(RxLogger, logging.getLogger(ROOT_LOGGER_NAME))
    logger.setLevel(resolved_level)

    # Rebuild handlers from scratch on every call.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # ------------------------------------------------------------------
    # Console Handler (Rich or ANSI), stderr only
    # ------------------------------------------------------------------
    console_handler: logging.Handler
    if resolved_use_rich:
        console_handler = RxRichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            markup=False,
            show_time=True,
            show_level=True,
            show_path=False,
            log_time_format="[%X]",
        )
        logger.rich_enabled = True
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            ColorEmojiFormatter(
                fmt="%(asctime)s %(level_display)s %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        logger.rich_enabled = False
    console_handler.setLevel(logging.NOTSET)
    logger.addHandler(console_handler)

    # ------------------------------------------------------------------
    # File Handler
    # ------------------------------------------------------------------
    logger.log_file = None
    if resolved_log_dir:
        log_dir_path = Path(resolved_log_dir).expanduser()
        log_dir_path.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        log_file_path = log_dir_path / f"{resolved_file_prefix}_{timestamp}.log"

        file_handler = logging.FileHandler(log_file_path, mode="a", encoding="utf-8")
        file_handler.setFormatter(
            EmojiFormatter(
                fmt="%(asctime)s %(level_emoji)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        file_handler.setLevel(logging.NOTSET)
        logger.addHandler(file_handler)
        logger.log_file = log_file_path

    # ------------------------------------------------------------------
    # Finalize
    # ------------------------------------------------------------------
    logger.propagate = False
    logger._initialized = True  # type: ignore[attr-defined]
    logger.debug(
        "Logger initialized at level %s (Rich=%s)",
        resolved_level,
        "ON" if logger.rich_enabled else "OFF",
    )
    if logger.log_file:
        logger.info("📄 Log file created at: %s", logger.log_file.resolve())

    return logger


# ----------------------------------------------------------------------
# UTILITY ACCESSOR
# ----------------------------------------------------------------------

def get_logger(name: str = ROOT_LOGGER_NAME) -> RxLogger:
    """Retrieve a namespaced rxren logger (configured later via setup_logging)."""

    logging.setLoggerClass(RxLogger)
    base = cast(RxLogger, logging.getLogger(ROOT_LOGGER_NAME))

    if not getattr(base, "_initialized", False) and not base.handlers:
        base.addHandler(logging.NullHandler())

    if not name or name == ROOT_LOGGER_NAME:
        return base
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return cast(RxLogger, logging.getLogger(name))

    return cast(RxLogger, base.getChild(name))
