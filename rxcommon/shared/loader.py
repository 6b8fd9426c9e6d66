"""
Shared configuration loading and validation helpers.

Provides:
 - `load_config`: basic YAML loader
 - `default_config_path`: locate configs/config.yaml when it ships with the checkout
 - `load_logging_config`: the `logging:` section of a config file
 - `load_task_config`: validated configuration for a given task
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional

from rxcommon.base.file_io import read_yaml_mapping


ConfigDict = Dict[str, Any]

DEFAULT_CONFIG_FILENAME = "config.yaml"
LOGGING_SECTION_KEY = "logging"
TASKS_SECTION_KEY = "tasks"
CONFIGS_DIR = Path(__file__).resolve().parents[2] / "configs"


TASK_SCHEMAS: Dict[str, FrozenSet[str]] = {
    "rename": frozenset({
        "roots", "match", "replace", "forext",
        "fileonly", "dironly", "dryrun", "workers", "queue_size",
        "overwrite", "bottom_up", "progress", "report_dir",
    }),
}

FIELD_ALIASES = {
    "root": "roots",
    "c": "workers",
    "dry_run": "dryrun",
    "file_only": "fileonly",
    "dir_only": "dironly",
    "ext": "forext",
    "report": "report_dir",
}

STRING_FIELDS = {"match", "replace", "forext"}
SINGLE_PATH_FIELDS = {"report_dir"}
MULTI_PATH_FIELDS = {"roots"}
BOOLEAN_FIELDS = {"fileonly", "dironly", "dryrun", "overwrite", "bottom_up", "progress"}
INTEGER_FIELDS = {"workers", "queue_size"}
LOGGING_ALLOWED_KEYS = {"level", "use_rich", "log_dir", "file_prefix"}

YES_VALUES = {"1", "true", "yes", "y", "on"}
NO_VALUES = {"0", "false", "no", "n", "off"}


def default_config_path() -> Optional[Path]:
    candidate = CONFIGS_DIR / DEFAULT_CONFIG_FILENAME
    return candidate if candidate.exists() else None


def load_config(path: str | Path | None) -> Dict[str, Any]:
    if not path:
        return {}

    cfg_path = Path(path).expanduser()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {cfg_path}")

    return read_yaml_mapping(cfg_path)


def load_logging_config(config_path: str | Path | None = None) -> Dict[str, Any]:
    root = load_config(config_path)
    return _extract_logging_settings(root)


def load_task_config(task: str, config_path: str | Path | None = None) -> ConfigDict:
    """
    Load the `tasks.<task>` section of a YAML config and validate it against
    TASK_SCHEMAS. Keys are aliased, type-checked and normalized; the merged
    logging section is attached under `__logging__`.
    """
    if task not in TASK_SCHEMAS:
        raise ValueError(f"Unknown task '{task}'. Expected one of: {', '.join(sorted(TASK_SCHEMAS))}")

    resolved_path = _resolve_config_path(config_path)
    if resolved_path is None:
        return {"__task__": task}

    root_config = dict(load_config(resolved_path))
    task_config_raw = _extract_task_config(root_config, task, resolved_path)

    task_logging_override: Dict[str, Any] = {}
    if "logging" in task_config_raw:
        logging_payload = task_config_raw.pop("logging")
        if not isinstance(logging_payload, Mapping):
            raise ValueError(
                f"Task '{task}' logging section must be a mapping in {resolved_path}"
            )
        task_logging_override = dict(logging_payload)
        invalid_logging_keys = [
            key for key in task_logging_override if key not in LOGGING_ALLOWED_KEYS
        ]
        if invalid_logging_keys:
            invalid_keys = ", ".join(sorted(invalid_logging_keys))
            raise ValueError(
                f"Task '{task}' logging section contains unsupported keys in {resolved_path}: {invalid_keys}"
            )

    config = _apply_aliases(task_config_raw)

    allowed_keys = TASK_SCHEMAS[task]
    unexpected = [key for key in config if key not in allowed_keys]
    if unexpected:
        raise ValueError(
            f"Configuration '{resolved_path}' contains unsupported keys for task '{task}': {', '.join(sorted(unexpected))}"
        )

    normalized: ConfigDict = {}
    for key, value in config.items():
        if value is None:
            continue
        if key in SINGLE_PATH_FIELDS:
            normalized[key] = _normalize_single_path(value, resolved_path)
        elif key in MULTI_PATH_FIELDS:
            normalized[key] = _normalize_multi_path(value)
        elif key in BOOLEAN_FIELDS:
            normalized[key] = _coerce_yes_no(value, key, resolved_path)
        elif key in INTEGER_FIELDS:
            normalized[key] = _coerce_int(value, key, resolved_path)
        elif key in STRING_FIELDS:
            normalized[key] = str(value)
        else:
            normalized[key] = value

    normalized["__task__"] = task
    normalized["__config_path__"] = str(resolved_path)

    merged_logging = _extract_logging_settings(root_config)
    merged_logging.update(task_logging_override)
    merged_logging = _apply_logging_defaults(merged_logging, resolved_path)
    if merged_logging:
        normalized["__logging__"] = merged_logging
    return normalized


def _apply_aliases(config: Mapping[str, Any]) -> ConfigDict:
    result: ConfigDict = {}
    for key, value in config.items():
        canonical = FIELD_ALIASES.get(key, key)
        result[canonical] = value
    return result


def _normalize_single_path(value: Any, config_path: Path) -> str:
    candidate = Path(str(value)).expanduser()
    if not candidate.is_absolute():
        candidate = config_path.parent / candidate
    return str(candidate.resolve())


def _normalize_multi_path(value: Any) -> list[str]:
    if isinstance(value, (list, tuple, set)):
        values = list(value)
    else:
        values = [value]
    if not values:
        raise ValueError("Expected at least one path entry")
    # Roots are glob patterns; only "~" is expanded here.
    return [str(Path(str(item)).expanduser()) if str(item).startswith("~") else str(item) for item in values]


def _coerce_int(value: Any, field: str, config_path: Path) -> int:
    if isinstance(value, bool):
        raise ValueError(
            f"Configuration '{config_path}' field '{field}' must be an integer."
        )
    try:
        return int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Configuration '{config_path}' field '{field}' must be an integer."
        ) from exc


def _coerce_yes_no(value: object, key: str, config_path: Path) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in YES_VALUES:
        return True
    if text in NO_VALUES:
        return False
    raise ValueError(
        f"Configuration '{config_path}' field '{key}' must be a boolean (true/false, yes/no)."
    )


def _resolve_config_path(config_path: str | Path | None) -> Optional[Path]:
    if config_path:
        return Path(config_path).expanduser()
    return default_config_path()


def _extract_task_config(root: Mapping[str, Any], task: str, config_path: Path) -> ConfigDict:
    if TASKS_SECTION_KEY not in root:
        return {}
    tasks_section = root.get(TASKS_SECTION_KEY) or {}
    if not isinstance(tasks_section, Mapping):
        raise ValueError(f"'tasks' section must be a mapping in {config_path}")
    task_payload = tasks_section.get(task) or {}
    if not isinstance(task_payload, Mapping):
        raise ValueError(f"Task '{task}' entry must be a mapping in {config_path}")
    return dict(task_payload)


def _extract_logging_settings(root: Mapping[str, Any]) -> Dict[str, Any]:
    section = root.get(LOGGING_SECTION_KEY, {})
    return dict(section) if isinstance(section, Mapping) else {}


def _apply_logging_defaults(logging_cfg: Dict[str, Any], config_path: Path) -> Dict[str, Any]:
    cfg = {key: value for key, value in logging_cfg.items() if value is not None}
    log_dir_value = cfg.get("log_dir")
    if log_dir_value:
        path = Path(str(log_dir_value)).expanduser()
        if not path.is_absolute():
            path = config_path.parent / path
        cfg["log_dir"] = str(path.resolve())
    return cfg


def merge_overrides(config: Mapping[str, Any], overrides: Mapping[str, Any]) -> ConfigDict:
    """Overlay non-None values (typically parsed CLI flags) onto a task config."""
    merged: ConfigDict = dict(config)
    for key, value in overrides.items():
        if value is None:
            continue
        merged[key] = value
    return merged
