from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_STORAGE_PATH = "data/articles.json"
DEFAULT_STORAGE_LIMIT = 1000
STORAGE_TYPES = {"disk", "s3"}


class ConfigError(ValueError):
    """Raised when configuration is invalid."""


@dataclass(slots=True)
class SourceSettings:
    id: str
    type: str
    url: str
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class StorageSettings:
    type: str = "disk"
    path: str = DEFAULT_STORAGE_PATH
    bucket: str | None = None
    key: str = "articles.json"
    limit: int = DEFAULT_STORAGE_LIMIT


@dataclass(slots=True)
class AppConfig:
    sources: list[SourceSettings]
    storage: StorageSettings = field(default_factory=StorageSettings)
    log_level: str = "INFO"


def _as_int(value: Any, *, field_name: str, minimum: int | None = None) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{field_name} must be an integer")

    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{field_name} must be an integer") from exc

    if minimum is not None and parsed < minimum:
        raise ConfigError(f"{field_name} must be >= {minimum}")
    return parsed


def _resolve_relative_path(config_path: Path, raw_path: str) -> str:
    candidate = Path(raw_path).expanduser()
    if candidate.is_absolute():
        return str(candidate)
    return str((config_path.parent / candidate).resolve())


def _parse_sources(raw_sources: Any) -> list[SourceSettings]:
    if not isinstance(raw_sources, list) or not raw_sources:
        raise ConfigError("Config must define at least one source")

    sources: list[SourceSettings] = []
    for index, source in enumerate(raw_sources, start=1):
        if not isinstance(source, dict):
            raise ConfigError(f"Source entry #{index} must be a mapping")

        source_id = str(source.get("id", "")).strip()
        source_type = str(source.get("type", "html_listing")).strip()
        source_url = str(source.get("url", "")).strip()
        if not source_id or not source_type or not source_url:
            raise ConfigError(f"Source entry #{index} missing one of: id, type, url")

        options = {
            key: value
            for key, value in source.items()
            if key not in {"id", "type", "url"}
        }
        if "timeout_seconds" in options:
            options["timeout_seconds"] = _as_int(
                options["timeout_seconds"],
                field_name=f"sources[{source_id}].timeout_seconds",
                minimum=1,
            )
        if "min_articles" in options:
            options["min_articles"] = _as_int(
                options["min_articles"],
                field_name=f"sources[{source_id}].min_articles",
                minimum=0,
            )
        if "title_selectors" in options:
            selectors = options["title_selectors"]
            if isinstance(selectors, str):
                selectors = [selectors]
            if not isinstance(selectors, list) or not selectors:
                raise ConfigError(
                    f"sources[{source_id}].title_selectors must be a non-empty list"
                )
            options["title_selectors"] = [str(item).strip() for item in selectors if str(item).strip()]

        sources.append(
            SourceSettings(
                id=source_id,
                type=source_type,
                url=source_url,
                options=options,
            )
        )

    seen_ids = [source.id for source in sources]
    duplicates = sorted({source_id for source_id in seen_ids if seen_ids.count(source_id) > 1})
    if duplicates:
        raise ConfigError(f"Duplicate source ids: {', '.join(duplicates)}")

    return sources


def _parse_storage(raw_storage: Any, *, config_path: Path) -> StorageSettings:
    if not isinstance(raw_storage, dict):
        raise ConfigError("storage must be a mapping")

    storage_type = str(raw_storage.get("type", "disk")).strip().lower() or "disk"
    if storage_type not in STORAGE_TYPES:
        available = ", ".join(sorted(STORAGE_TYPES))
        raise ConfigError(f"Unsupported storage type: {storage_type} (expected one of: {available})")

    limit = _as_int(
        raw_storage.get("limit", DEFAULT_STORAGE_LIMIT),
        field_name="storage.limit",
        minimum=0,
    )

    bucket_raw = raw_storage.get("bucket")
    bucket = str(bucket_raw).strip() if bucket_raw is not None else None
    key = str(raw_storage.get("key", "articles.json")).strip() or "articles.json"
    if storage_type == "s3" and not bucket:
        raise ConfigError("storage.bucket is required for s3 storage")

    storage_path = str(raw_storage.get("path", DEFAULT_STORAGE_PATH)).strip() or DEFAULT_STORAGE_PATH

    return StorageSettings(
        type=storage_type,
        path=_resolve_relative_path(config_path, storage_path),
        bucket=bucket or None,
        key=key,
        limit=limit,
    )


def load_config(path: str | Path) -> AppConfig:
    config_path = Path(path).expanduser().resolve()
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            parsed = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Config file is not valid YAML: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ConfigError("Config root must be a mapping")

    sources = _parse_sources(parsed.get("sources", []))
    storage = _parse_storage(parsed.get("storage", {}) or {}, config_path=config_path)

    return AppConfig(
        sources=sources,
        storage=storage,
        log_level=str(parsed.get("log_level", "INFO")).upper(),
    )
