"""Prepper-backed configuration loader for Treelingo."""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Mapping, Sequence

from dotenv import dotenv_values
from prepper import (
    Field,
    IoError,
    SchemaError,
    SchemaModel,
    ValidationError,
    model_validator,
)
from prepper.config import ConfigInstance
from prepper.loaders import _parse_file, _path_to_source, discover_file_paths
from prepper.merge import merge_layer
from prepper.provenance import ProvenanceRecorder

from .errors import CatalogConfigurationError

APP_NAME = "Treelingo"

CATALOG_SEPARATOR_PATTERN = re.compile(rf"[,{re.escape(os.pathsep)}]")


class TreelingoConfig(SchemaModel):
    """Schema describing all supported configuration options."""

    TREELINGO_CATALOGS: str | None = Field(
        default=None,
        description="Translation catalogs checked in priority order.",
    )
    TREELINGO_PO_DIRECTORY: str | None = Field(
        default=None,
        description="Directory holding <language>.po catalogs.",
    )
    TREELINGO_LANGUAGE: str | None = Field(
        default=None,
        description="Target language code, e.g. ja or pt_BR.",
    )
    TREELINGO_OUTPUT: str | None = Field(
        default=None,
        description="Catalog receiving untranslated strings.",
    )
    TREELINGO_VERBOSE: bool = Field(default=False)
    TREELINGO_DEBUG: bool = Field(default=False)

    @model_validator(mode="before")
    def _normalise_language(data: Any) -> Any:
        if isinstance(data, dict):
            raw_value = data.get("TREELINGO_LANGUAGE")
            if isinstance(raw_value, str):
                data["TREELINGO_LANGUAGE"] = normalise_language(raw_value)
        return data


def normalise_language(value: str) -> str | None:
    """Normalise a language tag to gettext style (``pt-BR`` -> ``pt_BR``)."""

    normalized = value.strip().replace("-", "_")
    return normalized or None


def split_catalog_paths(value: str | None) -> List[str]:
    """Split a catalog list on commas or the platform path separator."""

    if not value:
        return []
    return [part.strip() for part in CATALOG_SEPARATOR_PATTERN.split(value) if part.strip()]


@lru_cache(maxsize=1)
def _load_config_instance(app_dir: Path | None = None) -> ConfigInstance:
    """Load configuration layers once and cache the immutable instance."""

    base_dir = app_dir or Path.cwd()
    try:
        provenance = ProvenanceRecorder()
        combined = _load_discovered_yaml(app_dir=base_dir, provenance=provenance)
        _merge_env_sources(
            combined,
            provenance=provenance,
            app_dir=base_dir,
            schema=TreelingoConfig,
        )

        model = TreelingoConfig.validate(combined, provenance=provenance)
        _validate_catalog_settings(model)

        return ConfigInstance(
            model=model,
            provenance=provenance,
            env_prefix=None,
            schema_cls=TreelingoConfig,
        )
    except IoError as exc:
        raise CatalogConfigurationError(
            f"Configuration files could not be read: {exc}"
        ) from exc
    except SchemaError as exc:
        raise CatalogConfigurationError(
            f"Configuration schema error: {exc}"
        ) from exc
    except ValidationError as exc:
        issues = _format_validation_errors(exc.to_dict())
        raise CatalogConfigurationError(issues) from exc


def _load_discovered_yaml(
    *,
    app_dir: Path,
    provenance: ProvenanceRecorder,
) -> dict[str, Any]:
    """Load YAML configuration files using Prepper's discovery rules."""

    result: dict[str, Any] = {}
    discovered = discover_file_paths(
        APP_NAME,
        "yaml",
        app_dir=app_dir,
        extra_paths=None,
    )
    for path, label in discovered:
        parsed = _parse_file(path, "yaml")
        if not isinstance(parsed, Mapping):
            raise IoError(
                f"Invalid configuration file {path}: expected a mapping at the root."
            )
        source = _path_to_source(label, "yaml", path)
        merge_layer(result, parsed, provenance=provenance, source=source, layer="file")
    return result


def _merge_env_sources(
    target: dict[str, Any],
    *,
    provenance: ProvenanceRecorder,
    app_dir: Path,
    schema: type[SchemaModel],
) -> None:
    """Merge .env and process environment variables into the target mapping."""

    allowed = set(schema.__field_infos__.keys())

    def merge_values(values: Mapping[str, str], *, source_prefix: str) -> None:
        for key, value in sorted(values.items()):
            if key not in allowed:
                continue
            merge_layer(
                target,
                {key: value},
                provenance=provenance,
                source=f"env:{source_prefix}:{key}",
                layer="env",
            )

    dotenv_path = app_dir / ".env"
    if dotenv_path.exists():
        dotenv_content = dotenv_values(dotenv_path)
        merge_values(
            {k: v for k, v in dotenv_content.items() if v is not None},
            source_prefix=".env",
        )

    merge_values(
        {k: v for k, v in os.environ.items() if isinstance(v, str)},
        source_prefix="process",
    )


def _validate_catalog_settings(settings: Any) -> None:
    errors: list[str] = []

    if settings.TREELINGO_PO_DIRECTORY and not settings.TREELINGO_LANGUAGE:
        errors.append(
            "TREELINGO_LANGUAGE is required when TREELINGO_PO_DIRECTORY is set."
        )
    if settings.TREELINGO_CATALOGS is not None and not split_catalog_paths(
        settings.TREELINGO_CATALOGS
    ):
        errors.append("TREELINGO_CATALOGS must name at least one catalog file.")

    if errors:
        bullet_list = "\n".join(f"- {message}" for message in errors)
        raise CatalogConfigurationError(
            "Configuration validation errors detected:\n" + bullet_list
        )


def _format_validation_errors(entries: Sequence[dict[str, Any]]) -> str:
    details: list[str] = []
    for entry in entries:
        path = entry.get("path") or []
        if isinstance(path, (list, tuple)):
            location = ".".join(str(part) for part in path if part not in {None, ""})
        else:
            location = str(path)
        message = str(entry.get("message") or entry.get("msg") or "Invalid value")
        source = entry.get("source")
        origin = f" (source: {source})" if source else ""
        prefix = f"{location}: " if location else ""
        details.append(f"- {prefix}{message}{origin}")
    return "Configuration validation errors detected:\n" + "\n".join(details)


def get_config(app_dir: Path | None = None) -> ConfigInstance:
    """Return the immutable configuration instance."""

    return _load_config_instance(app_dir=app_dir)


def get_settings(app_dir: Path | None = None) -> TreelingoConfig:
    """Return the validated schema model for typed access."""

    return get_config(app_dir=app_dir).model()
