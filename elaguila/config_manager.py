"""Layered configuration loader and maintenance CLI for El Águila."""
from __future__ import annotations

import argparse
import json
import os
import shutil
import sys
import tempfile
import tomllib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, MutableMapping, Optional, Sequence

import tomli_w
from dotenv import dotenv_values
from pydantic import ValidationError

from elaguila.config_schema import DEFAULT_CONFIG, Config, iter_field_docs

DEFAULT_ENV_PREFIX = "ELAGUILA"
DEFAULT_CONFIG_FILENAME = "config.toml"
DEFAULT_ENV_FILENAME = ".env"
BACKUP_DIRNAME = "backups"
MASK = "***masked***"
_SECRET_MARKERS = ("password", "secret", "token", "key", "private")


@dataclass(frozen=True)
class ConfigValueOrigin:
    """Where a single configuration value came from."""

    layer: str
    source: str
    env_var: str | None = None

    def render(self) -> str:
        details = [item for item in (self.env_var, self.source) if item]
        if not details:
            return self.layer
        return f"{self.layer} ({', '.join(details)})"


@dataclass
class ConfigMetadata:
    """Paths and per-key provenance attached to a loaded :class:`Config`."""

    config_path: Path
    env_path: Optional[Path]
    env_prefix: str
    provenance: Dict[str, ConfigValueOrigin] = field(default_factory=dict)
    load_order: tuple[str, ...] = ("defaults", "file", "env-file", "env")

    def describe_sources(self) -> list[str]:
        env_file = str(self.env_path) if self.env_path else "not found"
        return [
            "defaults: elaguila.config_schema",
            f"config file: {self.config_path}",
            f".env file: {env_file}",
            f"environment prefix: {self.env_prefix}__*",
        ]


class ConfigError(RuntimeError):
    """Raised when configuration loading or validation fails."""


def _project_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _default_config_path() -> Path:
    return _project_root() / DEFAULT_CONFIG_FILENAME


def _is_secret(path: str) -> bool:
    lowered = path.lower()
    return any(marker in lowered for marker in _SECRET_MARKERS)


def _copy_tree(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        key: _copy_tree(value) if isinstance(value, Mapping) else value
        for key, value in mapping.items()
    }


def _flatten(mapping: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    flat: Dict[str, Any] = {}
    for key, value in mapping.items():
        dotted = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(_flatten(value, dotted))
        else:
            flat[dotted] = value
    return flat


def _set_dotted(target: MutableMapping[str, Any], dotted: str, value: Any) -> None:
    *parents, leaf = dotted.split(".")
    node = target
    for segment in parents:
        child = node.get(segment)
        if not isinstance(child, MutableMapping):
            child = {}
            node[segment] = child
        node = child
    node[leaf] = value


def _get_dotted(mapping: Mapping[str, Any], dotted: str) -> Any:
    node: Any = mapping
    for segment in dotted.split("."):
        if not isinstance(node, Mapping) or segment not in node:
            raise ConfigError(f"Unknown configuration key: {dotted}")
        node = node[segment]
    return node


def _coerce_text(raw: str) -> Any:
    """Turn an env or CLI string into the closest TOML-like scalar."""

    text = raw.strip()
    lowered = text.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if lowered in {"null", "none"}:
        return None
    for caster in (int, float):
        try:
            return caster(text)
        except ValueError:
            continue
    if text[:1] in {"[", "{"}:
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return text
    return text


def _env_key_to_path(name: str, prefix: str) -> str | None:
    marker = prefix + "__"
    if not name.startswith(marker):
        return None
    segments = [segment.lower() for segment in name[len(marker):].split("__") if segment]
    return ".".join(segments) or None


def _apply_mapping(
    merged: MutableMapping[str, Any],
    data: Mapping[str, Any],
    provenance: Dict[str, ConfigValueOrigin],
    origin: ConfigValueOrigin,
) -> None:
    for dotted, value in _flatten(data).items():
        _set_dotted(merged, dotted, value)
        provenance[dotted] = origin


def _apply_env(
    merged: MutableMapping[str, Any],
    variables: Iterable[tuple[str, str]],
    provenance: Dict[str, ConfigValueOrigin],
    *,
    prefix: str,
    layer: str,
    source: str,
) -> None:
    for name, raw_value in variables:
        dotted = _env_key_to_path(name, prefix)
        if dotted is None:
            continue
        _set_dotted(merged, dotted, _coerce_text(raw_value))
        provenance[dotted] = ConfigValueOrigin(layer=layer, source=source, env_var=name)


def _read_toml(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, OSError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _validation_error(
    error: ValidationError, provenance: Mapping[str, ConfigValueOrigin]
) -> ConfigError:
    lines: list[str] = []
    for record in error.errors():
        location = ".".join(str(part) for part in record.get("loc", ())) or "<root>"
        message = record.get("msg", "invalid value")
        received = record.get("input")
        if received is not None and not _is_secret(location) and not isinstance(received, Mapping):
            message += f" (received={received!r})"
        origin = provenance.get(location)
        if origin:
            message += f" [{origin.render()}]"
        lines.append(f"{location}: {message}")
    return ConfigError("Configuration validation failed:\n - " + "\n - ".join(lines))


def load_config(
    path: Path | None = None,
    *,
    env_prefix: str = DEFAULT_ENV_PREFIX,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Build a :class:`Config` from defaults, ``config.toml``, ``.env`` and the process env.

    Later layers win. Every leaf key remembers which layer set it so that
    ``--explain`` and validation errors can point at the culprit.
    """

    config_path = Path(path) if path else _default_config_path()
    env_path = config_path.parent / DEFAULT_ENV_FILENAME
    runtime_env = os.environ if environ is None else environ

    merged = _copy_tree(DEFAULT_CONFIG.model_dump(mode="python"))
    provenance: Dict[str, ConfigValueOrigin] = {}
    _apply_mapping(
        merged,
        merged,
        provenance,
        ConfigValueOrigin(layer="defaults", source="elaguila.config_schema"),
    )
    _apply_mapping(
        merged,
        _read_toml(config_path),
        provenance,
        ConfigValueOrigin(layer="file", source=str(config_path)),
    )
    if env_path.exists():
        file_vars = dotenv_values(env_path)
        _apply_env(
            merged,
            ((name, value) for name, value in file_vars.items() if value is not None),
            provenance,
            prefix=env_prefix,
            layer="env-file",
            source=str(env_path),
        )
    _apply_env(
        merged,
        runtime_env.items(),
        provenance,
        prefix=env_prefix,
        layer="env",
        source="process",
    )

    try:
        config = Config.model_validate(merged)
    except ValidationError as exc:
        raise _validation_error(exc, provenance) from exc
    config._metadata = ConfigMetadata(
        config_path=config_path,
        env_path=env_path if env_path.exists() else None,
        env_prefix=env_prefix,
        provenance=provenance,
    )
    return config


def _to_toml_payload(value: Any) -> Any:
    if isinstance(value, Config):
        return _to_toml_payload(value.model_dump(mode="python"))
    if isinstance(value, Mapping):
        # TOML has no null; unset optionals are omitted and fall back to defaults.
        return {
            key: _to_toml_payload(item) for key, item in value.items() if item is not None
        }
    if isinstance(value, list):
        return [_to_toml_payload(item) for item in value]
    if isinstance(value, Path):
        return str(value)
    return value


def save_config(config: Config, path: Path | None = None) -> Path:
    """Write ``config`` as TOML atomically, backing up the previous file."""

    metadata: ConfigMetadata | None = getattr(config, "_metadata", None)
    target = Path(path) if path else (metadata.config_path if metadata else _default_config_path())
    target.parent.mkdir(parents=True, exist_ok=True)
    handle = tempfile.NamedTemporaryFile(
        prefix=".elaguila-config-", dir=str(target.parent), delete=False
    )
    tmp_path = Path(handle.name)
    try:
        with handle:
            tomli_w.dump(_to_toml_payload(config), handle)
        if target.exists():
            stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
            backups = target.parent / BACKUP_DIRNAME
            backups.mkdir(parents=True, exist_ok=True)
            shutil.copy2(target, backups / f"{target.name}.{stamp}.bak")
        os.replace(tmp_path, target)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise ConfigError(f"Failed to persist configuration: {exc}") from exc
    return target


def _render(key: str, value: Any) -> str:
    if _is_secret(key) and value not in (None, ""):
        return MASK
    if isinstance(value, Path):
        return str(value)
    try:
        return json.dumps(value, ensure_ascii=False)
    except TypeError:
        return repr(value)


def diff_configs(before: Config, after: Config) -> list[str]:
    """Return ``key: old -> new`` lines for every changed leaf, secrets masked."""

    old = _flatten(before.model_dump(mode="python"))
    new = _flatten(after.model_dump(mode="python"))
    return [
        f"{key}: {_render(key, old.get(key))} -> {_render(key, new.get(key))}"
        for key in sorted(set(old) | set(new))
        if old.get(key) != new.get(key)
    ]


def schema_table() -> str:
    """Render every schema field as a Markdown table."""

    rows = ["| Field | Type | Default | Description |", "| --- | --- | --- | --- |"]
    for entry in iter_field_docs(DEFAULT_CONFIG):
        if entry["is_nested"]:
            continue
        default = "" if entry["default"] is None else _render(entry["name"], entry["default"])
        rows.append(
            f"| {entry['name']} | {entry['type']} | {default} | {entry['description']} |"
        )
    return "\n".join(rows)


def explain(config: Config, key: str) -> str:
    metadata: ConfigMetadata | None = getattr(config, "_metadata", None)
    if metadata is None:
        raise ConfigError("Configuration metadata is unavailable")
    value = _get_dotted(config.model_dump(mode="python"), key)
    origin = metadata.provenance.get(key)
    return f"{key} = {_render(key, value)}\nsource: {origin.render() if origin else 'unknown'}"


def apply_updates(config: Config, updates: Mapping[str, str]) -> Config:
    """Return a validated copy of ``config`` with dotted ``updates`` applied."""

    current = config.model_dump(mode="python")
    known = set(_flatten(current))
    updated = _copy_tree(current)
    metadata: ConfigMetadata | None = getattr(config, "_metadata", None)
    provenance = dict(metadata.provenance) if metadata else {}
    for key, raw in updates.items():
        if key not in known:
            raise ConfigError(f"Unknown configuration key: {key}")
        _set_dotted(updated, key, _coerce_text(raw))
        provenance[key] = ConfigValueOrigin(layer="cli", source="--set")
    try:
        result = Config.model_validate(updated)
    except ValidationError as exc:
        raise _validation_error(exc, provenance) from exc
    if metadata:
        result._metadata = ConfigMetadata(
            config_path=metadata.config_path,
            env_path=metadata.env_path,
            env_prefix=metadata.env_prefix,
            provenance=provenance,
        )
    return result


def _parse_assignments(items: Sequence[str]) -> Dict[str, str]:
    updates: Dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ConfigError(f"Invalid --set argument: '{item}'")
        updates[key.strip()] = value
    return updates


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="El Águila configuration utilities")
    parser.add_argument("--config", type=Path, help="Path to the TOML configuration file")
    parser.add_argument(
        "--env-prefix",
        default=DEFAULT_ENV_PREFIX,
        help="Environment variable prefix (e.g. ELAGUILA__NEWS__MAX_ITEMS)",
    )
    actions = parser.add_mutually_exclusive_group(required=True)
    actions.add_argument("--validate", action="store_true", help="Validate the active configuration")
    actions.add_argument("--dump-defaults", action="store_true", help="Print built-in defaults as TOML")
    actions.add_argument("--print-schema", action="store_true", help="Print a Markdown table of all fields")
    actions.add_argument("--show-sources", action="store_true", help="Show configuration source precedence")
    actions.add_argument("--explain", metavar="KEY", help="Explain where a field value originates")
    actions.add_argument("--set", nargs="+", metavar="KEY=VALUE", help="Validate and persist updates")
    args = parser.parse_args(argv)

    try:
        if args.dump_defaults:
            sys.stdout.write(tomli_w.dumps(_to_toml_payload(DEFAULT_CONFIG)))
            return 0
        if args.print_schema:
            print(schema_table())
            return 0

        config = load_config(args.config, env_prefix=args.env_prefix)
        if args.validate:
            print("Configuration OK")
        elif args.show_sources:
            print("Active configuration sources:")
            for line in config._metadata.describe_sources():
                print(f"- {line}")
        elif args.explain:
            print(explain(config, args.explain))
        elif args.set:
            updated = apply_updates(config, _parse_assignments(args.set))
            saved = save_config(updated, args.config)
            for line in diff_configs(config, updated):
                print(line)
            print(f"Saved configuration to {saved}")
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI entry point
    raise SystemExit(main())
