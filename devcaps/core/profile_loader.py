"""Device profile loading: YAML documents validated against a packaged JSON Schema."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from devcaps.core.errors import ProfileLoadError, ProfileValidationError
from devcaps.core.model import DeviceProfile, RangeSpec

_PROFILE_SUFFIXES = (".yml", ".yaml")
LOGGER = logging.getLogger(__name__)


class ProfileYamlLoader(yaml.SafeLoader):
    """Safe loader that rejects duplicate keys and keeps on/off/yes/no as strings.

    Instance and mode names such as `on` must not turn into booleans.
    """

    yaml_implicit_resolvers = {
        first_char: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:bool"]
        for first_char, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
    }

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise ProfileValidationError(f"Duplicate key '{key}' in YAML document")
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


@dataclass(frozen=True)
class LoadedProfiles:
    profiles: dict[str, DeviceProfile]
    warnings: tuple[str, ...]


@lru_cache(maxsize=1)
def _schema_validator() -> Any:
    schema = json.loads(
        resources.files("devcaps.schemas").joinpath("profile.schema.json").read_text(encoding="utf-8")
    )
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _user_profile_dirs() -> tuple[Path, Path]:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_config / "devcaps/profiles", xdg_data / "devcaps/profiles"


def _profile_sources() -> Iterator[tuple[Path | Traversable, bool]]:
    """Yield `(source, is_user)` in precedence order, lowest first."""
    packaged = resources.files("devcaps.profiles")
    for item in sorted(packaged.iterdir(), key=lambda p: p.name):
        if item.name.endswith(_PROFILE_SUFFIXES):
            yield item, False
    for directory in _user_profile_dirs():
        if not directory.is_dir():
            continue
        for path in sorted(directory.iterdir()):
            if path.suffix in _PROFILE_SUFFIXES:
                yield path, True


def _read_document(source: Path | Traversable) -> dict[str, Any]:
    try:
        content = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ProfileLoadError(f"Could not read profile file {source}: {exc}") from exc

    try:
        doc = yaml.load(content, Loader=ProfileYamlLoader)
    except yaml.YAMLError as exc:
        raise ProfileValidationError(f"Invalid YAML in {source}: {exc}") from exc

    if not isinstance(doc, dict):
        raise ProfileValidationError(f"Profile file {source} must contain a mapping at root")

    try:
        _schema_validator().validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ProfileValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc
    return doc


def _build_profile(doc: dict[str, Any]) -> DeviceProfile:
    capabilities = doc["capabilities"]
    range_doc = capabilities.get("range") or {}
    instances = tuple(name.strip() for name in range_doc.get("instances", []))
    if any(not name for name in instances):
        raise ProfileValidationError(f"{doc['id']}.capabilities.range.instances must not contain blank names")

    return DeviceProfile(
        id=doc["id"],
        name=doc["name"],
        device_id=doc["device_id"].strip(),
        capabilities=tuple(capabilities),
        range=RangeSpec(instances=instances),
        default_cause=doc.get("events", {}).get("cause"),
    )


def load_profiles() -> LoadedProfiles:
    """Load packaged profiles, then user profiles, which replace earlier ones by id."""
    profiles: dict[str, DeviceProfile] = {}
    warnings: list[str] = []

    for source, is_user in _profile_sources():
        profile = _build_profile(_read_document(source))
        if is_user and profile.id in profiles:
            warning = f"User profile '{profile.id}' from {source} overrides an earlier profile"
            LOGGER.warning(warning)
            warnings.append(warning)
        profiles[profile.id] = profile

    return LoadedProfiles(profiles=profiles, warnings=tuple(warnings))
