"""
Manifest Loader — Parse icon-manifest.json into IconRecord objects.

The manifest is authored by the curation tooling and is read-only here:
the deployer never writes it back. Expected shape:

    {
      "icons": [
        {
          "id": "account",
          "name": "Account",
          "description": "Account entity icon",
          "category": "entity",
          "usageType": "entity",
          "entityLogicalName": "account",
          "webResourceName": "contoso_/icons/entity/account.svg",
          "fluentComponent": "Building24Regular",
          "localPath": "entity/account.svg",
          "status": "Approved"
        }
      ]
    }

FUNCTIONS:
    load_manifest()     - Read and validate the manifest, preserving order
    entity_icons()      - Records the entity binder should process
    navigation_icons()  - Records that are referenced from the sitemap
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .exceptions import ManifestNotFound, ManifestParseError

# category and status are informational; only usageType drives processing
USAGE_TYPES = {"entity", "navigation", "command", "status"}

REQUIRED_FIELDS = ("webResourceName", "localPath", "usageType")

# Values that end up in URLs, OData literals or file paths
STRING_FIELDS = REQUIRED_FIELDS + ("entityLogicalName",)


@dataclass(frozen=True)
class IconRecord:
    """One SVG asset as described by the manifest."""

    id: str
    name: str
    description: str
    category: str
    usage_type: str
    web_resource_name: str
    local_path: str
    fluent_component: str = ""
    status: str = "Draft"
    entity_logical_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IconRecord":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            category=str(data.get("category", "")),
            usage_type=str(data["usageType"]),
            web_resource_name=str(data["webResourceName"]),
            local_path=str(data["localPath"]),
            fluent_component=str(data.get("fluentComponent", "")),
            status=str(data.get("status", "Draft")),
            entity_logical_name=data.get("entityLogicalName") or None,
        )

    @property
    def display_name(self) -> str:
        return self.name or self.web_resource_name

    @property
    def is_entity_icon(self) -> bool:
        return self.usage_type == "entity" and bool(self.entity_logical_name)

    @property
    def is_navigation_icon(self) -> bool:
        return self.usage_type == "navigation"


def load_manifest(path) -> List[IconRecord]:
    """
    Load the icon manifest at ``path``.

    Raises:
        ManifestNotFound: The file does not exist.
        ManifestParseError: Invalid JSON or UTF-8, no "icons" array, a record
            missing a required field, a non-string usageType, webResourceName,
            localPath or entityLogicalName, or an unknown usageType.
    """
    manifest_path = Path(path)
    if not manifest_path.is_file():
        raise ManifestNotFound(f"Manifest not found: {manifest_path}")

    try:
        with open(manifest_path, "r", encoding="utf-8-sig") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ManifestParseError(f"Invalid JSON in {manifest_path}: {e}") from e

    icons = data.get("icons") if isinstance(data, dict) else None
    if not isinstance(icons, list):
        raise ManifestParseError(f"{manifest_path}: expected a top-level 'icons' array")

    records = []
    for index, entry in enumerate(icons):
        if not isinstance(entry, dict):
            raise ManifestParseError(f"icons[{index}] is not an object")

        missing = [f for f in REQUIRED_FIELDS if not entry.get(f)]
        if missing:
            raise ManifestParseError(
                f"icons[{index}] ({entry.get('id', '?')}) is missing: {', '.join(missing)}"
            )

        not_text = [f for f in STRING_FIELDS if f in entry and entry[f] is not None
                    and not isinstance(entry[f], str)]
        if not_text:
            raise ManifestParseError(
                f"icons[{index}] ({entry.get('id', '?')}) must be strings: {', '.join(not_text)}"
            )

        if entry["usageType"] not in USAGE_TYPES:
            raise ManifestParseError(
                f"icons[{index}] ({entry.get('id', '?')}) has unknown usageType "
                f"'{entry['usageType']}'"
            )

        records.append(IconRecord.from_dict(entry))

    return records


def entity_icons(records: List[IconRecord]) -> List[IconRecord]:
    """Records with usageType 'entity' and a non-empty entityLogicalName."""
    return [r for r in records if r.is_entity_icon]


def navigation_icons(records: List[IconRecord]) -> List[IconRecord]:
    return [r for r in records if r.is_navigation_icon]
