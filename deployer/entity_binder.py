"""
Entity Binder — Point entity icon slots at the uploaded web resources.

Entity metadata only supports full replacement (PUT), so the current
definition is fetched, the four icon slots are overwritten and the whole
definition is sent back with MSCRM.MergeLabels: true.

The PUT body is a superset of the minimal icon update
{"@odata.type", IconSmallName, IconMediumName, IconLargeName, IconVectorName}:
those five keys are always present, and every other property comes from the
GET so the replacement leaves the rest of the entity unchanged. This costs one
extra GET per entity.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

import requests

from .manifest import IconRecord, entity_icons

ENTITY_METADATA_TYPE = "Microsoft.Dynamics.CRM.EntityMetadata"
ICON_SLOTS = ("IconSmallName", "IconMediumName", "IconLargeName", "IconVectorName")


@dataclass
class BindResult:
    associated: int = 0
    failed: int = 0
    errors: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return self.associated + self.failed


def build_icon_metadata(current: dict, web_resource_name: str) -> dict:
    """Return ``current`` entity metadata with every icon slot set."""
    metadata = {k: v for k, v in current.items() if not k.startswith("@odata.")}
    metadata["@odata.type"] = ENTITY_METADATA_TYPE
    for slot in ICON_SLOTS:
        metadata[slot] = web_resource_name
    return metadata


class EntityBinder:
    """Associates entity icons with their entities, one entity at a time."""

    def __init__(self, client, debug: bool = False):
        self.client = client
        self.debug = debug

    def bind(self, records: List[IconRecord]) -> BindResult:
        """Set the icon slots of every entity icon's entity.

        Records without usageType 'entity' or without an entityLogicalName
        are ignored. A failing entity is recorded and the next one is tried.

        Args:
            records: Manifest records, in manifest order.

        Returns:
            BindResult with associated/failed counts and (entity, reason) errors.
        """
        result = BindResult()

        for record in entity_icons(records):
            logical_name = record.entity_logical_name
            try:
                current = self.client.get_entity_definition(logical_name)
                metadata = build_icon_metadata(current, record.web_resource_name)
                self.client.update_entity_definition(logical_name, metadata)
            except requests.RequestException as e:
                result.failed += 1
                result.errors.append((logical_name, str(e)))
                print(f"  Failed  {logical_name}: {e}")
                continue

            result.associated += 1
            print(f"  Bound   {logical_name} -> {record.web_resource_name}")

        return result
