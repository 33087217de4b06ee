"""
Preview — What a deployment would touch, computed without any network call.

Creates and updates are not told apart here since that needs the remote
lookup; only totals per kind are reported.
"""

from dataclasses import dataclass, asdict
from typing import List

from .manifest import IconRecord, entity_icons, navigation_icons
from .synchronizer import resolve_asset_path


@dataclass
class PreviewCounts:
    web_resources: int = 0
    associations: int = 0
    sitemap_refs: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def plan_preview(records: List[IconRecord], icons_root) -> PreviewCounts:
    return PreviewCounts(
        web_resources=sum(1 for r in records if resolve_asset_path(icons_root, r).is_file()),
        associations=len(entity_icons(records)),
        sitemap_refs=len(navigation_icons(records)),
    )


def sitemap_reference(record: IconRecord) -> str:
    """Value for a SiteMap SubArea Icon attribute."""
    return f"$webresource:{record.web_resource_name}"
