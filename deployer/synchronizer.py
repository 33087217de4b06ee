"""
Resource Synchronizer — Upsert every manifest icon as an SVG web resource.

For each IconRecord, in manifest order:
  1. Resolve localPath against the icons root. Missing files are skipped with
     a MissingAssetWarning and do not count as created, updated or failed.
  2. Base64-encode the SVG and build the web resource descriptor.
  3. Upsert keyed on webResourceName: look the name up, PATCH the existing
     row or POST a new one.

Re-running against an unchanged manifest only produces updates, never
duplicates. A failing record is counted and the batch moves on.
"""

import base64
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from .exceptions import MissingAssetWarning
from .manifest import IconRecord

CREATED = "Created"
UPDATED = "Updated"
FAILED = "Failed"

# webresourcetype option set value for "Vector format (SVG)"
SVG_WEB_RESOURCE_TYPE = 11


@dataclass
class UpsertResult:
    name: str
    outcome: str
    remote_id: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "outcome": self.outcome,
            "remote_id": self.remote_id,
            "reason": self.reason,
        }


@dataclass
class SyncCounts:
    """Running totals for one synchronization pass."""

    created: int = 0
    updated: int = 0
    failed: int = 0
    skipped: int = 0
    results: List[UpsertResult] = field(default_factory=list)

    def add(self, result: UpsertResult) -> None:
        if result.outcome == CREATED:
            self.created += 1
        elif result.outcome == UPDATED:
            self.updated += 1
        else:
            self.failed += 1
        self.results.append(result)


def resolve_asset_path(icons_root, record: IconRecord) -> Path:
    return Path(icons_root) / record.local_path


def build_web_resource_descriptor(
    record: IconRecord, content: bytes, introduced_version: str
) -> Dict[str, Any]:
    """Desired state of the web resource for ``record``."""
    return {
        "name": record.web_resource_name,
        "displayname": record.display_name,
        "description": record.description,
        "webresourcetype": SVG_WEB_RESOURCE_TYPE,
        "content": base64.b64encode(content).decode("ascii"),
        "isenabledformobileclient": True,
        "introducedversion": introduced_version,
    }


def upsert_web_resource(client, name: str, descriptor: Dict[str, Any]) -> UpsertResult:
    """Create the web resource ``name`` if absent, otherwise update it in place.

    Never raises for remote errors: HTTP and transport failures come back as
    a Failed result carrying the reason.

    Args:
        client: Object with find_web_resource_id, create_web_resource and
            update_web_resource (normally a DataverseClient).
        name: Natural key, the webResourceName.
        descriptor: Desired state, as built by build_web_resource_descriptor().

    Returns:
        UpsertResult tagged Created, Updated or Failed.
    """
    try:
        existing_id = client.find_web_resource_id(name)
        if existing_id:
            client.update_web_resource(existing_id, descriptor)
            return UpsertResult(name, UPDATED, remote_id=existing_id)

        new_id = client.create_web_resource(descriptor)
        return UpsertResult(name, CREATED, remote_id=new_id)
    except requests.RequestException as e:
        return UpsertResult(name, FAILED, reason=str(e))


class ResourceSynchronizer:
    """Pushes the SVG files listed in the manifest into the web resource store."""

    def __init__(self, client, icons_root, introduced_version: str = "1.0.0.0", debug: bool = False):
        self.client = client
        self.icons_root = Path(icons_root)
        self.introduced_version = introduced_version
        self.debug = debug

    def sync(self, records: List[IconRecord]) -> SyncCounts:
        """Upsert the web resource of every record whose SVG exists.

        Records are processed one at a time in manifest order. A missing SVG
        issues a MissingAssetWarning and counts as skipped. An unreadable file
        or a failed remote call counts as failed. Neither stops the batch.

        Args:
            records: Manifest records, in manifest order.

        Returns:
            SyncCounts with created/updated/failed/skipped totals and the
            per-record UpsertResults.
        """
        counts = SyncCounts()

        for record in records:
            asset_path = resolve_asset_path(self.icons_root, record)
            if not asset_path.is_file():
                warnings.warn(
                    f"{record.web_resource_name}: asset not found at {asset_path}",
                    MissingAssetWarning,
                    stacklevel=2,
                )
                print(f"  Skipped {record.web_resource_name} (missing {asset_path})")
                counts.skipped += 1
                continue

            try:
                content = asset_path.read_bytes()
            except OSError as e:
                counts.add(UpsertResult(record.web_resource_name, FAILED, reason=str(e)))
                print(f"  Failed  {record.web_resource_name}: {e}")
                continue

            descriptor = build_web_resource_descriptor(record, content, self.introduced_version)
            result = upsert_web_resource(self.client, record.web_resource_name, descriptor)
            counts.add(result)

            if result.outcome == FAILED:
                print(f"  Failed  {record.web_resource_name}: {result.reason}")
            else:
                print(f"  {result.outcome:<7} {record.web_resource_name}")

        return counts
