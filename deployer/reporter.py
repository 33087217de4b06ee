"""
Reporter — Turn step results into the run summary.

build_summary() produces the "summary" block stored in
deployment_results.json; print_summary() renders the results dict returned by
IconDeploymentOrchestrator.run().
"""

from typing import Dict, List, Optional

from .entity_binder import BindResult
from .synchronizer import SyncCounts


def build_summary(
    sync: SyncCounts,
    bind: BindResult,
    sitemap_refs: List[str],
    published: Optional[bool],
) -> Dict:
    return {
        "created": sync.created,
        "updated": sync.updated,
        "failed": sync.failed,
        "skipped": sync.skipped,
        "associations": bind.associated,
        "association_failures": bind.failed,
        "sitemap_refs": len(sitemap_refs),
        "published": published,
    }


def print_summary(results: Dict):
    """Print a human-readable execution summary."""
    print(f"\n{'='*60}")
    print("DEPLOYMENT PREVIEW" if results.get("dry_run") else "DEPLOYMENT COMPLETE")
    print("="*60)
    print(f"Status: {'SUCCESS' if results.get('success') else 'FAILED'}")

    preview = results.get("preview")
    if preview:
        print(f"Web resources: {preview['web_resources']}")
        print(f"Entity associations: {preview['associations']}")
        print(f"Sitemap references: {preview['sitemap_refs']}")

    summary = results.get("summary")
    if summary:
        print(f"Created: {summary['created']}")
        print(f"Updated: {summary['updated']}")
        print(f"Failed: {summary['failed']}")
        if summary["skipped"]:
            print(f"Skipped (missing asset): {summary['skipped']}")
        print(f"Entity associations: {summary['associations']}"
              f" ({summary['association_failures']} failed)")
        print(f"Sitemap references: {summary['sitemap_refs']}")
        if summary["published"] is False:
            print("Publish: FAILED - publish all customizations manually")

    if results.get("error"):
        print(f"Error: {results['error']}")
