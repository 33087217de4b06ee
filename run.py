#!/usr/bin/env python3
"""
Dataverse Icon Deployer — Entry Point.

Uploads the SVG icons listed in icon-manifest.json as web resources to a
Dataverse environment, sets entity icons, and publishes customizations.
Configuration comes from a .env file; CLI flags override it.

Usage:
    python run.py --environment-url https://contoso.crm.dynamics.com
    python run.py --dry-run                  # Preview counts, no sign-in
    python run.py --icons-path ./icons       # Override assets root
    python run.py --manifest-path ./m.json   # Override manifest
    python run.py --collection webresourceset
    python run.py --debug                    # Verbose output incl. HTTP traffic
    python run.py --version                  # Show version

Exit codes:
    0  Deployment or preview completed (individual icon failures included)
    1  Invalid configuration, manifest missing/unparsable, or sign-in failed
"""

import sys
import argparse
import logging
from pathlib import Path

from deployer import IconDeploymentOrchestrator

VERSION_FILE = Path(__file__).resolve().parent / "VERSION"
VERSION = VERSION_FILE.read_text().strip() if VERSION_FILE.exists() else "unknown"


def main():
    """Parse CLI arguments and run the deployment."""
    parser = argparse.ArgumentParser(
        description="Dataverse Icon Deployer - Upload SVG icons as web resources"
    )
    parser.add_argument("--env", "-e", default="./.env", help="Path to .env file")
    parser.add_argument("--environment-url", "-u", help="Dataverse environment URL (overrides DATAVERSE_URL)")
    parser.add_argument("--collection", help="Web resource entity set (default: webresourceset)")
    parser.add_argument("--icons-path", help="Override icons root folder")
    parser.add_argument("--manifest-path", help="Override manifest path")
    parser.add_argument("--dry-run", action="store_true", help="Preview counts only (no sign-in, no changes)")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--version", "-v", action="store_true", help="Show version and exit")

    args = parser.parse_args()

    if args.version:
        print(f"dataverse-icon-deployer {VERSION}")
        sys.exit(0)

    if args.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(name)s - %(levelname)s - %(message)s'
        )
        logging.getLogger('urllib3').setLevel(logging.DEBUG)

    orchestrator = IconDeploymentOrchestrator(env_file=args.env)

    # CLI overrides on top of .env values
    if args.environment_url:
        orchestrator.environment_url = args.environment_url.rstrip("/")
    if args.collection:
        orchestrator.collection = args.collection
    if args.icons_path:
        orchestrator.icons_path = args.icons_path
    if args.manifest_path:
        orchestrator.manifest_path = args.manifest_path
    if args.dry_run:
        orchestrator.dry_run = True
    if args.debug:
        orchestrator.debug = True

    print(f"\n{'='*60}")
    print(f"DATAVERSE ICON DEPLOYER v{VERSION}")
    print("="*60)
    print(f"Mode: {'DRY RUN' if orchestrator.dry_run else 'LIVE DEPLOY'}")
    print(f"Environment: {orchestrator.environment_url}")
    print(f"Manifest: {orchestrator.manifest_path}")
    print(f"Icons: {orchestrator.icons_path}")
    orchestrator.print_proxy_status()

    if not orchestrator.validate_config():
        sys.exit(1)

    if orchestrator.output_manager.retention_days > 0:
        deleted = orchestrator.output_manager.cleanup_old_folders(orchestrator.debug)
        if deleted > 0:
            print(f"Cleaned up {deleted} old output folder(s)")

    results = orchestrator.run()
    orchestrator.print_summary(results)

    if not results.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
