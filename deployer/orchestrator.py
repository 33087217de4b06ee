"""
Icon Deployment Orchestrator — Pipeline coordination for the icon deployment.

Ties the manifest loader, Dataverse client, synchronizer, entity binder and
publisher into a sequential workflow:

  Step 1: LOAD MANIFEST
      Reads icon-manifest.json into IconRecord objects. A missing or
      malformed manifest stops the run.

  Step 2: PREVIEW (dry run only)
      Counts web resources, entity associations and sitemap references
      without signing in or calling the Web API, then stops.

  Step 2: AUTHENTICATION
      Device-code sign-in against Entra ID for <environment>/.default.
      Failure stops the run.

  Step 3: SYNC WEB RESOURCES
      Upserts each SVG keyed on webResourceName.

  Step 4: ENTITY ICONS
      Points the four icon slots of each entity at its web resource.

  Step 5: NAVIGATION REFERENCES
      Lists the $webresource: references for navigation icons, for use in
      the app sitemap.

  Step 6: PUBLISH
      PublishAllXml. Failure is reported, not fatal.

Only Steps 1-2 can fail the run. Per-icon and per-entity errors are counted
and reported in the summary; re-running the deployment is the retry.

Configuration:
    Loaded from environment variables (typically via .env file).
    Required: DATAVERSE_URL. See config/settings.py for defaults.

Typical usage:
    orchestrator = IconDeploymentOrchestrator(env_file="./.env")
    if orchestrator.validate_config():
        results = orchestrator.run()
        orchestrator.print_summary(results)
"""

import os
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any
from urllib.parse import urlparse

from dotenv import load_dotenv

from .dataverse_client import DataverseClient
from .device_code_auth import DeviceCodeAuthClient
from .entity_binder import EntityBinder
from .exceptions import IconDeployError
from .manifest import load_manifest, navigation_icons
from .output_manager import OutputManager
from .preview import plan_preview, sitemap_reference
from .publisher import publish_customizations
from .reporter import build_summary, print_summary
from .synchronizer import ResourceSynchronizer

from config import DEFAULT_SETTINGS, PROXY_ENV_VARS


def _env_flag(name: str) -> bool:
    return os.getenv(name, str(DEFAULT_SETTINGS[name])).lower() == "true"


class IconDeploymentOrchestrator:
    """Orchestrates the manifest-driven icon deployment.

    Attributes:
        environment_url: Dataverse environment (e.g. "https://contoso.crm.dynamics.com").
        collection: Web API entity set for web resources (default: "webresourceset").
        icons_path: Root folder that manifest localPath values resolve against.
        manifest_path: Path to icon-manifest.json.
        dry_run: Preview only; no sign-in and no remote calls.
        save_json: Whether to write deployment_results.json.
        debug: Whether to enable verbose output.
        output_manager: Per-run output folders and retention cleanup.
    """

    def __init__(self, env_file: str = "./.env"):
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path)
            print(f"Loaded configuration from: {env_file}")
        else:
            print(f"Warning: {env_file} not found, using defaults/environment")

        self.environment_url = os.getenv("DATAVERSE_URL", "").rstrip("/")

        self.collection = os.getenv("WEB_RESOURCE_COLLECTION", DEFAULT_SETTINGS["WEB_RESOURCE_COLLECTION"])
        self.icons_path = os.getenv("ICONS_PATH", DEFAULT_SETTINGS["ICONS_PATH"])
        self.manifest_path = os.getenv("MANIFEST_PATH", DEFAULT_SETTINGS["MANIFEST_PATH"])
        self.api_version = os.getenv("DATAVERSE_API_VERSION", DEFAULT_SETTINGS["DATAVERSE_API_VERSION"])
        self.introduced_version = os.getenv("INTRODUCED_VERSION", DEFAULT_SETTINGS["INTRODUCED_VERSION"])

        # Device-code sign-in
        self.client_id = os.getenv("AZURE_CLIENT_ID", DEFAULT_SETTINGS["AZURE_CLIENT_ID"])
        self.tenant_id = os.getenv("AZURE_TENANT_ID", DEFAULT_SETTINGS["AZURE_TENANT_ID"])

        output_dir = os.getenv("OUTPUT_DIR", DEFAULT_SETTINGS["OUTPUT_DIR"])
        retention_days = int(os.getenv("OUTPUT_RETENTION_DAYS", str(DEFAULT_SETTINGS["OUTPUT_RETENTION_DAYS"])))

        self.dry_run = _env_flag("DRY_RUN")
        self.save_json = _env_flag("SAVE_JSON")
        self.debug = _env_flag("DEBUG")

        self.output_manager = OutputManager(output_dir, self._environment_label(), retention_days)

    def _environment_label(self) -> str:
        return urlparse(self.environment_url).netloc or "dataverse"

    def validate_config(self) -> bool:
        """Check required configuration, printing every problem found.

        Returns:
            True if the configuration is usable, False otherwise.
        """
        errors = []
        if not self.environment_url:
            errors.append("DATAVERSE_URL (or --environment-url) is required")
        elif not self.environment_url.startswith("https://"):
            errors.append(f"DATAVERSE_URL must be an https:// URL, got '{self.environment_url}'")
        if not self.collection:
            errors.append("WEB_RESOURCE_COLLECTION must not be empty")
        if not self.dry_run and not self.client_id:
            errors.append("AZURE_CLIENT_ID is required for a live deployment")

        if errors:
            print("\nConfiguration Errors:")
            for err in errors:
                print(f"  - {err}")
            return False
        return True

    def print_proxy_status(self):
        """Print proxy configuration status."""
        proxy_config = {}
        for var in PROXY_ENV_VARS:
            value = os.getenv(var)
            if value:
                # Hide credentials embedded as user:pass@host
                proxy_config[var] = f"***@{value.split('@')[-1]}" if '@' in value else value

        if proxy_config:
            print("Proxy configuration:")
            for var, value in proxy_config.items():
                print(f"  {var}={value}")
        elif self.debug:
            print("Proxy: Not configured (direct connection)")

    def run(self) -> Dict[str, Any]:
        """Execute the deployment.

        Returns:
            A dict containing:
                - started_at/completed_at: ISO timestamps
                - config: Environment, collection and paths used
                - dry_run: Whether this was a preview
                - success: False only when a setup step (manifest, sign-in) failed
                - preview: Counts (dry run only)
                - summary: Created/updated/failed counts (live run only)
                - resources, bind_errors, sitemap_refs: Per-item detail
                - json_path: Path to deployment_results.json (if save_json=True)
                - error: Error message (if success=False)
        """
        results = {
            "started_at": datetime.now(timezone.utc).isoformat(),
            "tool": "dataverse-icon-deployer",
            "config": {
                "environment_url": self.environment_url,
                "collection": self.collection,
                "icons_path": self.icons_path,
                "manifest_path": self.manifest_path,
            },
            "dry_run": self.dry_run,
            "success": False,
        }

        try:
            print(f"\n{'='*60}")
            print("STEP 1: LOAD MANIFEST")
            print("="*60)
            records = load_manifest(self.manifest_path)
            print(f"  Icons in manifest: {len(records)}")

            if self.dry_run:
                self._preview(records, results)
            else:
                self._deploy(records, results)

            results["success"] = True

        except IconDeployError as e:
            results["error"] = str(e)
            print(f"\n  ERROR: {e}")
            if self.debug:
                traceback.print_exc()

        results["completed_at"] = datetime.now(timezone.utc).isoformat()

        if self.save_json:
            self.output_manager.label = self._environment_label()
            run_dir = self.output_manager.create_run_dir()
            results["json_path"] = str(run_dir / "deployment_results.json")
            self.output_manager.save_json("deployment_results.json", results)
            print(f"\n  Results saved to: {results['json_path']}")

        return results

    def _preview(self, records, results: Dict[str, Any]):
        print(f"\n{'='*60}")
        print("STEP 2: PREVIEW (DRY RUN)")
        print("="*60)
        counts = plan_preview(records, self.icons_path)
        print(f"  Web resources to create or update: {counts.web_resources}")
        print(f"  Entity icon associations: {counts.associations}")
        print(f"  Sitemap references: {counts.sitemap_refs}")
        results["preview"] = counts.to_dict()

    def _deploy(self, records, results: Dict[str, Any]):
        print(f"\n{'='*60}")
        print("STEP 2: AUTHENTICATION")
        print("="*60)
        auth = DeviceCodeAuthClient(self.environment_url, self.client_id, self.tenant_id, self.debug)
        client = DataverseClient(
            self.environment_url, auth, self.api_version, self.collection, self.debug
        )
        client.authenticate()
        print("  Authentication successful")

        print(f"\n{'='*60}")
        print("STEP 3: SYNC WEB RESOURCES")
        print("="*60)
        synchronizer = ResourceSynchronizer(client, self.icons_path, self.introduced_version, self.debug)
        sync_counts = synchronizer.sync(records)

        print(f"\n{'='*60}")
        print("STEP 4: ENTITY ICONS")
        print("="*60)
        bind_result = EntityBinder(client, self.debug).bind(records)
        if not bind_result.attempted:
            print("  No entity icons in manifest")

        print(f"\n{'='*60}")
        print("STEP 5: NAVIGATION REFERENCES")
        print("="*60)
        sitemap_refs = [sitemap_reference(r) for r in navigation_icons(records)]
        for ref in sitemap_refs:
            print(f"  {ref}")
        if not sitemap_refs:
            print("  No navigation icons in manifest")

        print(f"\n{'='*60}")
        print("STEP 6: PUBLISH")
        print("="*60)
        published = publish_customizations(client)

        results["summary"] = build_summary(sync_counts, bind_result, sitemap_refs, published)
        results["resources"] = [r.to_dict() for r in sync_counts.results]
        results["bind_errors"] = [
            {"entity": entity, "reason": reason} for entity, reason in bind_result.errors
        ]
        results["sitemap_refs"] = sitemap_refs

    def print_summary(self, results: Dict):
        print_summary(results)
