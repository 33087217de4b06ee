"""
Deployer package — Manifest-driven deployment of SVG icons to Dataverse.

  orchestrator.py      Pipeline coordination (load, sign in, sync, bind, publish)
  manifest.py          icon-manifest.json loading and IconRecord
  device_code_auth.py  Entra ID device-code token acquisition
  dataverse_client.py  HTTP communication with the Dataverse Web API
  synchronizer.py      Idempotent web resource upsert
  entity_binder.py     Entity icon slot updates
  publisher.py         PublishAllXml
  preview.py           Dry-run counts
  reporter.py          Run summary
  output_manager.py    Per-run result folders and retention
"""

from .orchestrator import IconDeploymentOrchestrator
from .manifest import IconRecord, load_manifest
from .device_code_auth import DeviceCodeAuthClient
from .dataverse_client import DataverseClient
from .synchronizer import ResourceSynchronizer, upsert_web_resource
from .entity_binder import EntityBinder
from .exceptions import (
    IconDeployError,
    ManifestNotFound,
    ManifestParseError,
    AuthenticationError,
    MissingAssetWarning,
)
