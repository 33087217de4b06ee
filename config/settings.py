"""
Settings — Default configuration values for the Dataverse icon deployer.

The orchestrator falls back to DEFAULT_SETTINGS when an environment variable
is not set. Values normally come from a .env file; these defaults cover the
standard repository layout.

Configuration precedence (highest to lowest):
  1. CLI flags (--environment-url, --collection, --icons-path, ...)
  2. Environment variables (from .env file)
  3. DEFAULT_SETTINGS (this file)

Settings reference:
  WEB_RESOURCE_COLLECTION  Web API entity set the icons are upserted into
  ICONS_PATH               Root folder that manifest localPath values resolve against
  MANIFEST_PATH            JSON manifest enumerating every icon
  DATAVERSE_API_VERSION    Web API version segment (/api/data/<version>)
  INTRODUCED_VERSION       Solution version stamped on created web resources
  AZURE_CLIENT_ID          Public client used for the device-code sign-in
  AZURE_TENANT_ID          Entra ID tenant ("organizations" = any work account)
  DRY_RUN                  Preview only, no sign-in and no remote calls
  OUTPUT_DIR               Where deployment_results.json folders are written
  OUTPUT_RETENTION_DAYS    How many days to keep old output folders (0 = keep forever)
  SAVE_JSON                Whether to write deployment_results.json
  DEBUG                    Whether to print verbose output
"""

# Microsoft's sample public client registered for Dataverse Web API access
DATAVERSE_SAMPLE_CLIENT_ID = "51f81489-12ee-4a9e-aaae-a2591f45987d"

DEFAULT_SETTINGS = {
    "WEB_RESOURCE_COLLECTION": "webresourceset",
    "ICONS_PATH": "./icons",
    "MANIFEST_PATH": "./icon-manifest.json",
    "DATAVERSE_API_VERSION": "v9.2",
    "INTRODUCED_VERSION": "1.0.0.0",
    "AZURE_CLIENT_ID": DATAVERSE_SAMPLE_CLIENT_ID,
    "AZURE_TENANT_ID": "organizations",
    "DRY_RUN": False,
    "OUTPUT_DIR": "./output",
    "OUTPUT_RETENTION_DAYS": 30,
    "SAVE_JSON": True,
    "DEBUG": False,
}

PROXY_ENV_VARS = [
    "HTTP_PROXY", "HTTPS_PROXY", "http_proxy", "https_proxy",
    "NO_PROXY", "no_proxy",
]
