"""
Exceptions raised by the deployment pipeline.

Setup failures (manifest, sign-in) derive from IconDeployError and stop the
run. A missing SVG is only a warning: the record is skipped and the batch
continues.
"""


class IconDeployError(Exception):
    """Base class for fatal deployment errors."""


class ManifestNotFound(IconDeployError):
    """The manifest file does not exist."""


class ManifestParseError(IconDeployError):
    """The manifest exists but its content is not a valid icon manifest."""


class AuthenticationError(IconDeployError):
    """No bearer token could be obtained for the environment."""


class MissingAssetWarning(UserWarning):
    """A manifest record points at an SVG file that is not on disk."""
