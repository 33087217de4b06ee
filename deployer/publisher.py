"""Publisher — Final PublishAllXml call after sync and binding."""

import requests


def publish_customizations(client) -> bool:
    """Publish all pending customizations.

    Returns False instead of raising: synced resources and bindings are
    already saved, they just stay unpublished until someone publishes by hand.
    """
    try:
        client.publish_all()
    except requests.RequestException as e:
        print(f"  WARNING: Publish failed: {e}")
        print("  Publish all customizations manually from the maker portal")
        return False

    print("  Published all customizations")
    return True
