"""
URL construction for vCloud API resources.

Modern API versions (1.5 and later) address resources as
``/api/resource/id``; older versions embed the version, as in
``/api/v1.0/resource/id``. With the compatibility flag set, ids are full
``/kind/id`` paths rather than bare ids.
"""

from typing import Optional

from vcloud_client.core.models import Session
from vcloud_client.handlers.version_negotiator import MODERN_VERSION, matches


def to_url(session: Session, resource: str, resource_id: Optional[str] = None,
           compat: bool = False) -> str:
    """
    Build the URL of a resource (collection when no id is given).

    Args:
        session: Session supplying the endpoint and the negotiated version
        resource: Resource kind, e.g. 'vdc' or 'disk'
        resource_id: Optional id; a '/kind/id' path when compat is set
        compat: Legacy id format flag

    Returns:
        Absolute URL
    """
    version = session.version.version
    if matches(version, MODERN_VERSION):
        base = f"{session.endpoint}/api"
    else:
        base = f"{session.endpoint}/api/v{version}"

    if resource_id is None:
        return f"{base}/{resource}"
    if compat:
        return f"{base}{resource_id}"
    return f"{base}/{resource}/{resource_id}"


def to_id(href: str, compat: bool = False) -> str:
    """
    Derive a resource id from its href.

    Returns the last path segment, or '/kind/id' under the compat flag.
    """
    parts = [p for p in href.rstrip('/').split('/') if p]
    if not parts:
        return href
    if compat and len(parts) > 1:
        return f"/{parts[-2]}/{parts[-1]}"
    return parts[-1]


def get_action(endpoint: str) -> str:
    """Name of the action an action URL points at (its last path segment)."""
    return endpoint.split('/')[-1]
