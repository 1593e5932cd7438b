"""
Version negotiation module for vCloud API Client.
Discovers the API versions a server offers and selects one to use.
"""

from typing import List, Optional

from vcloud_client.core.context import ProviderContext
from vcloud_client.core.errors import ProtocolError
from vcloud_client.core.logger import get_logger
from vcloud_client.core.models import Version
from vcloud_client.handlers import xml_documents


# Supported versions, most preferred first
VERSIONS = ('5.1', '1.5', '1.0', '0.9', '0.8')

# First version using unversioned resource paths and link-list org documents
MODERN_VERSION = '1.5'


def is_supported(version: str) -> bool:
    return version in VERSIONS


def matches(current: str, minimum: str, maximum: Optional[str] = None) -> bool:
    """
    Check whether a version lies between minimum and maximum (inclusive).

    Ordering follows VERSIONS. An unsupported current version only matches
    when it equals one of the bounds.
    """
    if current == minimum or (maximum is not None and current == maximum):
        return True
    if not is_supported(current):
        return False
    rank = VERSIONS.index(current)
    if minimum in VERSIONS and rank > VERSIONS.index(minimum):
        return False
    if maximum is not None and maximum in VERSIONS and rank < VERSIONS.index(maximum):
        return False
    return True


def order_versions(versions: List[Version], preferred: Optional[List[str]] = None) -> List[Version]:
    """
    Drop unsupported versions and sort the rest by preference.

    A caller preference list, when given, decides first; the canonical
    order settles everything it does not mention.
    """
    preferred = list(preferred or [])

    def sort_key(version: Version):
        if version.version in preferred:
            return (0, preferred.index(version.version))
        return (1, VERSIONS.index(version.version))

    survivors = []
    for version in versions:
        if is_supported(version.version) and version not in survivors:
            survivors.append(version)
    return sorted(survivors, key=sort_key)


class VersionNegotiator:
    """
    Selects the API version for a provider context.

    The full ordered list is cached per account; the head is the selection.
    """

    def __init__(self, context: ProviderContext, transport):
        """
        Initialize version negotiator.

        Args:
            context: Provider context (endpoint, preference, version cache)
            transport: Transport used for the unauthenticated versions call
        """
        self.context = context
        self.transport = transport

    def select_version(self) -> Version:
        """
        Return the version to use, negotiating with the server if needed.

        Raises:
            ProtocolError: If the server offers no supported version
        """
        return self.supported_versions()[0]

    def supported_versions(self) -> List[Version]:
        """The ordered list of usable versions offered by the server."""
        cached = self.context.version_cache.get(self.context.cache_key)
        if cached:
            return cached

        url = f"{self.context.endpoint}/api/versions"
        get_logger().debug(f"Discovering API versions at {url}")
        response = self.transport.request('GET', url)

        if response.status_code != 200:
            get_logger().error(f"Expected OK for GET request, got {response.status_code}")
            self.transport.raise_fault(response)

        offered = xml_documents.parse_versions(response.content)
        ordered = order_versions(offered, self.context.version_preference)
        if not ordered:
            raise ProtocolError(
                "Unable to identify a supported version (offered: "
                + ", ".join(v.version for v in offered) + ")"
            )

        get_logger().info(f"Selected API version {ordered[0]}")
        self.context.version_cache.put(self.context.cache_key, ordered)
        return ordered
