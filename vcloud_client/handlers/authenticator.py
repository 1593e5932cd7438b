"""
Session authentication module for vCloud API Client.
Logs in to the org, identifies its region and caches the session.
"""

from typing import Callable, Optional, Union

from vcloud_client.core.context import ProviderContext
from vcloud_client.core.errors import AuthenticationError, CloudError, ProtocolError
from vcloud_client.core.logger import get_logger
from vcloud_client.core.models import Region, Session, Version
from vcloud_client.handlers import xml_documents
from vcloud_client.handlers.transport import TOKEN_HEADER, Transport, accept_header
from vcloud_client.handlers.vdc_loader import VDCLoader
from vcloud_client.handlers.version_negotiator import (
    MODERN_VERSION,
    VersionNegotiator,
    matches,
)


OrgParser = Callable[[Union[str, bytes], str, bool], Optional[xml_documents.OrgLocation]]


def org_parser_for(version: Version) -> OrgParser:
    """Pick the org-listing parser matching the login response shape of a version."""
    if matches(version.version, MODERN_VERSION):
        return xml_documents.parse_org_link_list
    return xml_documents.parse_org_elements


class SessionAuthenticator:
    """
    Provides the session for a provider context.

    Returns the cached session while it lives; otherwise negotiates a
    version, logs in and loads the org's VDCs. Concurrent logins are not
    serialized: the last one to finish owns the cache entry.
    """

    def __init__(self, context: ProviderContext, transport: Transport,
                 negotiator: Optional[VersionNegotiator] = None,
                 loader: Optional[VDCLoader] = None):
        """
        Initialize authenticator.

        Args:
            context: Provider context (credentials, compat flag, session cache)
            transport: Transport used for the login call
            negotiator: Version negotiator (built from context if omitted)
            loader: VDC loader (built from context if omitted)
        """
        self.context = context
        self.transport = transport
        self.negotiator = negotiator or VersionNegotiator(context, transport)
        self.loader = loader or VDCLoader(context, transport)

    def authenticate(self, force: bool = False) -> Session:
        """
        Get a live session.

        Args:
            force: Ignore (and replace) any cached session

        Returns:
            Session

        Raises:
            AuthenticationError: If login is rejected or returns no token
            ProtocolError: If no org matches the account
        """
        if not force:
            cached = self.context.session_cache.get(self.context.cache_key)
            if cached is not None:
                return cached
        else:
            self.context.session_cache.invalidate(self.context.cache_key)

        session = self._login()
        self.context.session_cache.put(self.context.cache_key, session)
        try:
            self.loader.load_vdcs(session)
        except CloudError:
            # A session without its VDCs must not outlive the failed load
            self.context.session_cache.invalidate(self.context.cache_key)
            raise
        return session

    def get_region(self) -> Region:
        return self.authenticate(False).region

    def _login(self) -> Session:
        version = self.negotiator.select_version()
        get_logger().info(
            f"Logging in to {self.context.endpoint} as {self.context.login_user} (API {version.version})"
        )

        response = self.transport.request(
            'POST',
            version.login_url,
            headers={'Accept': accept_header(version.version)},
            auth=(self.context.login_user, self.context.access_private),
        )

        if response.status_code != 200:
            if not response.content:
                raise AuthenticationError(
                    f"Authentication failed (HTTP {response.status_code} {response.reason})"
                )
            self.transport.raise_fault(response)

        token = response.headers.get(TOKEN_HEADER)
        if not token:
            raise AuthenticationError("No token was provided in the login response")

        parse_org = org_parser_for(version)
        location = parse_org(response.content, self.context.account_number, self.context.compat)
        if location is None:
            raise ProtocolError(f"No org was identified for {self.context.account_number}")

        get_logger().info(f"Authenticated to org {location.region.name} at {location.endpoint}")
        return Session(
            token=token,
            version=version,
            endpoint=location.endpoint,
            region=location.region,
            url=location.url,
        )
