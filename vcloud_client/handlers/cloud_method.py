"""
Cloud method facade for vCloud API Client.
Wires version negotiation, authentication, requests and task polling
for one provider context, and offers the org/VDC queries built on them.
"""

from typing import List, Optional

from vcloud_client.core.context import ProviderContext
from vcloud_client.core.models import UNKNOWN_QUOTA, DataCenter, Region, Session
from vcloud_client.handlers import xml_documents
from vcloud_client.handlers.api_client import ACTION_MEDIA_TYPES, APIClient, CREATE_DISK, INSTANTIATE_VAPP
from vcloud_client.handlers.authenticator import SessionAuthenticator
from vcloud_client.handlers.task_poller import TaskPoller, TaskPollPolicy
from vcloud_client.handlers.transport import Transport
from vcloud_client.handlers.url_builder import get_action, to_id
from vcloud_client.handlers.vdc_loader import VDCLoader
from vcloud_client.handlers.version_negotiator import VersionNegotiator


MEDIA_TYPE_CATALOG = 'application/vnd.vmware.vcloud.catalog+xml'
MEDIA_TYPE_VAPP = 'application/vnd.vmware.vcloud.vApp+xml'
MEDIA_TYPE_DISK = 'application/vnd.vmware.vcloud.disk+xml'


class CloudMethod:
    """Entry point for all calls against one org."""

    def __init__(self, context: ProviderContext, policy: Optional[TaskPollPolicy] = None,
                 transport: Optional[Transport] = None):
        """
        Initialize the engine.

        Args:
            context: Provider context; its caches may be shared with other instances
            policy: Task polling policy
            transport: Optional transport (a fresh one is built otherwise)
        """
        self.context = context
        self.transport = transport or Transport(context)
        self.negotiator = VersionNegotiator(context, self.transport)
        self.loader = VDCLoader(context, self.transport)
        self.authenticator = SessionAuthenticator(context, self.transport, self.negotiator, self.loader)
        self.api = APIClient(self.authenticator, self.transport)
        self.poller = TaskPoller(self.api, policy)

    # Session -------------------------------------------------------------

    def authenticate(self, force: bool = False) -> Session:
        return self.authenticator.authenticate(force)

    def get_api_version(self) -> str:
        return self.authenticate(False).version.version

    # Requests ------------------------------------------------------------

    def get(self, resource: str, resource_id: Optional[str] = None) -> Optional[str]:
        return self.api.get(resource, resource_id)

    def post(self, action: str, endpoint: str, content_type: Optional[str] = None,
             payload: Optional[str] = None) -> str:
        return self.api.post(action, endpoint, content_type, payload)

    def post_action(self, action: str, vdc_id: Optional[str] = None,
                    payload: Optional[str] = None) -> str:
        return self.api.post_action(action, vdc_id, payload)

    def delete(self, resource: str, resource_id: str) -> None:
        self.api.delete(resource, resource_id)

    def to_url(self, resource: str, resource_id: Optional[str] = None) -> str:
        return self.api.to_url(resource, resource_id)

    def to_id(self, href: str) -> str:
        return to_id(href, self.context.compat)

    def get_action(self, endpoint: str) -> str:
        return get_action(endpoint)

    def wait_for(self, task_xml: Optional[str]) -> None:
        self.poller.wait_for(task_xml)

    # Org, regions and data centers ---------------------------------------

    def get_region(self) -> Region:
        return self.authenticator.get_region()

    def list_regions(self) -> List[Region]:
        return [self.get_region()]

    def find_region(self, provider_region_id: str) -> Optional[Region]:
        for region in self.list_regions():
            if region.provider_region_id == provider_region_id:
                return region
        return None

    def list_data_centers(self, provider_region_id: Optional[str] = None) -> List[DataCenter]:
        """Data centers of the org; empty for any region other than the org's own."""
        session = self.authenticate(False)
        if provider_region_id is not None and provider_region_id != session.region.provider_region_id:
            return []
        return [vdc.data_center for vdc in session.vdcs]

    def get_data_center(self, provider_data_center_id: str) -> Optional[DataCenter]:
        for data_center in self.list_data_centers():
            if data_center.provider_data_center_id == provider_data_center_id:
                return data_center
        return None

    def get_org_name(self, href: str) -> str:
        """Display name of an org, falling back to its id."""
        org_id = self.to_id(href)
        xml = self.get('org', org_id)
        if not xml:
            return org_id
        return xml_documents.parse_org_name(xml) or org_id

    # Quotas --------------------------------------------------------------

    def get_vm_quota(self) -> int:
        return self._total_quota('vm_quota')

    def get_network_quota(self) -> int:
        return self._total_quota('network_quota')

    def _total_quota(self, name: str) -> int:
        """Sum of the known quotas across VDCs; UNKNOWN_QUOTA if none is known."""
        total = UNKNOWN_QUOTA
        for vdc in self.authenticate(False).vdcs:
            quota = getattr(vdc, name)
            if quota > -1:
                total = quota if total == UNKNOWN_QUOTA else total + quota
        return total

    # Media types ---------------------------------------------------------

    @staticmethod
    def media_type_for_action(action: str) -> Optional[str]:
        return ACTION_MEDIA_TYPES.get(action)

    @staticmethod
    def media_type_for_instantiate_vapp() -> str:
        return ACTION_MEDIA_TYPES[INSTANTIATE_VAPP]

    @staticmethod
    def media_type_for_create_disk() -> str:
        return ACTION_MEDIA_TYPES[CREATE_DISK]

    @staticmethod
    def media_type_for_catalog() -> str:
        return MEDIA_TYPE_CATALOG

    @staticmethod
    def media_type_for_org() -> str:
        return xml_documents.MEDIA_TYPE_ORG

    @staticmethod
    def media_type_for_vapp() -> str:
        return MEDIA_TYPE_VAPP

    @staticmethod
    def media_type_for_vdc() -> str:
        return xml_documents.MEDIA_TYPE_VDC

    @staticmethod
    def media_type_for_disk() -> str:
        return MEDIA_TYPE_DISK
