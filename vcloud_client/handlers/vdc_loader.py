"""
VDC loading module for vCloud API Client.
Enumerates the VDCs of an org together with their action endpoints and quotas.
"""

from vcloud_client.core.errors import CloudError
from vcloud_client.core.logger import get_logger
from vcloud_client.core.models import DataCenter, Session, VDC
from vcloud_client.handlers import xml_documents
from vcloud_client.handlers.transport import session_headers
from vcloud_client.handlers.url_builder import to_id, to_url


class VDCLoader:
    """
    Populates a freshly created session with its VDCs.

    Runs once per login; the resulting VDC records are not touched again.
    """

    def __init__(self, context, transport):
        """
        Initialize VDC loader.

        Args:
            context: Provider context (compat flag)
            transport: Transport used for org and VDC lookups
        """
        self.context = context
        self.transport = transport

    def load_vdcs(self, session: Session) -> None:
        """
        Fetch the org document and load every VDC it references.

        Raises:
            VendorFault/GenericHTTPFault: If the org document cannot be fetched
        """
        response = self.transport.request('GET', session.url, headers=session_headers(session))
        if response.status_code != 200:
            get_logger().error(f"Expected OK for GET request, got {response.status_code}")
            self.transport.raise_fault(response)

        vdcs = []
        for link in xml_documents.iter_vdc_links(response.content):
            href = xml_documents.attr(link, 'href')
            if href is None:
                continue
            vdc_id = to_id(href, self.context.compat)
            data_center = DataCenter(
                provider_data_center_id=vdc_id,
                region_id=session.region.provider_region_id,
                name=xml_documents.attr(link, 'name'),
            )
            vdc = VDC(data_center=data_center)
            self._load_vdc(session, vdc, vdc_id)
            vdcs.append(vdc)

        session.vdcs = vdcs
        get_logger().info(f"Loaded {len(vdcs)} VDC(s) for org {session.region.name}")

    def _load_vdc(self, session: Session, vdc: VDC, vdc_id: str) -> None:
        """Fill in one VDC's details. Failures leave the defaults in place."""
        url = to_url(session, 'vdc', vdc_id, self.context.compat)
        try:
            response = self.transport.request('GET', url, headers=session_headers(session))
            if response.status_code == 404:
                get_logger().warning(f"VDC {vdc_id} not found, keeping defaults")
                return
            if response.status_code != 200:
                self.transport.raise_fault(response)
            if not xml_documents.apply_vdc_detail(vdc, response.content):
                get_logger().warning(f"No Vdc element in detail document for {vdc_id}")
        except CloudError as e:
            get_logger().warning(f"Could not load details for VDC {vdc_id}, keeping defaults: {e}")
