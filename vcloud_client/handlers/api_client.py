"""
API client module for vCloud API Client.
Executes authenticated GET/POST/DELETE calls against the vCloud API.
"""

from dataclasses import dataclass
from typing import Optional

from vcloud_client.core.errors import ProtocolError
from vcloud_client.core.models import Session, VDC
from vcloud_client.handlers.authenticator import SessionAuthenticator
from vcloud_client.handlers.transport import Transport, response_text, session_headers
from vcloud_client.handlers.url_builder import to_url


# Actions that can be posted against a VDC, with the media type of their "add" link
INSTANTIATE_VAPP = 'instantiateVApp'
COMPOSE_VAPP = 'composeVApp'
CLONE_VAPP = 'cloneVApp'
CAPTURE_VAPP = 'captureVApp'
UPLOAD_VAPP_TEMPLATE = 'uploadVAppTemplate'
CLONE_MEDIA = 'cloneMedia'
UPLOAD_MEDIA = 'uploadMedia'
CREATE_DISK = 'createDisk'

ACTION_MEDIA_TYPES = {
    INSTANTIATE_VAPP: 'application/vnd.vmware.vcloud.instantiateVAppTemplateParams+xml',
    COMPOSE_VAPP: 'application/vnd.vmware.vcloud.composeVAppParams+xml',
    CLONE_VAPP: 'application/vnd.vmware.vcloud.cloneVAppParams+xml',
    CAPTURE_VAPP: 'application/vnd.vmware.vcloud.captureVAppParams+xml',
    UPLOAD_VAPP_TEMPLATE: 'application/vnd.vmware.vcloud.uploadVAppTemplateParams+xml',
    CLONE_MEDIA: 'application/vnd.vmware.vcloud.cloneMediaParams+xml',
    UPLOAD_MEDIA: 'application/vnd.vmware.vcloud.media+xml',
    CREATE_DISK: 'application/vnd.vmware.vcloud.diskCreateParams+xml',
}

RESULT_OK = 'ok'
RESULT_NOT_FOUND = 'not_found'


@dataclass
class RequestResult:
    """Outcome of a call that did not fault: a body, or a not-found marker."""
    kind: str
    status: int
    body: str = ''

    @property
    def found(self) -> bool:
        return self.kind == RESULT_OK


class APIClient:
    """
    Generic request executor.

    Every call obtains the cached session, attaches the version-qualified
    Accept header and the session token, and classifies the response.
    A 401 forces one re-authentication and one retry; nothing else is retried.
    """

    def __init__(self, authenticator: SessionAuthenticator, transport: Transport):
        """
        Initialize API client.

        Args:
            authenticator: Source of sessions
            transport: Transport used for requests
        """
        self.authenticator = authenticator
        self.transport = transport
        self.logger = None

    def _get_logger(self):
        """Lazy logger initialization."""
        if self.logger is None:
            from vcloud_client.core.logger import get_logger
            self.logger = get_logger()
        return self.logger

    @property
    def compat(self) -> bool:
        return self.authenticator.context.compat

    def to_url(self, resource: str, resource_id: Optional[str] = None) -> str:
        """URL of a resource under the current session."""
        return to_url(self.authenticator.authenticate(False), resource, resource_id, self.compat)

    def get(self, resource: str, resource_id: Optional[str] = None) -> Optional[str]:
        """
        Fetch a resource.

        Returns:
            Response body ('' for 204), or None if the resource does not exist
        """
        result = self.get_result(resource, resource_id)
        return result.body if result.found else None

    def get_result(self, resource: str, resource_id: Optional[str] = None) -> RequestResult:
        """Fetch a resource, reporting absence as a not-found result."""
        self._get_logger().debug(f"GET {resource} {resource_id or ''}")
        return self._execute('GET', lambda: self.to_url(resource, resource_id))

    def delete(self, resource: str, resource_id: str) -> None:
        """Delete a resource. A missing resource counts as deleted."""
        self._get_logger().debug(f"DELETE {resource} {resource_id}")
        self._execute('DELETE', lambda: self.to_url(resource, resource_id))

    def post(self, action: str, endpoint: str, content_type: Optional[str] = None,
             payload: Optional[str] = None) -> str:
        """
        Post to an explicit endpoint.

        Args:
            action: Action name (for logging and error messages)
            endpoint: Absolute URL to post to
            content_type: Optional Content-Type of the payload
            payload: Optional XML payload

        Returns:
            Response body ('' for 204)

        Raises:
            ProtocolError: If the endpoint does not exist
        """
        self._get_logger().debug(f"POST {action} -> {endpoint}")
        result = self._execute('POST', lambda: endpoint, content_type, payload)
        if not result.found:
            raise ProtocolError(f"No action match for {endpoint}")
        return result.body

    def post_action(self, action: str, vdc_id: Optional[str] = None,
                    payload: Optional[str] = None) -> str:
        """
        Post a well-known action to a VDC's action endpoint.

        Args:
            action: One of the keys of ACTION_MEDIA_TYPES
            vdc_id: Target VDC id; the first VDC is used if None or unmatched
            payload: Optional XML payload

        Raises:
            ProtocolError: If no VDC or no endpoint for the action exists
        """
        session = self.authenticator.authenticate(False)
        vdc = self._select_vdc(session, vdc_id)
        if vdc is None:
            raise ProtocolError(f"No VDC was identified for this request (requested {vdc_id})")

        content_type = ACTION_MEDIA_TYPES.get(action)
        endpoint = vdc.actions.get(content_type) if content_type else None
        if endpoint is None:
            raise ProtocolError(f"No endpoint for {action}")
        return self.post(action, endpoint, content_type, payload)

    @staticmethod
    def _select_vdc(session: Session, vdc_id: Optional[str]) -> Optional[VDC]:
        if not session.vdcs:
            return None
        if vdc_id is not None:
            for vdc in session.vdcs:
                if vdc.data_center.provider_data_center_id == vdc_id:
                    return vdc
        return session.vdcs[0]

    def _execute(self, method: str, url_for, content_type: Optional[str] = None,
                 payload: Optional[str] = None, retry_on_unauthorized: bool = True) -> RequestResult:
        """
        Send one request and classify its status.

        Args:
            method: GET, POST or DELETE
            url_for: Callable returning the target URL (resolved after authentication)
            content_type: Optional Content-Type for POST
            payload: Optional body for POST
            retry_on_unauthorized: Re-authenticate and retry once on 401
        """
        session = self.authenticator.authenticate(False)
        url = url_for()
        headers = session_headers(session)
        if content_type is not None:
            headers['Content-Type'] = content_type

        response = self.transport.request(method, url, headers=headers, data=payload)
        code = response.status_code
        self._get_logger().debug(f"HTTP STATUS: {code}")

        if code == 401 and retry_on_unauthorized:
            self._get_logger().info(f"Session rejected for {method} {url}, re-authenticating")
            self.authenticator.authenticate(True)
            return self._execute(method, url_for, content_type, payload, retry_on_unauthorized=False)

        if code == 404 and method in ('GET', 'POST'):
            return RequestResult(RESULT_NOT_FOUND, code)
        if code == 204:
            return RequestResult(RESULT_OK, code)
        if code in _SUCCESS_CODES[method]:
            return RequestResult(RESULT_OK, code, response_text(response))

        self._get_logger().error(f"{method} request to {url} got unexpected {code}")
        self.transport.raise_fault(response)


_SUCCESS_CODES = {
    'GET': (200,),
    'POST': (200, 201, 202),
    'DELETE': (200, 202, 404),
}
