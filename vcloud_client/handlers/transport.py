"""
HTTP transport module for vCloud API Client.
Sends raw requests with `requests` and records them on the wire logger.
"""

from typing import Dict, Optional, Tuple
import requests
from requests.exceptions import ConnectionError, RequestException, SSLError, Timeout

from vcloud_client.core.context import ProviderContext
from vcloud_client.core.errors import (
    GenericHTTPFault,
    InternalTransportError,
    VendorFault,
)
from vcloud_client.core.logger import get_logger, get_wire_logger
from vcloud_client.handlers import xml_documents


TOKEN_HEADER = 'x-vcloud-authorization'

_SENSITIVE_HEADERS = {TOKEN_HEADER, 'authorization'}


def accept_header(version: str) -> str:
    """Version-qualified Accept header value."""
    return f"application/*+xml;version={version},application/*+xml;version={version}"


def response_text(response: requests.Response) -> str:
    """
    Body of a response as text.

    Without a charset in Content-Type, requests falls back to ISO-8859-1 for
    text types; XML defaults to UTF-8, so decode it that way instead.
    """
    if not response.content:
        return ''
    if 'charset' in response.headers.get('Content-Type', '').lower():
        return response.text
    return response.content.decode('utf-8', errors='replace')


def session_headers(session) -> Dict[str, str]:
    """Headers every authenticated call carries."""
    return {
        'Accept': accept_header(session.version.version),
        TOKEN_HEADER: session.token,
    }


class Transport:
    """
    Thin wrapper around a requests session for one provider context.

    Applies timeout, TLS verification and proxy settings, converts
    `requests` failures into InternalTransportError and logs traffic.
    """

    def __init__(self, context: ProviderContext, session: Optional[requests.Session] = None):
        """
        Initialize transport.

        Args:
            context: Provider context (timeout, TLS and proxy settings)
            session: Optional requests session to reuse
        """
        self.context = context
        self.http = session or requests.Session()
        self.http.verify = not context.insecure
        if context.proxy:
            self.http.proxies.update({'http': context.proxy, 'https': context.proxy})

    def request(self, method: str, url: str, headers: Optional[Dict[str, str]] = None,
                data: Optional[str] = None,
                auth: Optional[Tuple[str, str]] = None) -> requests.Response:
        """
        Send a request and return the response, whatever its status.

        Raises:
            InternalTransportError: If no response could be obtained
        """
        headers = dict(headers or {})
        wire = get_wire_logger()
        wire.debug(">>> [%s] -> %s", method, url)
        for name, value in headers.items():
            wire.debug("%s: %s", name, '<redacted>' if name.lower() in _SENSITIVE_HEADERS else value)
        if data:
            wire.debug(data)

        try:
            response = self.http.request(
                method,
                url,
                headers=headers,
                data=data.encode('utf-8') if data is not None else None,
                auth=auth,
                timeout=self.context.timeout,
            )
        except SSLError as e:
            get_logger().error(f"TLS error for {method} {url}: {e}")
            raise InternalTransportError(f"TLS error for {method} {url}: {e}")
        except Timeout:
            get_logger().error(f"Timeout after {self.context.timeout} seconds for {method} {url}")
            raise InternalTransportError(
                f"Request timeout after {self.context.timeout} seconds for {method} {url}"
            )
        except ConnectionError as e:
            get_logger().error(f"Connection error for {method} {url}: {e}")
            raise InternalTransportError(f"Connection error for {method} {url}: {e}")
        except RequestException as e:
            get_logger().error(f"I/O error from server communications: {e}")
            raise InternalTransportError(f"HTTP request failed: {e}")

        wire.debug("<<< HTTP %s %s", response.status_code, response.reason)
        for name, value in response.headers.items():
            wire.debug("%s: %s", name, '<redacted>' if name.lower() in _SENSITIVE_HEADERS else value)
        if response.content:
            wire.debug(response_text(response))
        return response

    @staticmethod
    def raise_fault(response: requests.Response) -> None:
        """
        Raise the fault described by an error response.

        Raises:
            VendorFault: If the body is a vendor error document
            GenericHTTPFault: Otherwise
        """
        data = xml_documents.parse_error(response.status_code, response.content)
        if data is None:
            raise GenericHTTPFault(response.status_code, response.reason or '', response_text(response))
        get_logger().error(f"[{response.status_code} : {data.title}] {data.description}")
        raise VendorFault(data)
