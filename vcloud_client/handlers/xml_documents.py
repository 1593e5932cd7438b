"""
XML document module for vCloud API Client.
Parses the vendor documents exchanged with the API: version listings,
org listings, VDC details, tasks and error documents.

All tag matching is done on local names so documents parse the same
whether or not the server qualifies them with a namespace prefix.
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Union

from lxml import etree

from vcloud_client.core.errors import ProtocolError
from vcloud_client.core.models import (
    ErrorData,
    Region,
    VDC,
    Version,
)


MEDIA_TYPE_ORG = 'application/vnd.vmware.vcloud.org+xml'
MEDIA_TYPE_VDC = 'application/vnd.vmware.vcloud.vdc+xml'

# Hardened parser: no entity expansion, no network access
_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, remove_blank_text=True)


@dataclass
class OrgLocation:
    """Where the account's org lives, as found in a login response."""
    endpoint: str
    url: str
    region: Region


@dataclass
class TaskStatus:
    """The interesting parts of a task document."""
    status: Optional[str]
    href: Optional[str]
    error: Optional[ErrorData]


def parse_xml(xml_content: Union[str, bytes]) -> etree._Element:
    """
    Parse an XML document.

    Args:
        xml_content: XML content; raw bytes keep the declared encoding

    Returns:
        Root element

    Raises:
        ProtocolError: If the document is not well-formed XML
    """
    try:
        if isinstance(xml_content, str):
            xml_content = xml_content.encode('utf-8')
        return etree.fromstring(xml_content, _PARSER)
    except etree.XMLSyntaxError as e:
        raise ProtocolError(f"Invalid XML from server: {e}")


def local_name(element) -> Optional[str]:
    """Tag name without namespace or prefix; None for comments and PIs."""
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def iter_named(root, name: str) -> Iterator[etree._Element]:
    """Iterate over root and all descendants whose local name is `name`."""
    for element in root.iter():
        if local_name(element) == name:
            yield element


def find_named(root, name: str) -> Optional[etree._Element]:
    return next(iter_named(root, name), None)


def children_named(element, name: str) -> Iterator[etree._Element]:
    """Direct children matching `name` case-insensitively."""
    wanted = name.lower()
    for child in element:
        tag = local_name(child)
        if tag is not None and tag.lower() == wanted:
            yield child


def child_text(element, name: str) -> Optional[str]:
    """Stripped text of the first direct child called `name`, if any."""
    for child in children_named(element, name):
        if child.text is not None and child.text.strip():
            return child.text.strip()
    return None


def attr(element, name: str) -> Optional[str]:
    value = element.get(name)
    return value.strip() if value is not None else None


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse an integer, returning None for missing or malformed values."""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Error documents
# ---------------------------------------------------------------------------

def error_from_element(element, status: int) -> ErrorData:
    """
    Decode an Error element.

    The message and codes may be carried as attributes or as child elements;
    child elements win when both are present.
    """
    data = ErrorData(status=status)
    message = child_text(element, 'message') or attr(element, 'message')
    major = child_text(element, 'majorErrorCode') or attr(element, 'majorErrorCode')
    minor = child_text(element, 'minorErrorCode') or attr(element, 'minorErrorCode')
    if message:
        data.description = message
    if major:
        data.major_code = major
    if minor:
        data.minor_code = minor
    return data


def parse_error(status: int, xml_content: Union[str, bytes, None]) -> Optional[ErrorData]:
    """
    Decode a vendor error document.

    Returns:
        ErrorData, or None if the body is empty, not XML, or has no Error element
    """
    if not xml_content or not xml_content.strip():
        return None
    try:
        root = parse_xml(xml_content)
    except ProtocolError:
        return None
    element = find_named(root, 'Error')
    if element is None:
        return None
    return error_from_element(element, status)


# ---------------------------------------------------------------------------
# Version advertisement
# ---------------------------------------------------------------------------

def parse_versions(xml_content: Union[str, bytes]) -> List[Version]:
    """All VersionInfo entries that carry both a version and a login URL."""
    root = parse_xml(xml_content)
    versions = []
    for info in iter_named(root, 'VersionInfo'):
        version = child_text(info, 'Version')
        login_url = child_text(info, 'LoginUrl')
        if version is None or login_url is None:
            continue
        versions.append(Version(version=version, login_url=login_url))
    return versions


# ---------------------------------------------------------------------------
# Org listings (login response)
# ---------------------------------------------------------------------------

def _region_id(url: str, compat: bool) -> str:
    org_id = url[url.rfind('/') + 1:]
    return f"/org/{org_id}" if compat else org_id


def parse_org_link_list(xml_content: Union[str, bytes], account: str, compat: bool) -> Optional[OrgLocation]:
    """
    Locate the account's org in a modern (1.5+) session document.

    Orgs appear as Link elements typed as org references; the one whose
    name equals the account wins.
    """
    root = parse_xml(xml_content)
    found = None
    for link in iter_named(root, 'Link'):
        if attr(link, 'type') != MEDIA_TYPE_ORG:
            continue
        name = attr(link, 'name')
        href = attr(link, 'href')
        if name != account or href is None or '/api/org' not in href:
            continue
        region = Region(provider_region_id=_region_id(href, compat), name=name)
        found = OrgLocation(endpoint=href[:href.rfind('/api/org')], url=href, region=region)
    return found


def parse_org_elements(xml_content: Union[str, bytes], account: str, compat: bool) -> Optional[OrgLocation]:
    """
    Locate the account's org in a legacy (pre-1.5) org list document.

    Orgs appear as Org elements; the one whose href ends in /org/ACCOUNT wins.
    """
    root = parse_xml(xml_content)
    found = None
    for org in iter_named(root, 'Org'):
        href = attr(org, 'href')
        if href is None or not href.endswith('/org/' + account):
            continue
        name = attr(org, 'name') or account
        region = Region(provider_region_id=_region_id(href, compat), name=name)
        found = OrgLocation(endpoint=_legacy_endpoint(href), url=href, region=region)
    return found


# Legacy org hrefs look like https://host/api/v1.0/org/ID
_LEGACY_API_PREFIX = re.compile(r'/api(/v[^/]+)?$')


def _legacy_endpoint(href: str) -> str:
    """Server root of a legacy org href, without the /api or /api/vN part."""
    prefix = href[:href.rfind('/org/')]
    return _LEGACY_API_PREFIX.sub('', prefix)


def parse_org_name(xml_content: str) -> Optional[str]:
    """Name attribute of the first Org element."""
    org = find_named(parse_xml(xml_content), 'Org')
    if org is None:
        return None
    return attr(org, 'name')


# ---------------------------------------------------------------------------
# VDCs
# ---------------------------------------------------------------------------

def iter_vdc_links(xml_content: Union[str, bytes]) -> Iterator[etree._Element]:
    """Link elements in an org document that reference a VDC by name."""
    root = parse_xml(xml_content)
    for link in iter_named(root, 'Link'):
        if attr(link, 'type') == MEDIA_TYPE_VDC and attr(link, 'name') is not None:
            yield link


def apply_vdc_detail(vdc: VDC, xml_content: Union[str, bytes]) -> bool:
    """
    Fill a VDC's action map, quotas and enablement from its detail document.

    Returns:
        False if the document has no Vdc element, True otherwise
    """
    element = find_named(parse_xml(xml_content), 'Vdc')
    if element is None:
        return False

    for child in element:
        tag = (local_name(child) or '').lower()
        if tag == 'link':
            if (attr(child, 'rel') or '').lower() != 'add':
                continue
            content_type = attr(child, 'type')
            href = attr(child, 'href')
            if content_type is not None and href is not None:
                vdc.actions[content_type] = href
        elif tag == 'vmquota':
            quota = parse_int(child.text)
            if quota is not None:
                vdc.vm_quota = quota
        elif tag == 'networkquota':
            quota = parse_int(child.text)
            if quota is not None:
                vdc.network_quota = quota
        elif tag == 'isenabled' and child.text is not None:
            if child.text.strip().lower() != 'true':
                vdc.data_center.active = False
                vdc.data_center.available = False
    return True


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

def parse_task(xml_content: str) -> Optional[TaskStatus]:
    """
    Read status, href and nested error of the first Task element.

    Returns:
        TaskStatus, or None if the document holds no Task
    """
    task = find_named(parse_xml(xml_content), 'Task')
    if task is None:
        return None
    error = None
    for child in children_named(task, 'Error'):
        # Task errors arrive inside a successful (200) response
        error = error_from_element(child, 200)
        break
    return TaskStatus(status=attr(task, 'status'), href=attr(task, 'href'), error=error)
