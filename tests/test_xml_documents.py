import pytest

from vcloud_client.core.errors import ProtocolError
from vcloud_client.core.models import UNKNOWN_QUOTA, DataCenter, VDC
from vcloud_client.handlers import xml_documents


NS = 'xmlns="http://www.vmware.com/vcloud/v1.5"'


def test_parse_error_from_attributes():
    xml = f'<Error {NS} message="Disk busy" majorErrorCode="400" minorErrorCode="BUSY_ENTITY"/>'
    data = xml_documents.parse_error(400, xml)
    assert data.status == 400
    assert data.description == "Disk busy"
    assert data.title == "400:BUSY_ENTITY"


def test_parse_error_from_child_elements():
    xml = (
        "<vc:Error xmlns:vc='urn:x'><vc:message>No quota left</vc:message>"
        "<vc:majorErrorCode>403</vc:majorErrorCode></vc:Error>"
    )
    data = xml_documents.parse_error(403, xml)
    assert data.description == "No quota left"
    assert data.major_code == "403"
    assert data.minor_code == ""


@pytest.mark.parametrize("body", [None, "", "   ", "not xml", "<Other/>"])
def test_parse_error_undecodable(body):
    assert xml_documents.parse_error(500, body) is None


def test_parse_xml_rejects_garbage():
    with pytest.raises(ProtocolError):
        xml_documents.parse_xml("<unclosed>")


def test_parse_versions_skips_incomplete_entries():
    xml = (
        "<SupportedVersions>"
        "<VersionInfo><Version>1.5</Version><LoginUrl>https://c/api/sessions</LoginUrl></VersionInfo>"
        "<VersionInfo><Version>5.1</Version></VersionInfo>"
        "</SupportedVersions>"
    )
    versions = xml_documents.parse_versions(xml)
    assert [(v.version, v.login_url) for v in versions] == [("1.5", "https://c/api/sessions")]


def test_modern_org_listing():
    xml = (
        f"<Session {NS}>"
        '<Link type="application/vnd.vmware.vcloud.org+xml" name="other" href="https://c/api/org/o-9"/>'
        '<Link type="application/vnd.vmware.vcloud.org+xml" name="acme" href="https://c/api/org/o-1"/>'
        "</Session>"
    )
    location = xml_documents.parse_org_link_list(xml, "acme", compat=False)
    assert location.endpoint == "https://c"
    assert location.url == "https://c/api/org/o-1"
    assert location.region.provider_region_id == "o-1"
    assert location.region.name == "acme"
    assert location.region.jurisdiction == "US"

    compat = xml_documents.parse_org_link_list(xml, "acme", compat=True)
    assert compat.region.provider_region_id == "/org/o-1"


def test_legacy_org_listing():
    xml = (
        '<OrgList xmlns="http://www.vmware.com/vcloud/v1">'
        '<Org type="application/vnd.vmware.vcloud.org+xml" href="https://c/api/v1.0/org/other"/>'
        '<Org type="application/vnd.vmware.vcloud.org+xml" href="https://c/api/v1.0/org/acme"/>'
        "</OrgList>"
    )
    location = xml_documents.parse_org_elements(xml, "acme", compat=True)
    assert location.endpoint == "https://c"
    assert location.url == "https://c/api/v1.0/org/acme"
    assert location.region.provider_region_id == "/org/acme"
    # no name attribute: the account stands in
    assert location.region.name == "acme"


@pytest.mark.parametrize("href,endpoint", [
    ("https://c/api/v0.9/org/acme", "https://c"),
    ("https://c/api/org/acme", "https://c"),
    ("https://c/cloud/api/v1.0/org/acme", "https://c/cloud"),
    ("https://c/org/acme", "https://c"),
])
def test_legacy_endpoint_drops_api_prefix(href, endpoint):
    xml = f'<OrgList xmlns="http://www.vmware.com/vcloud/v1"><Org name="acme" href="{href}"/></OrgList>'
    assert xml_documents.parse_org_elements(xml, "acme", compat=False).endpoint == endpoint


def test_parse_bytes_honours_declared_encoding():
    xml = '<?xml version="1.0" encoding="ISO-8859-1"?><Org name="Café"/>'.encode("iso-8859-1")
    assert xml_documents.parse_org_name(xml) == "Café"


def test_org_listing_without_match():
    xml = f'<Session {NS}><Link type="application/vnd.vmware.vcloud.org+xml" name="x" href="https://c/api/org/1"/></Session>'
    assert xml_documents.parse_org_link_list(xml, "acme", compat=False) is None
    assert xml_documents.parse_org_elements(xml, "acme", compat=False) is None


def test_vdc_detail_ignores_malformed_quota():
    vdc = VDC(data_center=DataCenter("v-1", "o-1", "Main"))
    xml = (
        f"<Vdc {NS}>"
        '<Link rel="add" type="application/vnd.vmware.vcloud.diskCreateParams+xml" href="https://c/api/vdc/v-1/disk"/>'
        '<Link rel="edit" type="application/vnd.vmware.vcloud.vdc+xml" href="https://c/api/vdc/v-1"/>'
        "<VmQuota>lots</VmQuota><NetworkQuota>3</NetworkQuota><IsEnabled>false</IsEnabled>"
        "</Vdc>"
    )
    assert xml_documents.apply_vdc_detail(vdc, xml)
    assert vdc.actions == {
        "application/vnd.vmware.vcloud.diskCreateParams+xml": "https://c/api/vdc/v-1/disk"
    }
    assert vdc.vm_quota == UNKNOWN_QUOTA
    assert vdc.network_quota == 3
    assert not vdc.data_center.active
    assert not vdc.data_center.available


def test_vdc_detail_without_vdc_element():
    vdc = VDC(data_center=DataCenter("v-1", "o-1", "Main"))
    assert not xml_documents.apply_vdc_detail(vdc, "<Org/>")


def test_parse_task_with_error():
    xml = (
        f'<Task {NS} status="error" href="https://c/api/task/t-1">'
        '<Error message="Out of space" majorErrorCode="500" minorErrorCode="INTERNAL"/>'
        "</Task>"
    )
    task = xml_documents.parse_task(xml)
    assert task.status == "error"
    assert task.href == "https://c/api/task/t-1"
    assert task.error.description == "Out of space"
    assert task.error.status == 200


def test_parse_task_missing():
    assert xml_documents.parse_task("<Disk/>") is None
