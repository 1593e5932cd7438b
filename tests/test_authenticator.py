import pytest

from vcloud_client.core.errors import AuthenticationError, CloudError, ProtocolError, VendorFault
from vcloud_client.handlers.authenticator import SessionAuthenticator, org_parser_for
from vcloud_client.handlers import xml_documents
from vcloud_client.handlers.transport import Transport
from vcloud_client.core.models import Version

from tests.fakes import ORG_ID, ORG_NAME, VDC_ID


def _authenticator(context):
    return SessionAuthenticator(context, Transport(context))


def test_login_builds_session(context, fake_cloud):
    session = _authenticator(context).authenticate()
    assert session.token == "token-1"
    assert session.version.version == "5.1"
    assert session.endpoint == fake_cloud.base
    assert session.url == f"{fake_cloud.base}/api/org/{ORG_ID}"
    assert session.region.provider_region_id == ORG_ID
    assert session.region.name == ORG_NAME
    assert [v.data_center.provider_data_center_id for v in session.vdcs] == [VDC_ID]


def test_login_sends_basic_credentials_and_accept(context, fake_cloud):
    _authenticator(context).authenticate()
    method, path, headers = next(c for c in fake_cloud.calls if c[1] == "/api/sessions")
    lowered = {k.lower(): v for k, v in headers.items()}
    assert lowered["authorization"].startswith("Basic ")
    assert lowered["accept"] == "application/*+xml;version=5.1,application/*+xml;version=5.1"


def test_cached_session_is_reused(context, fake_cloud):
    auth = _authenticator(context)
    first = auth.authenticate(False)
    second = auth.authenticate(False)
    assert first.token == second.token
    assert fake_cloud.logins == 1


def test_force_always_logs_in_again(context, fake_cloud):
    auth = _authenticator(context)
    first = auth.authenticate(False)
    second = auth.authenticate(True)
    assert fake_cloud.logins == 2
    assert first.token != second.token
    assert auth.authenticate(False).token == second.token


def test_session_cache_shared_between_authenticators(context, fake_cloud):
    _authenticator(context).authenticate()
    _authenticator(context).authenticate()
    assert fake_cloud.logins == 1


def test_compat_region_id(context, fake_cloud):
    context.compat = True
    session = _authenticator(context).authenticate()
    assert session.region.provider_region_id == f"/org/{ORG_ID}"
    assert session.vdcs[0].data_center.provider_data_center_id == f"/vdc/{VDC_ID}"


def test_missing_token(context, fake_cloud):
    fake_cloud.send_token = False
    with pytest.raises(AuthenticationError):
        _authenticator(context).authenticate()
    assert context.session_cache.get(context.cache_key) is None


def test_no_matching_org(context, fake_cloud):
    fake_cloud.org_name = "someone-else"
    with pytest.raises(ProtocolError) as exc:
        _authenticator(context).authenticate()
    assert "No org was identified" in str(exc.value)


def test_rejected_login_is_decoded(context, fake_cloud):
    fake_cloud.login_status = 401
    with pytest.raises(VendorFault) as exc:
        _authenticator(context).authenticate()
    assert exc.value.description == "Bad credentials"
    assert exc.value.minor_code == "ACCESS_DENIED"
    assert exc.value.status == 401


def test_org_parser_selection():
    assert org_parser_for(Version("5.1", "u")) is xml_documents.parse_org_link_list
    assert org_parser_for(Version("1.5", "u")) is xml_documents.parse_org_link_list
    assert org_parser_for(Version("1.0", "u")) is xml_documents.parse_org_elements
    assert org_parser_for(Version("0.8", "u")) is xml_documents.parse_org_elements


def test_failed_vdc_load_is_not_cached(context, fake_cloud):
    auth = _authenticator(context)
    # login succeeds, the org document fetch is rejected
    fake_cloud.reject_next = 1
    with pytest.raises(CloudError):
        auth.authenticate(False)
    assert fake_cloud.logins == 1
    assert context.session_cache.get(context.cache_key) is None

    session = auth.authenticate(False)
    assert fake_cloud.logins == 2
    assert [v.data_center.provider_data_center_id for v in session.vdcs] == [VDC_ID]


def test_legacy_login_uses_server_root_as_endpoint(context, fake_cloud):
    fake_cloud.legacy = True
    fake_cloud.versions = ["1.0"]
    session = _authenticator(context).authenticate()
    assert session.version.version == "1.0"
    assert session.endpoint == fake_cloud.base
    assert session.url == f"{fake_cloud.base}/api/v1.0/org/{ORG_NAME}"
    assert session.region.provider_region_id == ORG_NAME

    vdc = session.vdcs[0]
    assert vdc.vm_quota == 10
    assert vdc.network_quota == 5
    assert any(c[0] == "GET" and c[1] == f"/api/v1.0/vdc/{VDC_ID}" for c in fake_cloud.calls)
