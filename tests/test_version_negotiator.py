import pytest

from vcloud_client.core.errors import ProtocolError
from vcloud_client.core.models import Version
from vcloud_client.handlers.transport import Transport
from vcloud_client.handlers.version_negotiator import (
    VersionNegotiator,
    is_supported,
    matches,
    order_versions,
)


def _v(number):
    return Version(version=number, login_url=f"https://cloud/api/{number}/sessions")


def test_canonical_order_without_preference():
    ordered = order_versions([_v("1.0"), _v("5.1"), _v("1.5")])
    assert [v.version for v in ordered] == ["5.1", "1.5", "1.0"]


def test_preference_wins_over_canonical_order():
    ordered = order_versions([_v("5.1"), _v("1.5"), _v("1.0")], ["1.0"])
    assert ordered[0].version == "1.0"
    assert [v.version for v in ordered[1:]] == ["5.1", "1.5"]


def test_unknown_versions_are_dropped():
    ordered = order_versions([_v("9.9"), _v("1.5"), _v("27.0")])
    assert [v.version for v in ordered] == ["1.5"]


def test_is_supported():
    assert is_supported("0.8")
    assert not is_supported("5.5")


def test_matches_minimum_and_maximum():
    assert matches("5.1", "1.5")
    assert matches("1.5", "1.5")
    assert not matches("1.0", "1.5")
    assert matches("1.0", "0.9", "1.5")
    assert not matches("5.1", "0.9", "1.5")
    assert not matches("7.0", "1.5")


def test_select_version_from_server(context, fake_cloud):
    negotiator = VersionNegotiator(context, Transport(context))
    selected = negotiator.select_version()
    assert selected.version == "5.1"
    assert selected.login_url == f"{fake_cloud.base}/api/sessions"


def test_select_version_honours_preference(context, fake_cloud):
    context.version_preference = ["1.0"]
    negotiator = VersionNegotiator(context, Transport(context))
    assert negotiator.select_version().version == "1.0"


def test_versions_are_cached(context, fake_cloud):
    negotiator = VersionNegotiator(context, Transport(context))
    negotiator.select_version()
    negotiator.select_version()
    discovery_calls = [c for c in fake_cloud.calls if c[1] == "/api/versions"]
    assert len(discovery_calls) == 1
    assert [v.version for v in negotiator.supported_versions()] == ["5.1", "1.5", "1.0"]


def test_no_supported_version(context, fake_cloud):
    fake_cloud.versions = ["6.0", "7.0"]
    negotiator = VersionNegotiator(context, Transport(context))
    with pytest.raises(ProtocolError) as exc:
        negotiator.select_version()
    assert "supported version" in str(exc.value)
