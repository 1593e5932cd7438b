import pytest

from vcloud_client.core.errors import GenericHTTPFault, TaskTimeoutError, VendorFault
from vcloud_client.handlers.task_poller import TaskPoller, TaskPollPolicy


def _task(status, href="https://c/api/task/t-1", inner=""):
    return f'<Task xmlns="http://www.vmware.com/vcloud/v1.5" status="{status}" href="{href}">{inner}</Task>'


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class StubAPI:
    """Serves task documents in order; exceptions in the list are raised."""

    compat = False

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, resource, resource_id=None):
        self.calls.append((resource, resource_id))
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item


def _poller(api, clock, **policy):
    policy.setdefault("interval_seconds", 15)
    policy.setdefault("timeout_seconds", 30 * 60)
    return TaskPoller(api, TaskPollPolicy(**policy), sleep=clock.sleep, clock=clock)


def test_success_returns_without_polling():
    clock = FakeClock()
    api = StubAPI(_task("running"))
    _poller(api, clock).wait_for(_task("success"))
    assert api.calls == []
    assert clock.sleeps == []


@pytest.mark.parametrize("document", [None, "", "<Disk/>", "<broken"])
def test_empty_or_foreign_documents_return(document):
    clock = FakeClock()
    api = StubAPI(_task("running"))
    _poller(api, clock).wait_for(document)
    assert api.calls == []


def test_error_raises_nested_fault():
    clock = FakeClock()
    inner = '<Error message="Datastore full" majorErrorCode="500" minorErrorCode="INTERNAL_SERVER_ERROR"/>'
    with pytest.raises(VendorFault) as exc:
        _poller(StubAPI(""), clock).wait_for(_task("error", inner=inner))
    assert exc.value.description == "Datastore full"
    assert exc.value.major_code == "500"


def test_error_without_details_still_fails():
    with pytest.raises(VendorFault):
        _poller(StubAPI(""), FakeClock()).wait_for(_task("error"))


def test_polls_until_success():
    clock = FakeClock()
    api = StubAPI(_task("running"), _task("running"), _task("success"))
    _poller(api, clock).wait_for(_task("queued"))
    assert api.calls == [("task", "t-1")] * 3
    assert clock.sleeps == [15, 15, 15]


def test_polls_until_error():
    clock = FakeClock()
    inner = '<Error message="Cancelled by user"/>'
    api = StubAPI(_task("running"), _task("error", inner=inner))
    with pytest.raises(VendorFault) as exc:
        _poller(api, clock).wait_for(_task("running"))
    assert exc.value.description == "Cancelled by user"


def test_fetch_failures_are_retried():
    clock = FakeClock()
    api = StubAPI(GenericHTTPFault(503, "Service Unavailable"), _task("success"))
    _poller(api, clock).wait_for(_task("running"))
    assert len(api.calls) == 2


def test_timeout_returns_quietly_by_default():
    clock = FakeClock()
    api = StubAPI(_task("running"))
    _poller(api, clock, timeout_seconds=60).wait_for(_task("running"))
    assert clock.now >= 60
    assert len(api.calls) == 4


def test_timeout_can_raise():
    clock = FakeClock()
    api = StubAPI(_task("running"))
    with pytest.raises(TaskTimeoutError) as exc:
        _poller(api, clock, timeout_seconds=60, raise_on_timeout=True).wait_for(_task("running"))
    assert exc.value.task_id == "t-1"


def test_task_without_href_is_not_polled():
    clock = FakeClock()
    api = StubAPI(_task("running"))
    _poller(api, clock).wait_for('<Task status="running"/>')
    assert api.calls == []


def test_wait_for_against_server(cloud, fake_cloud):
    fake_cloud.task_states = ["running", "success"]
    task_xml = cloud.post_action("instantiateVApp", None, "<x/>")
    cloud.wait_for(task_xml)
    assert fake_cloud.task_calls == 2
