import threading
from http.server import ThreadingHTTPServer

import pytest

from vcloud_client.core.context import ProviderContext
from vcloud_client.handlers.cloud_method import CloudMethod
from vcloud_client.handlers.task_poller import TaskPollPolicy

from tests.fakes import ORG_NAME, PASSWORD, USER, FakeCloudHandler, FakeState


@pytest.fixture
def fake_cloud():
    server = ThreadingHTTPServer(("127.0.0.1", 0), FakeCloudHandler)
    server.state = FakeState()
    server.state.base = f"http://{server.server_address[0]}:{server.server_address[1]}"
    th = threading.Thread(target=server.serve_forever, daemon=True)
    th.start()
    try:
        yield server.state
    finally:
        server.shutdown()
        server.server_close()
        th.join(timeout=1.0)


@pytest.fixture
def context(fake_cloud):
    return ProviderContext(
        endpoint=fake_cloud.base,
        account_number=ORG_NAME,
        access_public=USER,
        access_private=PASSWORD,
        timeout=5,
    )


@pytest.fixture
def cloud(context):
    policy = TaskPollPolicy(interval_seconds=0.01, timeout_seconds=2)
    return CloudMethod(context, policy)
