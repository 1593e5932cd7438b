"""
Task polling module for vCloud API Client.
Blocks until a server-side task reaches a terminal state.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from vcloud_client.core.errors import CloudError, ProtocolError, TaskTimeoutError, VendorFault
from vcloud_client.core.logger import get_logger
from vcloud_client.core.models import ErrorData
from vcloud_client.handlers import xml_documents
from vcloud_client.handlers.url_builder import to_id


STATUS_SUCCESS = 'success'
STATUS_ERROR = 'error'


@dataclass
class TaskPollPolicy:
    """How long and how often to poll, and what a timeout means."""
    interval_seconds: float = 15
    timeout_seconds: float = 30 * 60
    raise_on_timeout: bool = False


class TaskPoller:
    """
    Polls a task until it succeeds, fails or runs out of time.

    A timeout is logged and, unless the policy says otherwise, the call
    returns normally: callers cannot tell a slow success from a give-up.
    """

    def __init__(self, api_client, policy: Optional[TaskPollPolicy] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize task poller.

        Args:
            api_client: Request executor used to re-fetch the task
            policy: Poll interval, timeout and timeout behaviour
            sleep: Sleep function (injectable for tests)
            clock: Monotonic time source (injectable for tests)
        """
        self.api_client = api_client
        self.policy = policy or TaskPollPolicy()
        self._sleep = sleep
        self._clock = clock

    def wait_for(self, task_xml: Optional[str]) -> None:
        """
        Wait for the task described by task_xml to finish.

        Args:
            task_xml: Task document returned by a prior POST (may be empty)

        Raises:
            VendorFault: If the task ends in error
            TaskTimeoutError: On timeout, when the policy asks for it
        """
        deadline = self._clock() + self.policy.timeout_seconds
        task_id = None
        logger = get_logger()

        while self._clock() < deadline:
            if not task_xml:
                return
            try:
                task = xml_documents.parse_task(task_xml)
            except ProtocolError as e:
                logger.warning(f"Unreadable task document, not waiting: {e}")
                return
            if task is None:
                return

            if task.status == STATUS_SUCCESS:
                logger.debug(f"Task {task_id or task.href} succeeded")
                return
            if task.status == STATUS_ERROR:
                error = task.error or ErrorData(status=200, description='Task failed without error details')
                logger.error(f"Task {task_id or task.href} failed: {error.description}")
                raise VendorFault(error)

            if task_id is None:
                if task.href is None:
                    return
                task_id = to_id(task.href, self.api_client.compat)
                logger.info(f"Waiting for task {task_id} (status: {task.status})")

            self._sleep(self.policy.interval_seconds)
            try:
                task_xml = self.api_client.get('task', task_id)
            except CloudError as e:
                logger.warning(f"Could not refresh task {task_id}, will retry: {e}")

        logger.warning(f"Task timed out: {task_id}")
        if self.policy.raise_on_timeout:
            raise TaskTimeoutError(task_id, self.policy.timeout_seconds)
