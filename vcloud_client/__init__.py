"""
vCloud API Client Package
Version negotiation, session handling, requests and task polling
for the vCloud Director API.
"""

__version__ = '1.0.0'

from vcloud_client.core.config import Config, ConfigError
from vcloud_client.core.context import ProviderContext
from vcloud_client.core.errors import (
    AuthenticationError,
    CloudError,
    GenericHTTPFault,
    InternalTransportError,
    ProtocolError,
    TaskTimeoutError,
    VendorFault,
)
from vcloud_client.core.logger import Logger, get_logger
from vcloud_client.core.models import DataCenter, Region, Session, VDC, Version
from vcloud_client.handlers.cloud_method import CloudMethod
from vcloud_client.handlers.task_poller import TaskPollPolicy

__all__ = [
    'Config',
    'ConfigError',
    'ProviderContext',
    'CloudError',
    'AuthenticationError',
    'ProtocolError',
    'VendorFault',
    'GenericHTTPFault',
    'InternalTransportError',
    'TaskTimeoutError',
    'Logger',
    'get_logger',
    'DataCenter',
    'Region',
    'Session',
    'VDC',
    'Version',
    'CloudMethod',
    'TaskPollPolicy',
]
