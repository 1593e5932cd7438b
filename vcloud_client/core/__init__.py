"""Core infrastructure modules."""

from vcloud_client.core.cache import TTLCache
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
from vcloud_client.core.logger import Logger, get_logger, get_wire_logger

__all__ = [
    'TTLCache',
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
    'get_wire_logger',
]
