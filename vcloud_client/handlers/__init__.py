"""Handlers for version negotiation, sessions, requests and tasks."""

from vcloud_client.handlers.api_client import APIClient, RequestResult
from vcloud_client.handlers.authenticator import SessionAuthenticator
from vcloud_client.handlers.cloud_method import CloudMethod
from vcloud_client.handlers.task_poller import TaskPoller, TaskPollPolicy
from vcloud_client.handlers.transport import Transport
from vcloud_client.handlers.vdc_loader import VDCLoader
from vcloud_client.handlers.version_negotiator import VersionNegotiator

__all__ = [
    'APIClient',
    'RequestResult',
    'SessionAuthenticator',
    'CloudMethod',
    'TaskPoller',
    'TaskPollPolicy',
    'Transport',
    'VDCLoader',
    'VersionNegotiator',
]
