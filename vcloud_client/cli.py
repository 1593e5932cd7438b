"""
CLI module for vCloud API Client.
Handles all command-line interface operations.
"""

import sys
import argparse
from pathlib import Path
from typing import Optional

from vcloud_client.core.config import Config, ConfigError
from vcloud_client.core.errors import (
    AuthenticationError,
    CloudError,
    InternalTransportError,
)
from vcloud_client.core.logger import Logger, get_logger
from vcloud_client.core.models import UNKNOWN_QUOTA
from vcloud_client.handlers.cloud_method import CloudMethod
from vcloud_client.handlers.task_poller import TaskPollPolicy


# Exit codes
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_AUTH_ERROR = 2
EXIT_API_ERROR = 3
EXIT_NETWORK_ERROR = 4


def describe_quota(value: int) -> str:
    return 'unknown' if value == UNKNOWN_QUOTA else str(value)


def exit_code_for(error: CloudError) -> int:
    """Map an engine error to a process exit code."""
    if isinstance(error, AuthenticationError):
        return EXIT_AUTH_ERROR
    if isinstance(error, InternalTransportError):
        return EXIT_NETWORK_ERROR
    return EXIT_API_ERROR


class VCloudAPIClient:
    """Main application controller."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the application.

        Args:
            config_path: Optional path to config file
        """
        try:
            self.config = Config(config_path)
        except ConfigError as e:
            print(f"Configuration Error: {e}", file=sys.stderr)
            sys.exit(EXIT_CONFIG_ERROR)

        # Initialize logger (must be done before other components)
        try:
            self.config.ensure_directories()
            Logger.initialize(
                self.config.log_file,
                self.config.log_level,
                self.config.log_max_size_mb,
                self.config.log_backup_count,
                self.config.log_wire,
            )
            self.logger = get_logger()

            self.logger.info("=" * 70)
            self.logger.info("vCloud API Client Starting")
            self.logger.info(f"Endpoint: {self.config.endpoint}")
            self.logger.info(f"Org: {self.config.account}")
            self.logger.info("=" * 70)
        except (ConfigError, OSError) as e:
            print(f"Logger Initialization Error: {e}", file=sys.stderr)
            sys.exit(EXIT_CONFIG_ERROR)

        policy = TaskPollPolicy(
            interval_seconds=self.config.task_poll_interval,
            timeout_seconds=self.config.task_timeout_minutes * 60,
            raise_on_timeout=self.config.task_raise_on_timeout,
        )
        self.cloud = CloudMethod(self.config.to_context(), policy)


def cmd_validate(args, client: VCloudAPIClient) -> int:
    """Handle the 'validate' command."""
    print("Validating configuration...")
    print(f"✓ Configuration loaded successfully")
    print(f"✓ Endpoint: {client.config.endpoint}")
    print(f"✓ Org: {client.config.account}")
    print(f"✓ User: {client.config.user}")
    print(f"✓ Compat mode: {'on' if client.config.compat else 'off'}")

    print("\nTesting login...")
    session = client.cloud.authenticate(True)
    print(f"✓ Logged in (API {session.version.version})")
    print(f"  Region: {session.region.provider_region_id} ({session.region.name})")

    print("\n✓ All validations passed")
    return EXIT_SUCCESS


def cmd_versions(args, client: VCloudAPIClient) -> int:
    """Handle the 'versions' command."""
    for version in client.cloud.negotiator.supported_versions():
        print(str(version))
    return EXIT_SUCCESS


def cmd_login(args, client: VCloudAPIClient) -> int:
    """Handle the 'login' command."""
    session = client.cloud.authenticate(True)
    print(f"API version: {session.version.version}")
    print(f"Endpoint:    {session.endpoint}")
    print(f"Org URL:     {session.url}")
    print(f"Region:      {session.region.provider_region_id} ({session.region.name})")
    print(f"VDCs:        {len(session.vdcs)}")
    return EXIT_SUCCESS


def cmd_datacenters(args, client: VCloudAPIClient) -> int:
    """Handle the 'datacenters' command."""
    session = client.cloud.authenticate(False)
    for vdc in session.vdcs:
        dc = vdc.data_center
        state = 'active' if dc.active else 'inactive'
        print(f"{dc.provider_data_center_id}  {dc.name}  [{state}]  "
              f"vm quota: {describe_quota(vdc.vm_quota)}  "
              f"network quota: {describe_quota(vdc.network_quota)}")
    print(f"\nTotal VM quota: {describe_quota(client.cloud.get_vm_quota())}")
    print(f"Total network quota: {describe_quota(client.cloud.get_network_quota())}")
    return EXIT_SUCCESS


def cmd_get(args, client: VCloudAPIClient) -> int:
    """Handle the 'get' command."""
    body = client.cloud.get(args.resource, args.id)
    if body is None:
        print(f"Not found: {args.resource} {args.id or ''}", file=sys.stderr)
        return EXIT_API_ERROR
    print(body)
    return EXIT_SUCCESS


def cmd_delete(args, client: VCloudAPIClient) -> int:
    """Handle the 'delete' command."""
    client.cloud.delete(args.resource, args.id)
    print(f"Deleted {args.resource} {args.id}")
    return EXIT_SUCCESS


def cmd_wait(args, client: VCloudAPIClient) -> int:
    """Handle the 'wait' command."""
    task_file = Path(args.task_file)
    try:
        task_xml = task_file.read_text(encoding='utf-8')
    except OSError as e:
        print(f"Error: cannot read {task_file}: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    client.cloud.wait_for(task_xml)
    print("Task finished")
    return EXIT_SUCCESS


COMMANDS = {
    'validate': cmd_validate,
    'versions': cmd_versions,
    'login': cmd_login,
    'datacenters': cmd_datacenters,
    'get': cmd_get,
    'delete': cmd_delete,
    'wait': cmd_wait,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='vCloud API Client - sessions, requests and task polling for vCloud Director',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  # Check configuration and credentials
  %(prog)s validate

  # Show data centers and quotas
  %(prog)s datacenters

  # Fetch a resource
  %(prog)s get vdc 5f1c...

  # Wait for a task saved from an earlier call
  %(prog)s wait task.xml
        '''
    )

    parser.add_argument(
        '--config',
        help='Path to configuration file (default: config/config.yaml)',
        default=None
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    subparsers.add_parser('validate', help='Validate configuration and log in')
    subparsers.add_parser('versions', help='List supported API versions offered by the server')
    subparsers.add_parser('login', help='Force a new session and show its details')
    subparsers.add_parser('datacenters', help='List VDCs with their quotas')

    get_parser = subparsers.add_parser('get', help='Fetch a resource')
    get_parser.add_argument('resource', help='Resource kind, e.g. vdc, disk, vApp')
    get_parser.add_argument('id', nargs='?', default=None, help='Resource id')

    delete_parser = subparsers.add_parser('delete', help='Delete a resource')
    delete_parser.add_argument('resource', help='Resource kind')
    delete_parser.add_argument('id', help='Resource id')

    wait_parser = subparsers.add_parser('wait', help='Wait for a task document to complete')
    wait_parser.add_argument('task_file', help='File holding the task XML')

    return parser


def main(argv=None):
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_CONFIG_ERROR

    # Initialize client
    try:
        client = VCloudAPIClient(args.config)
    except SystemExit as e:
        return e.code

    try:
        return COMMANDS[args.command](args, client)
    except CloudError as e:
        client.logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return exit_code_for(e)


if __name__ == '__main__':
    sys.exit(main())
