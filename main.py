#!/usr/bin/env python3
"""
vCloud API Client - Entry Point
Session, request and task handling for the vCloud Director API.
"""

import sys

# Add package directory to path for proper imports
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent))

from vcloud_client.cli import main

if __name__ == '__main__':
    sys.exit(main())
