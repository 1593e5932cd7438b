"""
Data model for the vCloud API Client.
Versions, sessions and the org/VDC descriptors derived from them.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


# Quota value used when the server did not report a usable number
UNKNOWN_QUOTA = -2


@dataclass(frozen=True)
class Version:
    """An API version advertised by the server."""
    version: str
    login_url: str

    def __str__(self) -> str:
        return f"{self.version} [{self.login_url}]"


@dataclass
class Region:
    """The region an org maps to. Immutable for the lifetime of a session."""
    provider_region_id: str
    name: str
    jurisdiction: str = 'US'
    active: bool = True
    available: bool = True


@dataclass
class DataCenter:
    """Data-center descriptor backing a VDC."""
    provider_data_center_id: str
    region_id: str
    name: str
    active: bool = True
    available: bool = True


@dataclass
class VDC:
    """A virtual data center: action endpoints and quotas."""
    data_center: DataCenter
    actions: Dict[str, str] = field(default_factory=dict)
    vm_quota: int = UNKNOWN_QUOTA
    network_quota: int = UNKNOWN_QUOTA


@dataclass
class Session:
    """
    An authenticated org session.

    Created by a successful login and cached per account until it expires
    or is invalidated by a forced re-authentication.
    """
    token: str
    version: Version
    endpoint: Optional[str] = None
    region: Optional[Region] = None
    url: Optional[str] = None
    vdcs: List[VDC] = field(default_factory=list)


@dataclass
class ErrorData:
    """Decoded vendor error document."""
    status: int
    major_code: str = ''
    minor_code: str = ''
    description: str = 'Unknown'

    @property
    def title(self) -> str:
        return f"{self.major_code}:{self.minor_code}"
