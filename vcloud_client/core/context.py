"""
Provider context for the vCloud API Client.
Bundles the account, credentials, connection flags and shared caches.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from vcloud_client.core.cache import TTLCache
from vcloud_client.core.models import Session, Version


VERSION_CACHE_TTL = 24 * 60 * 60
SESSION_CACHE_TTL = 25 * 60


def new_version_cache(ttl_seconds: float = VERSION_CACHE_TTL) -> 'TTLCache[List[Version]]':
    return TTLCache(ttl_seconds)


def new_session_cache(ttl_seconds: float = SESSION_CACHE_TTL) -> 'TTLCache[Session]':
    return TTLCache(ttl_seconds)


@dataclass
class ProviderContext:
    """
    Everything the engine needs to talk to one org on one cloud.

    Caches are passed in explicitly so several contexts (or several
    threads) working on the same account can share them.
    """
    endpoint: str
    account_number: str
    access_public: str
    access_private: str
    compat: bool = False
    insecure: bool = False
    version_preference: List[str] = field(default_factory=list)
    proxy: Optional[str] = None
    timeout: float = 30
    version_cache: TTLCache = field(default_factory=new_version_cache)
    session_cache: TTLCache = field(default_factory=new_session_cache)

    def __post_init__(self):
        self.endpoint = self.endpoint.rstrip('/')

    @property
    def cache_key(self) -> str:
        """Account-scoped cache key."""
        return f"{self.endpoint}#{self.account_number}"

    @property
    def login_user(self) -> str:
        """User name sent on login (user@org)."""
        return f"{self.access_public}@{self.account_number}"
