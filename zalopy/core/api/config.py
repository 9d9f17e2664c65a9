"""
API configuration module.

Transport settings for the HTTP layer. Session values (cookie, user agent,
secret key) live in AppContext, not here.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import ssl

import aiohttp


@dataclass
class ProxyConfig:
    """
    Proxy configuration.

    Credentials are sent with aiohttp's proxy_auth rather than embedded
    in the URL.
    """
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def proxy_auth(self) -> Optional[aiohttp.BasicAuth]:
        if self.username is None:
            return None
        return aiohttp.BasicAuth(self.username, self.password or '')

    def request_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ClientSession.request()."""
        if not self.url:
            return {}
        return {'proxy': self.url, 'proxy_auth': self.proxy_auth()}


@dataclass
class SSLConfig:
    """TLS settings for the file service connection."""
    verify: bool = True
    ca_file: Optional[str] = None

    def ssl_context(self):
        """SSL context for the connector, or False to skip verification."""
        if not self.verify:
            return False
        return ssl.create_default_context(cafile=self.ca_file)


@dataclass
class TimeoutConfig:
    """
    Per-request timeouts in seconds.

    A chunk is at most a few MB, so total bounds one chunk request,
    not a whole upload call.
    """
    total: Optional[float] = 120.0
    connect: Optional[float] = 15.0
    sock_read: Optional[float] = 60.0

    def client_timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read
        )


@dataclass
class APIConfig:
    """
    HTTP configuration for AsyncAPIClient.

    Example:
        >>> config = APIConfig.with_proxy("http://127.0.0.1:8080", limit=20)
        >>> client = ZaloClient(context, service_map, config=config)
    """
    # Web origin the private API expects in Origin/Referer
    origin: str = 'https://chat.zalo.me'

    # Used only when the session context has no user agent
    user_agent: str = 'zalopy/1.0.0'

    proxy: Optional[ProxyConfig] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)

    extra_headers: Dict[str, str] = field(default_factory=dict)

    log_level: int = 20  # logging.INFO

    # Connection pool (0 means no limit); every chunk of a call is in flight at once
    limit: int = 100
    limit_per_host: int = 0

    @classmethod
    def default(cls) -> 'APIConfig':
        return cls()

    @classmethod
    def with_proxy(cls, proxy_url: str, username: Optional[str] = None,
                   password: Optional[str] = None, **kwargs) -> 'APIConfig':
        """Configuration routing every request through a proxy."""
        return cls(
            proxy=ProxyConfig(url=proxy_url, username=username, password=password),
            **kwargs
        )

    @classmethod
    def insecure(cls, **kwargs) -> 'APIConfig':
        """Configuration with certificate verification disabled."""
        return cls(ssl=SSLConfig(verify=False), **kwargs)

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for aiohttp.TCPConnector."""
        return {
            'limit': self.limit,
            'limit_per_host': self.limit_per_host,
            'ssl': self.ssl.ssl_context(),
        }

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for aiohttp.ClientSession."""
        return {'timeout': self.timeout.client_timeout()}

    def get_request_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments added to every request."""
        return self.proxy.request_kwargs() if self.proxy else {}
