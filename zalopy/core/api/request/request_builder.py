"""Request builder for API requests."""
from urllib.parse import urlencode, urlsplit, parse_qsl, urlunsplit
from typing import Dict, Optional, Any


class RequestBuilder:
    """Builds API request URLs and headers."""
    
    def __init__(self, api_version: int, api_type: int, origin: str = 'https://chat.zalo.me'):
        """Initializes request builder."""
        self.api_version = api_version
        self.api_type = api_type
        self.origin = origin
    
    def build_url(self, base_url: str, params: Optional[Dict[str, Any]] = None) -> str:
        """
        Builds request URL.
        
        Existing query fields in base_url are kept. Protocol version fields
        (zpw_ver, zpw_type) are added unless already present.
        """
        scheme, netloc, path, query, fragment = urlsplit(base_url)
        query_params = dict(parse_qsl(query, keep_blank_values=True))
        if params:
            query_params.update({k: str(v) for k, v in params.items() if v is not None})
        query_params.setdefault('zpw_ver', str(self.api_version))
        query_params.setdefault('zpw_type', str(self.api_type))
        return urlunsplit((scheme, netloc, path, urlencode(query_params), fragment))
    
    def build_headers(
        self,
        cookie: Optional[str] = None,
        user_agent: Optional[str] = None,
        extra: Optional[Dict[str, str]] = None
    ) -> Dict[str, str]:
        """Builds request headers."""
        headers = {
            'Accept': 'application/json, text/plain, */*',
            'Accept-Language': 'en-US,en;q=0.9',
            'Origin': self.origin,
            'Referer': f"{self.origin}/",
        }
        if cookie:
            headers['Cookie'] = cookie
        if user_agent:
            headers['User-Agent'] = user_agent
        if extra:
            headers.update(extra)
        return headers
