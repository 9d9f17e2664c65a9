"""
Session context models.

Holds the values negotiated at login (secret key, credentials, server
settings) that the upload subsystem consumes.
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional


class MessageType(IntEnum):
    """Destination thread type."""
    DIRECT_MESSAGE = 0
    GROUP_MESSAGE = 1


@dataclass
class ShareFileSettings:
    """
    Platform limits for shared files.

    Attributes:
        max_file: Maximum number of files per upload call
        max_size_share_file_v3: Maximum size per file in MB
        restricted_ext_file: Extensions that may not be uploaded
        chunk_size_file: Chunk size in bytes
    """
    max_file: int = 50
    max_size_share_file_v3: int = 1024
    restricted_ext_file: List[str] = field(default_factory=list)
    chunk_size_file: int = 3 * 1024 * 1024

    @property
    def max_size_bytes(self) -> int:
        """Maximum size per file in bytes."""
        return self.max_size_share_file_v3 * 1024 * 1024

    def is_restricted(self, extension: str) -> bool:
        """Check if an extension (without dot) is restricted."""
        return extension.lower() in {ext.lower() for ext in self.restricted_ext_file}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ShareFileSettings':
        """Create from the server's 'sharefile' feature dict."""
        defaults = cls()
        return cls(
            max_file=int(data.get('max_file', defaults.max_file)),
            max_size_share_file_v3=int(
                data.get('max_size_share_file_v3', defaults.max_size_share_file_v3)
            ),
            restricted_ext_file=list(data.get('restricted_ext_file') or []),
            chunk_size_file=int(data.get('chunk_size_file', defaults.chunk_size_file)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'max_file': self.max_file,
            'max_size_share_file_v3': self.max_size_share_file_v3,
            'restricted_ext_file': list(self.restricted_ext_file),
            'chunk_size_file': self.chunk_size_file,
        }


@dataclass
class AppContext:
    """
    Session context for an authenticated client.

    Attributes:
        secret_key: Base64 session key used to encrypt request parameters
        imei: Device id
        cookie: Cookie header value
        user_agent: User agent of the logged-in browser
        uid: Own user id
        language: UI language
        api_version: Protocol version token (zpw_ver)
        api_type: Protocol type token (zpw_type)
        settings: Share-file limits, None until server info is loaded
    """
    secret_key: Optional[str] = None
    imei: Optional[str] = None
    cookie: Optional[str] = None
    user_agent: Optional[str] = None
    uid: Optional[str] = None
    language: str = 'vi'
    api_version: int = 637
    api_type: int = 30
    settings: Optional[ShareFileSettings] = None

    def load_settings(self, server_info: Dict[str, Any]) -> ShareFileSettings:
        """
        Load share-file settings from a server info payload.

        The server currently answers with a misspelled 'setttings' key,
        so both spellings are accepted.

        Args:
            server_info: Decoded server info response

        Returns:
            Loaded settings
        """
        settings = server_info.get('setttings') or server_info.get('settings') or {}
        sharefile = settings.get('features', {}).get('sharefile', {})
        self.settings = ShareFileSettings.from_dict(sharefile)
        return self.settings

    def missing_fields(self) -> List[str]:
        """Return the names of required fields that are not set."""
        required = {
            'secret_key': 'Secret key',
            'imei': 'IMEI',
            'cookie': 'Cookie',
            'user_agent': 'User agent',
        }
        return [label for attr, label in required.items() if not getattr(self, attr)]
