import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from headers import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY
from settings import CREDENTIAL_BACKEND, TOKEN_FILE

logger = logging.getLogger(__name__)


class CredentialStore:
    """Storage for the access/refresh token pair

    Implementations must make ``set_tokens`` replace both values together so a
    reader never observes a half-rotated pair.
    """

    backend = "abstract"

    def get_access_token(self) -> Optional[str]:
        raise NotImplementedError

    def get_refresh_token(self) -> Optional[str]:
        raise NotImplementedError

    def set_tokens(self, access_token: str, refresh_token: str) -> None:
        raise NotImplementedError

    def clear_tokens(self) -> None:
        raise NotImplementedError

    def has_tokens(self) -> bool:
        """True iff both tokens are present and non-empty"""
        return bool(self.get_access_token()) and bool(self.get_refresh_token())

    def get_status(self) -> Dict[str, Any]:
        """Get token status without exposing secrets"""
        return {
            "backend": self.backend,
            "has_tokens": self.has_tokens(),
            "has_access_token": bool(self.get_access_token()),
            "has_refresh_token": bool(self.get_refresh_token()),
        }


class FileCredentialStore(CredentialStore):
    """Persistent token storage with restrictive file permissions"""

    backend = "file"

    def __init__(self, token_file: Optional[str] = None):
        self.token_path = Path(token_file if token_file else TOKEN_FILE).expanduser()
        self._ensure_secure_directory()

    def _ensure_secure_directory(self):
        """Create parent directory with secure permissions"""
        parent_dir = self.token_path.parent
        if not parent_dir.exists():
            parent_dir.mkdir(parents=True, exist_ok=True)
            # Set directory permissions to 700 on Unix-like systems
            if platform.system() != "Windows":
                os.chmod(parent_dir, 0o700)

    def _load(self) -> Dict[str, Any]:
        if not self.token_path.exists():
            return {}

        try:
            data = json.loads(self.token_path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable token file {self.token_path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed token file {self.token_path}")
            return {}
        return data

    def get_access_token(self) -> Optional[str]:
        return self._load().get(ACCESS_TOKEN_KEY) or None

    def get_refresh_token(self) -> Optional[str]:
        return self._load().get(REFRESH_TOKEN_KEY) or None

    def set_tokens(self, access_token: str, refresh_token: str) -> None:
        """Write both tokens in a single rename so the pair rotates atomically"""
        self._ensure_secure_directory()
        data = {
            ACCESS_TOKEN_KEY: access_token,
            REFRESH_TOKEN_KEY: refresh_token,
        }

        fd, tmp_path = tempfile.mkstemp(dir=self.token_path.parent, prefix=".tokens-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
            # Set file permissions to 600 on Unix-like systems
            if platform.system() != "Windows":
                os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.token_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        logger.debug(f"Saved credential pair to {self.token_path}")

    def clear_tokens(self) -> None:
        """Remove stored tokens (another process may already have done so)"""
        self.token_path.unlink(missing_ok=True)
        logger.debug(f"Removed token file {self.token_path}")

    def get_status(self) -> Dict[str, Any]:
        status = super().get_status()
        status["token_file"] = str(self.token_path)
        return status


class MemoryCredentialStore(CredentialStore):
    """Process-local token storage, used in tests and embedded clients"""

    backend = "memory"

    def __init__(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None):
        self._access_token = access_token
        self._refresh_token = refresh_token

    def get_access_token(self) -> Optional[str]:
        return self._access_token or None

    def get_refresh_token(self) -> Optional[str]:
        return self._refresh_token or None

    def set_tokens(self, access_token: str, refresh_token: str) -> None:
        self._access_token, self._refresh_token = access_token, refresh_token

    def clear_tokens(self) -> None:
        self._access_token = None
        self._refresh_token = None


class NullCredentialStore(CredentialStore):
    """Store for contexts without persistent storage: reads are absent, writes are dropped"""

    backend = "none"

    def get_access_token(self) -> Optional[str]:
        return None

    def get_refresh_token(self) -> Optional[str]:
        return None

    def set_tokens(self, access_token: str, refresh_token: str) -> None:
        return None

    def clear_tokens(self) -> None:
        return None


def create_credential_store(backend: Optional[str] = None, token_file: Optional[str] = None) -> CredentialStore:
    """Build the credential store for the configured backend

    Args:
        backend: "file", "memory" or "none" (defaults to LUX_CREDENTIAL_BACKEND)
        token_file: Token file path for the file backend

    Returns:
        CredentialStore instance
    """
    backend = (backend or CREDENTIAL_BACKEND).lower()
    if backend == "file":
        return FileCredentialStore(token_file)
    if backend == "memory":
        return MemoryCredentialStore()
    if backend == "none":
        return NullCredentialStore()
    raise ValueError(f"Unknown credential backend: {backend!r}")
