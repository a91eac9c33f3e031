"""Shared utilities package for the Lux API client"""

from .storage import (
    CredentialStore,
    FileCredentialStore,
    MemoryCredentialStore,
    NullCredentialStore,
    create_credential_store,
)
from .debug_console import (
    DebugCapturingConsole,
    create_debug_console,
    setup_debug_logger,
)

__all__ = [
    "CredentialStore",
    "FileCredentialStore",
    "MemoryCredentialStore",
    "NullCredentialStore",
    "create_credential_store",
    "DebugCapturingConsole",
    "create_debug_console",
    "setup_debug_logger",
]
