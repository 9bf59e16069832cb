"""Directory factory.

Provides get_directory() / set_directory() to swap implementations:
- InMemoryDirectory for development and testing (default)
- a profile/catalog service adapter in production
"""

from ordering.directory.fake_adapter import InMemoryDirectory
from ordering.directory.port import Directory

_current_directory: Directory | None = None


def get_directory() -> Directory:
    """Return the current directory. Defaults to InMemoryDirectory."""
    global _current_directory
    if _current_directory is None:
        _current_directory = InMemoryDirectory()
    return _current_directory


def set_directory(directory: Directory) -> None:
    """Override the active directory (useful for tests)."""
    global _current_directory
    _current_directory = directory


def reset_directory() -> None:
    """Reset to default directory."""
    global _current_directory
    _current_directory = None
