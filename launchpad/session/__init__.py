"""Session management module for Launchpad."""

from launchpad.session.context_manager import ContextManager
from launchpad.session.store import FileSessionStore, SessionStore

__all__ = ["ContextManager", "FileSessionStore", "SessionStore"]
