"""Application-level security dependencies.

Defines auth dependencies without importing infrastructure.
The actual implementations are injected via FastAPI dependency_overrides in main.py.
"""

from dataclasses import dataclass
from typing import NoReturn


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


@dataclass(frozen=True)
class SessionIdentity:
    """Identity carried by the caller's session token."""

    email: str
    name: str | None = None


async def get_current_session() -> SessionIdentity:
    """Get the identity of the authenticated session."""
    _missing_dependency("get_current_session")


async def get_current_user_id() -> str:
    """Get the stored user ID of the authenticated session.

    This stub is overridden in main.py; the real implementation resolves the
    session email against the users table.
    """
    _missing_dependency("get_current_user_id")
