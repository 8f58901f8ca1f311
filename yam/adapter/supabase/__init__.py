"""Supabase Auth adapter."""

from .auth import SupabaseAuthClient, SupabaseAuthError
from .session import (
    MockIdentityProviderFactory,
    MockSessionManager,
    SupabaseIdentityProviderFactory,
    SupabaseSessionManager,
    user_to_session,
)

__all__ = [
    "MockIdentityProviderFactory",
    "MockSessionManager",
    "SupabaseAuthClient",
    "SupabaseAuthError",
    "SupabaseIdentityProviderFactory",
    "SupabaseSessionManager",
    "user_to_session",
]
