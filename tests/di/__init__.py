"""Mock providers for testing."""

from .supabase import MockSupabaseProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockSupabaseProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
