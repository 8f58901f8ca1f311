"""Domain services."""

from .base import Service
from .directory_service import DirectoryService
from .identity_provider import (
    IdentityProvider,
    IdentityProviderError,
    IdentityProviderFactory,
    SessionListener,
    Subscription,
)
from .invitation_service import InvitationService
from .profile_service import ProfileService

__all__ = [
    "DirectoryService",
    "IdentityProvider",
    "IdentityProviderError",
    "IdentityProviderFactory",
    "InvitationService",
    "ProfileService",
    "Service",
    "SessionListener",
    "Subscription",
]
