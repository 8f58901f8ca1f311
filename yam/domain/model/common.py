"""Base model for domain entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Frozen pydantic model.

    Status changes (resolving an invitation, activating a profile) return
    a new instance via `model_copy`, which keeps state snapshots held by
    running flows stable.
    """

    model_config = ConfigDict(frozen=True)
