"""Base model for all domain entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for all domain models.

    Entities are immutable; state changes go through ``model_copy(update=...)``
    or through the repository's atomic update operations.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
