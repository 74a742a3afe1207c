"""
Common entity base.
"""

from pydantic import BaseModel, Field


class BaseEntity(BaseModel):
    """
    Base for all persisted entities.

    ``id`` is 0 until the store assigns an identity on create.
    """

    id: int = Field(default=0, ge=0, description="Store-assigned identity, 0 before persistence")

    model_config = {
        "validate_assignment": True,
    }

    @property
    def is_persisted(self) -> bool:
        return self.id > 0
