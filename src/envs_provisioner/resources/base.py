"""Base resource class for provisioned resources."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Resource(BaseModel):
    """Base class for all provisioned resources.

    Resources are pure data - they describe the desired environment.
    Handlers know how to check and provision them.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    resource_type: ClassVar[str]
    namespace: ClassVar[str]
    category: ClassVar[str]

    name: str = Field(min_length=1)

    # Lifecycle
    depends_on: list[str] = []

    @computed_field
    @property
    def address(self) -> str:
        """Unique address for this resource (e.g., 'virtualenv.django')."""
        return f"{self.resource_type}.{self.name}"
