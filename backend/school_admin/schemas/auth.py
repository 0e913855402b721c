"""The signed-in console user as reported by the school backend."""

from pydantic import Field

from school_admin.core.permissions import Capability, parse_capabilities
from school_admin.schemas.base import CamelModel


class Actor(CamelModel):
    """Current user; only identity and permissions are read."""

    id: str = Field(..., alias="_id")
    email: str = ""
    permissions: list[str] = Field(default_factory=list)

    @property
    def capabilities(self) -> frozenset[Capability]:
        return parse_capabilities(self.permissions)
