from pydantic import BaseModel, ConfigDict

from app.constants.constants import ActorRole


class Actor(BaseModel):
    """The authenticated identity performing an operation."""
    model_config = ConfigDict(frozen=True)

    email: str
    role: ActorRole = ActorRole.user

    @property
    def is_manager(self) -> bool:
        return self.role == ActorRole.manager
