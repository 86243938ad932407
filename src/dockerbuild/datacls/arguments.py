from typing import Optional

from pydantic import BaseModel, ConfigDict


class FormalArgument(BaseModel):
    """
        Class represents an ARG declared by a Dockerfile. No default means mandatory.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    default: Optional[str] = None

    @property
    def mandatory(self) -> bool:
        return self.default is None

    def __str__(self) -> str:
        if self.default is None:
            return self.name
        return f"{self.name}={self.default}"
