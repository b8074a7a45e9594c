"""
Credentials used to access a remote agent.
"""
from typing import Optional

from pydantic import BaseModel, SecretStr


class AgentAuthentication(BaseModel):
    """Username/password pair or access token for a remote agent"""
    username: Optional[str] = None
    password: Optional[SecretStr] = None
    token: Optional[SecretStr] = None

    @classmethod
    def from_credentials(
        cls,
        username: Optional[str] = None,
        password: Optional[str] = None
    ) -> "AgentAuthentication":
        return cls(username=username, password=password)

    @property
    def is_empty(self) -> bool:
        return not (self.username or self.token)

    def get_password(self) -> Optional[str]:
        return self.password.get_secret_value() if self.password else None

    def get_token(self) -> Optional[str]:
        return self.token.get_secret_value() if self.token else None
