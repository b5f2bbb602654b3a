"""
Authentication repository interface
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class LoginResult:
    """Outcome of a login call"""

    success: bool
    token: Optional[str] = None
    temp_token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None
    message: Optional[str] = None

    @property
    def requires_two_factor(self) -> bool:
        return not self.token and bool(self.temp_token)


class AuthRepository(ABC):
    """Repository interface for identity operations"""

    @abstractmethod
    async def login(self, email: str, password: str, otp: Optional[str] = None) -> LoginResult:
        """Exchange credentials for a session token"""

    @abstractmethod
    async def logout(self) -> None:
        """End the server-side session"""

    @abstractmethod
    async def get_current_user_id(self) -> str:
        """Identifier of the authenticated user"""
