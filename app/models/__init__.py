from app.models.user import User
from app.models.sighting import Sighting
from app.models.login_token import LoginToken

__all__ = [
    "User",
    "Sighting",
    "LoginToken",
]
