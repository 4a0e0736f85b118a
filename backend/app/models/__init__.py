from .application import Application
from .company import Company
from .interview import Interview
from .job import Job
from .revoked_token import RevokedToken
from .user import User
from .user_profile import UserProfile

__all__ = [
    "Application",
    "Company",
    "Interview",
    "Job",
    "RevokedToken",
    "User",
    "UserProfile",
]
