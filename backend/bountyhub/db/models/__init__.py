from bountyhub.db.models.bounty import Bounty
from bountyhub.db.models.chat import Chat
from bountyhub.db.models.company import Company
from bountyhub.db.models.password_reset import PasswordReset
from bountyhub.db.models.report import Report
from bountyhub.db.models.site_setting import SiteSetting
from bountyhub.db.models.user import User, UserRole

__all__ = [
    "Bounty",
    "Chat",
    "Company",
    "PasswordReset",
    "Report",
    "SiteSetting",
    "User",
    "UserRole",
]
