from bountyhub.schemas.bounty import BountyOut
from bountyhub.schemas.chat import ChatOut
from bountyhub.schemas.company import CompanyOut
from bountyhub.schemas.password_reset import PasswordResetOut
from bountyhub.schemas.report import ReportOut
from bountyhub.schemas.site_setting import SiteSettingOut
from bountyhub.schemas.user import UserOut


class UserDetailOut(UserOut):
    reports: list[ReportOut] = []
    chats: list[ChatOut] = []
    password_resets: list[PasswordResetOut] = []
    site_settings: list[SiteSettingOut] = []


class CompanyDetailOut(CompanyOut):
    bounties: list[BountyOut] = []


class BountyDetailOut(BountyOut):
    company: CompanyOut | None = None


class ReportDetailOut(ReportOut):
    user: UserOut | None = None
    company: CompanyOut | None = None
    chats: list[ChatOut] = []


class ChatDetailOut(ChatOut):
    user: UserOut | None = None
