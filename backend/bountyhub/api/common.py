from collections.abc import Iterable

from fastapi import HTTPException, status
from pydantic import BaseModel

from bountyhub.core.security import is_admin
from bountyhub.db.models.report import Report
from bountyhub.db.models.user import User


def dump(schema: type[BaseModel], obj) -> dict:
    return schema.model_validate(obj).model_dump(mode="json")


def dump_many(schema: type[BaseModel], items: Iterable) -> list[dict]:
    return [dump(schema, item) for item in items]


def ensure_report_access(report: Report, user: User) -> None:
    if report.user_id != user.id and not is_admin(user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to access this report",
        )
