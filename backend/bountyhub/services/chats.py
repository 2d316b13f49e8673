from sqlalchemy.orm import Session

from bountyhub.db.models.chat import Chat
from bountyhub.services import crud


def create_chat(db: Session, *, report_id: str, user_id: str, message: str | None, commit: bool = True) -> Chat:
    return crud.create(db, Chat, {"report_id": report_id, "user_id": user_id, "message": message}, commit=commit)


def get_chat(db: Session, chat_id: str) -> Chat:
    return crud.get_or_fail(db, Chat, chat_id, include=("user",))


def list_report_chats(db: Session, report_id: str) -> list[Chat]:
    return crud.find(db, Chat, {"report_id": report_id}, include=("user",), order_by="created_at")


def list_user_chats(db: Session, user_id: str) -> list[Chat]:
    return crud.find(db, Chat, {"user_id": user_id}, order_by="created_at", descending=True)


def list_all_chats(db: Session, *, offset: int = 0, limit: int | None = None) -> tuple[list[Chat], int]:
    items = crud.find(db, Chat, order_by="created_at", descending=True, offset=offset, limit=limit)
    return items, crud.count(db, Chat)


def delete_chat(db: Session, chat_id: str) -> None:
    crud.delete(db, Chat, chat_id)
