"""Generic create/read/update/delete over the domain models.

Constraint rules are read off the table metadata: non-nullable columns must
have a value, columns declared ``unique=True`` are checked for collisions,
columns with a ``ForeignKey`` must reference an existing parent row, and a
row that is still referenced by any other table cannot be deleted (RESTRICT).
The checks run inside the same session as the write; the database constraints
remain the final authority and any ``IntegrityError`` they raise is translated
to ``ConstraintViolation``.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from sqlalchemy import Table, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from bountyhub.core.errors import DEPENDENTS, FOREIGN_KEY, NOT_NULL, UNIQUE, ConstraintViolation, NotFound
from bountyhub.db.base import Base, utc_now_naive

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

SERVER_MANAGED_FIELDS = frozenset({"id", "created_at", "updated_at"})


def _entity(model: type[Base]) -> str:
    return model.__name__


def _mappers():
    return sorted(Base.registry.mappers, key=lambda m: m.class_.__name__)


def _model_for_table(table: Table) -> type[Base]:
    for mapper in _mappers():
        if mapper.local_table is table:
            return mapper.class_
    raise LookupError(f"No mapped class for table {table.name}")


def unique_fields(model: type[Base]) -> list[str]:
    return [c.key for c in model.__table__.columns if c.unique and not c.primary_key]


def foreign_key_parents(model: type[Base]) -> dict[str, type[Base]]:
    parents: dict[str, type[Base]] = {}
    for column in model.__table__.columns:
        for fk in column.foreign_keys:
            parents[column.key] = _model_for_table(fk.column.table)
    return parents


def dependent_references(model: type[Base]) -> list[tuple[type[Base], str]]:
    refs: list[tuple[type[Base], str]] = []
    for mapper in _mappers():
        for column in mapper.local_table.columns:
            for fk in column.foreign_keys:
                if fk.column.table is model.__table__:
                    refs.append((mapper.class_, column.key))
    return refs


def _column(model: type[Base], field: str):
    if field not in model.__table__.columns:
        raise ValueError(f"{_entity(model)} has no attribute {field!r}")
    return getattr(model, field)


def _apply_filters(stmt, model: type[Base], filters: Mapping[str, Any] | None):
    for field, value in (filters or {}).items():
        column = _column(model, field)
        if value is None:
            stmt = stmt.where(column.is_(None))
        elif isinstance(value, (list, tuple, set, frozenset)):
            stmt = stmt.where(column.in_(list(value)))
        else:
            stmt = stmt.where(column == value)
    return stmt


def _load_options(model: type[Base], include: Iterable[str]) -> list:
    options = []
    for path in include:
        current = model
        loader = None
        for name in path.split("."):
            relationships = current.__mapper__.relationships
            if name not in relationships:
                raise ValueError(f"{_entity(current)} has no relation {name!r}")
            attr = getattr(current, name)
            loader = selectinload(attr) if loader is None else loader.selectinload(attr)
            current = relationships[name].mapper.class_
        if loader is not None:
            options.append(loader)
    return options


def _clean_values(model: type[Base], values: Mapping[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for field, value in values.items():
        if field in SERVER_MANAGED_FIELDS:
            continue
        _column(model, field)
        cleaned[field] = value
    return cleaned


def _check_references(db: Session, model: type[Base], values: Mapping[str, Any], *, required: bool) -> None:
    for field, parent in foreign_key_parents(model).items():
        if not required and field not in values:
            continue
        ref = values.get(field)
        if ref is None or db.get(parent, ref) is None:
            raise ConstraintViolation(
                _entity(model),
                field,
                FOREIGN_KEY,
                f"{field} must reference an existing {_entity(parent)}",
            )


def _check_required(model: type[Base], values: Mapping[str, Any], *, partial: bool) -> None:
    for column in model.__table__.columns:
        if column.nullable or column.primary_key or column.key in SERVER_MANAGED_FIELDS:
            continue
        if column.key in values:
            missing = values[column.key] is None
        else:
            missing = not partial and column.default is None and column.server_default is None
        if missing:
            raise ConstraintViolation(_entity(model), column.key, NOT_NULL, f"{column.key} is required")


def _check_unique(
    db: Session,
    model: type[Base],
    values: Mapping[str, Any],
    *,
    exclude_id: str | None = None,
) -> None:
    for field in unique_fields(model):
        value = values.get(field)
        if value is None:
            continue
        stmt = select(model.id).where(getattr(model, field) == value)
        if exclude_id is not None:
            stmt = stmt.where(model.id != exclude_id)
        if db.scalar(stmt.limit(1)) is not None:
            raise ConstraintViolation(_entity(model), field, UNIQUE, f"{field} already in use")


def _check_dependents(db: Session, model: type[Base], ids: list[str]) -> None:
    if not ids:
        return
    for child, field in dependent_references(model):
        stmt = select(func.count()).select_from(child).where(getattr(child, field).in_(ids))
        if db.scalar(stmt):
            raise ConstraintViolation(
                _entity(model),
                field,
                DEPENDENTS,
                f"{_entity(model)} is still referenced by {_entity(child)}.{field}",
            )


def _field_in_message(model: type[Base], message: str, fields: Iterable[str]) -> str | None:
    table = model.__tablename__
    for field in fields:
        if f"{table}.{field}" in message or f"({field})" in message or f"\"{field}\"" in message:
            return field
    return None


def _translate_integrity_error(model: type[Base], exc: IntegrityError) -> ConstraintViolation:
    message = str(exc.orig)
    lowered = message.lower()
    if "unique constraint failed" in lowered or "duplicate key" in lowered:
        field = _field_in_message(model, message, unique_fields(model))
        return ConstraintViolation(_entity(model), field, UNIQUE, f"{field or 'value'} already in use")
    if "not null constraint failed" in lowered or "null value in column" in lowered:
        field = _field_in_message(model, message, [c.key for c in model.__table__.columns])
        return ConstraintViolation(_entity(model), field, NOT_NULL, f"{field or 'value'} is required")
    if "foreign key" in lowered:
        field = _field_in_message(model, message, foreign_key_parents(model))
        detail = "Referenced row does not exist or is still in use"
        return ConstraintViolation(_entity(model), field, FOREIGN_KEY, detail)
    return ConstraintViolation(_entity(model), None, "integrity", message)


def _persist(db: Session, model: type[Base], *, commit: bool) -> None:
    try:
        if commit:
            db.commit()
        else:
            db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise _translate_integrity_error(model, exc) from exc


def create(db: Session, model: type[ModelT], values: Mapping[str, Any], *, commit: bool = True) -> ModelT:
    """Insert one row; ``commit=False`` only flushes so callers can batch writes."""
    cleaned = _clean_values(model, values)
    _check_references(db, model, cleaned, required=True)
    _check_required(model, cleaned, partial=False)
    _check_unique(db, model, cleaned)
    obj = model(**cleaned)
    db.add(obj)
    _persist(db, model, commit=commit)
    if commit:
        db.refresh(obj)
    logger.debug("entity_created entity=%s id=%s", _entity(model), obj.id)
    return obj


def get(db: Session, model: type[ModelT], entity_id: str, *, include: Iterable[str] = ()) -> ModelT | None:
    stmt = select(model).where(model.id == entity_id).options(*_load_options(model, include))
    return db.scalars(stmt).first()


def get_or_fail(db: Session, model: type[ModelT], entity_id: str, *, include: Iterable[str] = ()) -> ModelT:
    obj = get(db, model, entity_id, include=include)
    if obj is None:
        raise NotFound(_entity(model), {"id": entity_id})
    return obj


def find(
    db: Session,
    model: type[ModelT],
    filters: Mapping[str, Any] | None = None,
    *,
    include: Iterable[str] = (),
    order_by: str | None = None,
    descending: bool = False,
    offset: int | None = None,
    limit: int | None = None,
) -> list[ModelT]:
    stmt = _apply_filters(select(model), model, filters).options(*_load_options(model, include))
    if order_by is not None:
        column = _column(model, order_by)
        stmt = stmt.order_by(column.desc() if descending else column.asc(), model.id.asc())
    if offset:
        stmt = stmt.offset(offset)
    if limit is not None:
        stmt = stmt.limit(limit)
    return list(db.scalars(stmt).all())


def find_one(
    db: Session,
    model: type[ModelT],
    filters: Mapping[str, Any],
    *,
    include: Iterable[str] = (),
) -> ModelT | None:
    rows = find(db, model, filters, include=include, limit=1)
    return rows[0] if rows else None


def find_one_or_fail(
    db: Session,
    model: type[ModelT],
    filters: Mapping[str, Any],
    *,
    include: Iterable[str] = (),
) -> ModelT:
    obj = find_one(db, model, filters, include=include)
    if obj is None:
        raise NotFound(_entity(model), filters)
    return obj


def count(db: Session, model: type[Base], filters: Mapping[str, Any] | None = None) -> int:
    stmt = _apply_filters(select(func.count()).select_from(model), model, filters)
    return int(db.scalar(stmt) or 0)


def _apply_values(obj: Base, values: Mapping[str, Any]) -> None:
    for field, value in values.items():
        setattr(obj, field, value)
    if "updated_at" in obj.__table__.columns:
        obj.updated_at = utc_now_naive()


def update(db: Session, model: type[ModelT], entity_id: str, values: Mapping[str, Any]) -> ModelT:
    obj = get_or_fail(db, model, entity_id)
    cleaned = _clean_values(model, values)
    _check_references(db, model, cleaned, required=False)
    _check_required(model, cleaned, partial=True)
    _check_unique(db, model, cleaned, exclude_id=entity_id)
    _apply_values(obj, cleaned)
    _persist(db, model, commit=True)
    db.refresh(obj)
    return obj


def update_many(
    db: Session,
    model: type[Base],
    filters: Mapping[str, Any],
    values: Mapping[str, Any],
    *,
    commit: bool = True,
) -> int:
    rows = find(db, model, filters)
    if not rows:
        return 0
    cleaned = _clean_values(model, values)
    _check_references(db, model, cleaned, required=False)
    _check_required(model, cleaned, partial=True)
    if len(rows) > 1:
        for field in unique_fields(model):
            if cleaned.get(field) is not None:
                message = f"{field} cannot be shared by {len(rows)} rows"
                raise ConstraintViolation(_entity(model), field, UNIQUE, message)
    else:
        _check_unique(db, model, cleaned, exclude_id=rows[0].id)
    for obj in rows:
        _apply_values(obj, cleaned)
    _persist(db, model, commit=commit)
    return len(rows)


def delete(db: Session, model: type[Base], entity_id: str) -> None:
    obj = get_or_fail(db, model, entity_id)
    _check_dependents(db, model, [entity_id])
    db.delete(obj)
    _persist(db, model, commit=True)
    logger.debug("entity_deleted entity=%s id=%s", _entity(model), entity_id)


def delete_many(db: Session, model: type[Base], filters: Mapping[str, Any]) -> int:
    rows = find(db, model, filters)
    if not rows:
        return 0
    _check_dependents(db, model, [row.id for row in rows])
    for obj in rows:
        db.delete(obj)
    _persist(db, model, commit=True)
    return len(rows)
