from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from bountyhub.core.errors import DEPENDENTS, FOREIGN_KEY, NOT_NULL, UNIQUE, ConstraintViolation, NotFound
from bountyhub.db.base import utc_now_naive
from bountyhub.db.models import Bounty, Chat, Company, PasswordReset, Report, SiteSetting, User, UserRole
from bountyhub.services import crud


def _user(db, **fields) -> User:
    return crud.create(db, User, fields)


def _company(db, name: str = "Acme") -> Company:
    return crud.create(db, Company, {"name": name})


def _report(db, user: User, company: Company, **fields) -> Report:
    values = {"user_id": user.id, "company_id": company.id, "title": "Broken checkout", **fields}
    return crud.create(db, Report, values)


def test_duplicate_wallet_address_is_rejected(db_session):
    _user(db_session, evm_wallet_address="0xabc")
    with pytest.raises(ConstraintViolation) as exc:
        _user(db_session, evm_wallet_address="0xabc")
    assert exc.value.field == "evm_wallet_address"
    assert exc.value.kind == UNIQUE
    assert crud.count(db_session, User) == 1


def test_duplicate_google_id_is_rejected(db_session):
    _user(db_session, google_id="g-1")
    with pytest.raises(ConstraintViolation) as exc:
        _user(db_session, google_id="g-1")
    assert exc.value.field == "google_id"


def test_duplicate_email_is_rejected(db_session):
    _user(db_session, email="a@example.com")
    with pytest.raises(ConstraintViolation) as exc:
        _user(db_session, email="a@example.com")
    assert exc.value.field == "email"
    assert exc.value.as_details() == {"entity": "User", "field": "email", "constraint": "unique"}


def test_distinct_or_null_unique_fields_are_accepted(db_session):
    _user(db_session)
    _user(db_session)
    _user(db_session, evm_wallet_address="0x1", google_id="g-1", email="a@example.com")
    _user(db_session, evm_wallet_address="0x2", google_id="g-2", email="b@example.com")
    assert crud.count(db_session, User) == 4


def test_database_enforces_uniqueness_without_precheck(db_session):
    db_session.add_all([User(google_id="dup"), User(google_id="dup")])
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_integrity_error_is_translated_to_constraint_violation(db_session, monkeypatch):
    _user(db_session, evm_wallet_address="0xabc")
    monkeypatch.setattr(crud, "_check_unique", lambda *args, **kwargs: None)
    with pytest.raises(ConstraintViolation) as exc:
        _user(db_session, evm_wallet_address="0xabc")
    assert exc.value.field == "evm_wallet_address"
    assert crud.count(db_session, User) == 1


def test_unique_translation_ignores_not_null_failures(db_session, monkeypatch):
    user = _user(db_session)
    monkeypatch.setattr(crud, "_check_required", lambda *args, **kwargs: None)
    expires = utc_now_naive() + timedelta(hours=1)
    with pytest.raises(ConstraintViolation) as exc:
        crud.create(db_session, PasswordReset, {"user_id": user.id, "expires_at": expires})
    assert exc.value.kind == NOT_NULL
    assert exc.value.field == "token"
    assert crud.count(db_session, PasswordReset) == 0


def test_required_columns_reject_missing_values(db_session):
    user = _user(db_session)
    expires = utc_now_naive() + timedelta(hours=1)
    cases = [
        (PasswordReset, {"user_id": user.id, "expires_at": expires}, "token"),
        (PasswordReset, {"user_id": user.id, "token": "t" * 32}, "expires_at"),
        (PasswordReset, {"user_id": user.id, "token": "t" * 32, "expires_at": expires, "used": None}, "used"),
        (SiteSetting, {"value": "dark", "updated_by_id": user.id}, "key"),
        (SiteSetting, {"key": "theme", "value": None, "updated_by_id": user.id}, "value"),
        (User, {"is_active": None}, "is_active"),
    ]
    for model, values, field in cases:
        with pytest.raises(ConstraintViolation) as exc:
            crud.create(db_session, model, values)
        assert exc.value.kind == NOT_NULL
        assert exc.value.field == field

    assert crud.count(db_session, PasswordReset) == 0
    assert crud.count(db_session, SiteSetting) == 0
    assert crud.count(db_session, User) == 1


def test_update_cannot_null_a_required_column(db_session):
    user = _user(db_session, email="a@example.com")
    with pytest.raises(ConstraintViolation) as exc:
        crud.update(db_session, User, user.id, {"is_active": None})
    assert (exc.value.field, exc.value.kind) == ("is_active", NOT_NULL)

    with pytest.raises(ConstraintViolation):
        crud.update_many(db_session, User, {"id": user.id}, {"is_active": None})

    db_session.expire_all()
    assert crud.get(db_session, User, user.id).is_active is True
    assert crud.update(db_session, User, user.id, {"email": None}).email is None


def test_password_reset_token_is_unique(db_session):
    user = _user(db_session)
    expires = utc_now_naive() + timedelta(hours=1)
    crud.create(db_session, PasswordReset, {"user_id": user.id, "token": "t" * 32, "expires_at": expires})
    with pytest.raises(ConstraintViolation) as exc:
        crud.create(db_session, PasswordReset, {"user_id": user.id, "token": "t" * 32, "expires_at": expires})
    assert exc.value.field == "token"


def test_site_setting_key_is_unique_on_create_and_update(db_session):
    admin = _user(db_session, role=UserRole.ADMIN)
    crud.create(db_session, SiteSetting, {"key": "maintenance_mode", "value": "false", "updated_by_id": admin.id})
    other = crud.create(db_session, SiteSetting, {"key": "theme", "value": "dark", "updated_by_id": admin.id})

    with pytest.raises(ConstraintViolation):
        crud.create(db_session, SiteSetting, {"key": "maintenance_mode", "value": "true", "updated_by_id": admin.id})
    with pytest.raises(ConstraintViolation) as exc:
        crud.update(db_session, SiteSetting, other.id, {"key": "maintenance_mode"})
    assert exc.value.field == "key"

    kept = crud.update(db_session, SiteSetting, other.id, {"key": "theme", "value": "light"})
    assert kept.key == "theme"
    assert kept.value == "light"


@pytest.mark.parametrize(
    ("model", "values", "field"),
    [
        (Bounty, {"company_id": "missing"}, "company_id"),
        (Report, {"user_id": "missing", "company_id": "missing"}, "user_id"),
        (Chat, {"report_id": "missing", "user_id": "missing"}, "report_id"),
        (SiteSetting, {"key": "k", "value": "v", "updated_by_id": "missing"}, "updated_by_id"),
    ],
)
def test_missing_parent_is_rejected(db_session, model, values, field):
    with pytest.raises(ConstraintViolation) as exc:
        crud.create(db_session, model, values)
    assert exc.value.kind == FOREIGN_KEY
    assert exc.value.field == field
    assert crud.count(db_session, model) == 0


def test_report_requires_existing_user_and_company(db_session):
    user = _user(db_session)
    company = _company(db_session)
    with pytest.raises(ConstraintViolation) as exc:
        crud.create(db_session, Report, {"user_id": "nope", "company_id": company.id})
    assert exc.value.field == "user_id"
    with pytest.raises(ConstraintViolation) as exc:
        crud.create(db_session, Report, {"user_id": user.id, "company_id": "nope"})
    assert exc.value.field == "company_id"


def test_chat_requires_existing_report_and_user(db_session):
    user = _user(db_session)
    report = _report(db_session, user, _company(db_session))
    with pytest.raises(ConstraintViolation) as exc:
        crud.create(db_session, Chat, {"report_id": report.id, "user_id": "ghost"})
    assert exc.value.field == "user_id"
    chat = crud.create(db_session, Chat, {"report_id": report.id, "user_id": user.id, "message": "hi"})
    assert chat.message == "hi"


def test_round_trip_keeps_values_and_applies_defaults(db_session):
    company = _company(db_session)
    bounty = crud.create(
        db_session,
        Bounty,
        {
            "company_id": company.id,
            "max_payout": Decimal("1000.50"),
            "nsfw": None,
            "cursing": False,
            "nudity": True,
            "language": "English",
            "age_restriction": 18,
        },
    )
    db_session.expire_all()

    loaded = crud.get_or_fail(db_session, Bounty, bounty.id)
    assert loaded.company_id == company.id
    assert loaded.max_payout == Decimal("1000.50")
    assert loaded.nsfw is None
    assert loaded.cursing is False
    assert loaded.nudity is True
    assert loaded.language == "English"
    assert loaded.age_restriction == 18
    assert len(loaded.id) == 36
    assert isinstance(loaded.created_at, datetime)

    user = _user(db_session, name="Ada", bio="hunter")
    assert crud.get_or_fail(db_session, User, user.id).is_active is True
    assert crud.get_or_fail(db_session, User, user.id).role is None

    reset = crud.create(
        db_session,
        PasswordReset,
        {"user_id": user.id, "token": "x" * 40, "expires_at": utc_now_naive() + timedelta(minutes=5)},
    )
    assert crud.get_or_fail(db_session, PasswordReset, reset.id).used is False


def test_server_managed_fields_are_not_user_supplied(db_session):
    forged = datetime(2000, 1, 1)
    company = crud.create(db_session, Company, {"id": "forged-id", "name": "Acme", "created_at": forged})
    assert company.id != "forged-id"
    assert company.created_at != forged

    before = company.updated_at
    updated = crud.update(db_session, Company, company.id, {"name": "Acme 2", "updated_at": forged})
    assert updated.updated_at >= before
    assert updated.updated_at != forged
    assert updated.created_at == company.created_at


def test_unknown_attribute_is_rejected(db_session):
    with pytest.raises(ValueError):
        crud.create(db_session, Company, {"name": "Acme", "website": "https://acme.test"})
    with pytest.raises(ValueError):
        crud.find(db_session, Company, {"website": "x"})


def test_company_with_bounties_included(db_session):
    company = _company(db_session)
    other = _company(db_session, "Other")
    bounty = crud.create(db_session, Bounty, {"company_id": company.id, "language": "French"})
    crud.create(db_session, Bounty, {"company_id": other.id})
    db_session.expire_all()

    loaded = crud.get_or_fail(db_session, Company, company.id, include=("bounties",))
    assert [b.id for b in loaded.bounties] == [bounty.id]
    assert loaded.bounties[0].language == "French"


def test_nested_include_loads_report_chats(db_session):
    user = _user(db_session)
    report = _report(db_session, user, _company(db_session))
    crud.create(db_session, Chat, {"report_id": report.id, "user_id": user.id, "message": "first"})
    db_session.expire_all()

    loaded = crud.get_or_fail(db_session, User, user.id, include=("reports.chats", "password_resets"))
    assert len(loaded.reports) == 1
    assert [c.message for c in loaded.reports[0].chats] == ["first"]
    assert loaded.password_resets == []

    with pytest.raises(ValueError):
        crud.get(db_session, User, user.id, include=("followers",))


def test_partial_update_leaves_other_fields(db_session):
    user = _user(db_session)
    company = _company(db_session)
    report = _report(db_session, user, company, description="Steps", platform="Web", status="draft")

    updated = crud.update(db_session, Report, report.id, {"status": "RESOLVED"})
    assert updated.status == "RESOLVED"
    assert updated.title == "Broken checkout"
    assert updated.description == "Steps"
    assert updated.platform == "Web"
    assert updated.company_id == company.id
    assert updated.user_id == user.id


def test_update_rejects_dangling_reference(db_session):
    company = _company(db_session)
    bounty = crud.create(db_session, Bounty, {"company_id": company.id})
    with pytest.raises(ConstraintViolation) as exc:
        crud.update(db_session, Bounty, bounty.id, {"company_id": "missing"})
    assert exc.value.kind == FOREIGN_KEY
    assert crud.get_or_fail(db_session, Bounty, bounty.id).company_id == company.id


def test_update_and_delete_missing_row_raise_not_found(db_session):
    with pytest.raises(NotFound):
        crud.update(db_session, Company, "missing", {"name": "x"})
    with pytest.raises(NotFound):
        crud.delete(db_session, Company, "missing")
    with pytest.raises(NotFound) as exc:
        crud.find_one_or_fail(db_session, SiteSetting, {"key": "missing"})
    assert exc.value.filters == {"key": "missing"}
    assert crud.update_many(db_session, Company, {"name": "nobody"}, {"logo": "x"}) == 0


def test_update_many_cannot_share_unique_value(db_session):
    _user(db_session, name="same")
    _user(db_session, name="same")
    with pytest.raises(ConstraintViolation):
        crud.update_many(db_session, User, {"name": "same"}, {"google_id": "shared"})
    assert crud.update_many(db_session, User, {"name": "same"}, {"bio": "twin"}) == 2


def test_delete_company_with_dependents_is_restricted(db_session):
    company = _company(db_session)
    crud.create(db_session, Bounty, {"company_id": company.id})
    with pytest.raises(ConstraintViolation) as exc:
        crud.delete(db_session, Company, company.id)
    assert exc.value.kind == DEPENDENTS
    assert exc.value.field == "company_id"
    assert crud.get(db_session, Company, company.id) is not None


def test_delete_company_with_report_is_restricted(db_session):
    user = _user(db_session)
    company = _company(db_session)
    _report(db_session, user, company)
    with pytest.raises(ConstraintViolation):
        crud.delete(db_session, Company, company.id)
    with pytest.raises(ConstraintViolation):
        crud.delete(db_session, User, user.id)


def test_delete_without_dependents_removes_row(db_session):
    company = _company(db_session)
    bounty = crud.create(db_session, Bounty, {"company_id": company.id})
    crud.delete(db_session, Bounty, bounty.id)
    crud.delete(db_session, Company, company.id)
    assert crud.count(db_session, Company) == 0
    assert crud.count(db_session, Bounty) == 0


def test_find_filters_and_explicit_order(db_session):
    crud.create(db_session, Company, {"name": "b"})
    crud.create(db_session, Company, {"name": "a"})
    crud.create(db_session, Company, {"name": None})

    names = [c.name for c in crud.find(db_session, Company, {"name": ["a", "b"]}, order_by="name")]
    assert names == ["a", "b"]
    assert [c.name for c in crud.find(db_session, Company, {"name": ["a", "b"]}, order_by="name", descending=True)] == [
        "b",
        "a",
    ]
    assert crud.count(db_session, Company, {"name": None}) == 1
    assert len(crud.find(db_session, Company, order_by="name", offset=1, limit=1)) == 1
