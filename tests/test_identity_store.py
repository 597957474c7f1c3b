import pytest

from chatdesk.application.services.identity_store import IdentityStore
from chatdesk.domain.entities import Company, MetaConfig, User, UserRole
from chatdesk.domain.exceptions import CompanyCapacityExceeded, CompanyNotFound, UserNotFound

from conftest import SequentialIds


def _store(max_users=15, **listeners):
    return IdentityStore(
        users=[User(id="root", name="Root", email="root@x", role=UserRole.SUPER_ADMIN, password="123")],
        companies=[Company(id="c1", name="Acme", max_users=max_users, created_at="2024-01-01T00:00:00+00:00")],
        max_users=max_users,
        id_factory=SequentialIds("id"),
        **listeners,
    )


def test_register_tenant_creates_company_and_admin():
    users_published, companies_published = [], []
    store = _store(on_users_change=users_published.append, on_companies_change=companies_published.append)

    company, admin = store.register_tenant(
        company_name="Beta Ltd", name="Bea", email="bea@beta.com", password="secret", age=31
    )

    assert company.max_users == 15
    assert company.created_at
    assert admin.role == UserRole.COMPANY_ADMIN
    assert admin.company_id == company.id
    assert admin.age == 31
    assert companies_published[-1][-1] == company
    assert users_published[-1][-1] == admin


def test_add_agent_uses_default_password():
    store = _store()

    agent = store.add_agent("c1", name="Ana", email="ana@acme.com", phone="5511900000000")

    assert agent.role == UserRole.AGENT
    assert agent.password == "123"
    assert agent.company_id == "c1"
    assert store.list_users("c1") == [agent]


def test_add_agent_beyond_capacity_is_rejected():
    store = _store(max_users=2)
    store.add_agent("c1", name="One", email="1@acme.com")
    store.add_agent("c1", name="Two", email="2@acme.com")

    with pytest.raises(CompanyCapacityExceeded):
        store.add_agent("c1", name="Three", email="3@acme.com")

    assert len(store.list_users("c1")) == 2


def test_add_agent_to_unknown_company_raises():
    with pytest.raises(CompanyNotFound):
        _store().add_agent("nope", name="Ana", email="ana@acme.com")


def test_delete_company_removes_its_users():
    store = _store()
    store.add_agent("c1", name="Ana", email="ana@acme.com")

    store.delete_company("c1")

    assert store.companies == []
    assert [user.id for user in store.users] == ["root"]


def test_change_password_and_avatar_keep_other_fields():
    store = _store()
    agent = store.add_agent("c1", name="Ana", email="ana@acme.com")

    store.change_password(agent.id, "n3w")
    updated = store.update_avatar(agent.id, "https://example.com/ana.png")

    assert updated.password == "n3w"
    assert updated.avatar_url == "https://example.com/ana.png"
    assert (updated.name, updated.email, updated.role) == (agent.name, agent.email, agent.role)


def test_change_password_rejects_empty_value():
    store = _store()

    with pytest.raises(ValueError):
        store.change_password("root", "")


def test_remove_unknown_user_raises():
    with pytest.raises(UserNotFound):
        _store().remove_user("ghost")


def test_update_meta_config():
    store = _store()
    meta = MetaConfig(phone_number_id="123", waba_id="456", access_token="tok", webhook_verify_token="v")

    company = store.update_meta_config("c1", meta)

    assert company.meta_config == meta
    assert store.get_company("c1").meta_config == meta


def test_tenant_users_require_a_company():
    with pytest.raises(ValueError):
        User(id="x", name="X", email="x@x", role=UserRole.AGENT)


def test_public_dict_hides_password():
    user = User(id="x", name="X", email="x@x", role=UserRole.SUPER_ADMIN, password="123")

    assert "password" not in user.to_public_dict()
    assert user.to_dict()["password"] == "123"
