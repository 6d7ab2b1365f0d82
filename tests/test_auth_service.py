import pytest

from karts.core.config import Settings
from karts.core.errors import InvalidFormat, InvalidPassword, NotPermitted, PasswordNotConfigured
from karts.core.roles import Role
from karts.services import auth_service
from karts.services.document_store import BPASSWORDS

from conftest import make_session


@pytest.mark.parametrize("raw", ["", "M0001", "M000001", "X00001", "MM0001", "M0000A", "00001M", None])
async def test_invalid_code_format(store, raw):
    with pytest.raises(InvalidFormat):
        await auth_service.authenticate(store, raw, "1221")


async def test_code_is_trimmed_and_uppercased(store):
    result = await auth_service.authenticate(store, "  m00001 ", "1221")
    assert result.code == "M00001"
    assert result.role == Role.PRIMARY


@pytest.mark.parametrize("code,role", [("M12345", Role.PRIMARY), ("E00001", Role.ADMIN)])
async def test_shared_password_roles(store, code, role):
    result = await auth_service.authenticate(store, code, " 1221 ")
    assert result.role == role

    with pytest.raises(InvalidPassword):
        await auth_service.authenticate(store, code, "1222")
    with pytest.raises(InvalidPassword):
        await auth_service.authenticate(store, code, None)


async def test_role_letters_follow_configuration(store):
    config = Settings(ROLE_LETTERS="ABC", SECONDARY_PASSWORD_POLICY="none")
    assert (await auth_service.authenticate(store, "a00001", "1221", config)).role == Role.PRIMARY
    assert (await auth_service.authenticate(store, "B00001", None, config)).role == Role.SECONDARY
    assert (await auth_service.authenticate(store, "C00001", "1221", config)).role == Role.ADMIN
    with pytest.raises(InvalidFormat):
        await auth_service.authenticate(store, "M00001", "1221", config)


async def test_secondary_without_password_policy(store):
    config = Settings(SECONDARY_PASSWORD_POLICY="none")
    result = await auth_service.authenticate(store, "B00009", "", config)
    assert result.role == Role.SECONDARY


async def test_secondary_any_four_digits_policy(store):
    config = Settings(SECONDARY_PASSWORD_POLICY="any_four_digits")
    assert (await auth_service.authenticate(store, "B00009", "0000", config)).code == "B00009"
    for bad in ("", "123", "12345", "abcd"):
        with pytest.raises(InvalidPassword):
            await auth_service.authenticate(store, "B00009", bad, config)


async def test_secondary_per_code_requires_registration(store):
    with pytest.raises(PasswordNotConfigured):
        await auth_service.authenticate(store, "B00001", "1234")


async def test_secondary_per_code_empty_password(store):
    with pytest.raises(InvalidPassword):
        await auth_service.authenticate(store, "B00001", "  ")


async def test_secondary_per_code_after_admin_sets_password(store, admin):
    code = await auth_service.set_secondary_password(store, admin, " b00001 ", "4821")
    assert code == "B00001"

    stored = await store.get(BPASSWORDS, "B00001")
    assert stored["passwordHash"] != "4821"
    assert stored["updatedAt"]

    result = await auth_service.authenticate(store, "B00001", "4821")
    assert result == auth_service.AuthenticatedCode(code="B00001", role=Role.SECONDARY)
    with pytest.raises(InvalidPassword):
        await auth_service.authenticate(store, "B00001", "4822")
    with pytest.raises(PasswordNotConfigured):
        await auth_service.authenticate(store, "B00002", "4821")


async def test_password_can_be_replaced(store, admin):
    await auth_service.set_secondary_password(store, admin, "B00001", "1111")
    await auth_service.set_secondary_password(store, admin, "B00001", "2222")
    with pytest.raises(InvalidPassword):
        await auth_service.authenticate(store, "B00001", "1111")
    assert (await auth_service.authenticate(store, "B00001", "2222")).code == "B00001"


async def test_only_designated_admin_sets_passwords(store, primary):
    other_admin = make_session("E00001", Role.ADMIN)
    with pytest.raises(NotPermitted):
        await auth_service.set_secondary_password(store, other_admin, "B00001", "1234")
    with pytest.raises(NotPermitted):
        await auth_service.set_secondary_password(store, primary, "B00001", "1234")
    assert await store.get(BPASSWORDS, "B00001") is None


@pytest.mark.parametrize("code,password", [("M00001", "1234"), ("B0001", "1234"), ("B00001", "123"), ("B00001", "12a4")])
async def test_set_password_validation(store, admin, code, password):
    with pytest.raises(InvalidFormat):
        await auth_service.set_secondary_password(store, admin, code, password)


async def test_authenticate_does_not_write(store):
    await auth_service.authenticate(store, "M00001", "1221")
    assert await store.list_all("artworks") == []
