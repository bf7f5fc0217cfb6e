import pytest

from storefront import errors, schemas
from storefront.auth import verify_password


def register(services, username="bob", password="secret1"):
    return services.identity.create_user(
        schemas.UserCreate(username=username, password=password, email=f"{username}@example.com")
    )


def test_duplicate_username_conflicts(services):
    register(services, "bob", "secret1")
    with pytest.raises(errors.Conflict):
        register(services, "bob", "another1")


def test_password_is_stored_hashed(services):
    user = register(services)
    assert user.password_hash != "secret1"
    assert verify_password("secret1", user.password_hash)
    assert user.is_admin is False


def test_lookups(services):
    user = register(services)
    assert services.identity.get_user(user.id).username == "bob"
    assert services.identity.get_user_by_username("bob").id == user.id
    with pytest.raises(errors.NotFound):
        services.identity.get_user(999)
    with pytest.raises(errors.NotFound):
        services.identity.get_user_by_username("alice")


def test_authenticate(services):
    register(services)
    assert services.identity.authenticate("bob", "secret1").username == "bob"
    with pytest.raises(errors.Unauthorized):
        services.identity.authenticate("bob", "wrong-password")
    with pytest.raises(errors.Unauthorized):
        services.identity.authenticate("nobody", "secret1")


def test_admin_flag(services):
    admin = services.identity.create_user(
        schemas.UserCreate(username="root", password="rootpass", email="root@example.com"), is_admin=True
    )
    user = register(services)
    assert services.identity.is_admin(admin) is True
    assert services.identity.is_admin(user) is False
    assert admin.role == "admin" and user.role == "user"


def test_user_create_validation():
    from pydantic import ValidationError

    with pytest.raises(ValidationError):
        schemas.UserCreate(username="bo", password="secret1", email="bo@example.com")
    with pytest.raises(ValidationError):
        schemas.UserCreate(username="bob", password="short", email="bob@example.com")
    with pytest.raises(ValidationError):
        schemas.UserCreate(username="bob", password="secret1", email="not-an-email")
