"""Unit tests for UserDirectory — signup, lookups and whitelisted updates."""
import uuid
from unittest.mock import AsyncMock, patch

import pytest

from app.config import get_settings
from app.errors import ForbiddenFieldError, UserNotFound, ValidationError
from app.models.user import DEFAULT_ABOUT
from app.services.user_directory import UserDirectory
from conftest import STRONG_PASSWORD


@pytest.fixture
def directory(db, credentials):
    return UserDirectory(db, credentials)


class TestCreate:

    @pytest.mark.asyncio
    async def test_password_stored_as_hash(self, directory, credentials):
        user = await directory.create(
            {"firstName": "Jeff", "lastName": "Doe", "emailId": "jeff@x.com", "password": STRONG_PASSWORD}
        )
        assert user.password != STRONG_PASSWORD
        assert credentials.verify_password(STRONG_PASSWORD, user.password)

    @pytest.mark.asyncio
    async def test_defaults_and_normalisation(self, directory):
        user = await directory.create(
            {"firstName": " Jeff ", "emailId": " JEFF@X.com", "password": STRONG_PASSWORD}
        )
        assert user.first_name == "Jeff"
        assert user.email_id == "jeff@x.com"
        assert user.about == DEFAULT_ABOUT
        assert user.created_at is not None

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, directory):
        await directory.create({"firstName": "Jeff", "emailId": "jeff@x.com", "password": STRONG_PASSWORD})
        with pytest.raises(ValidationError, match="already registered"):
            await directory.create({"firstName": "Jeffrey", "emailId": "Jeff@X.com", "password": STRONG_PASSWORD})

    @pytest.mark.asyncio
    async def test_concurrent_signup_hits_unique_email(self, directory):
        """Both signups pass the lookup; the unique email index stops the second."""
        await directory.create({"firstName": "Jeff", "emailId": "jeff@x.com", "password": STRONG_PASSWORD})
        with patch.object(directory, "find_by_email", AsyncMock(return_value=None)):
            with pytest.raises(ValidationError, match="already registered") as exc_info:
                await directory.create(
                    {"firstName": "Jeffrey", "emailId": "jeff@x.com", "password": STRONG_PASSWORD}
                )
        assert exc_info.value.field == "emailId"

    @pytest.mark.asyncio
    async def test_weak_password_rejected(self, directory):
        with pytest.raises(ValidationError) as exc_info:
            await directory.create({"firstName": "Jeff", "emailId": "jeff@x.com", "password": "password"})
        assert exc_info.value.field == "password"


class TestLookups:

    @pytest.mark.asyncio
    async def test_find_by_email_is_case_insensitive(self, directory, make_user):
        user = await make_user(emailId="ada@example.com")
        assert (await directory.find_by_email("  ADA@example.com ")).id == user.id
        assert await directory.find_by_email("nobody@example.com") is None
        assert await directory.find_by_email("") is None

    @pytest.mark.asyncio
    async def test_find_by_id(self, directory, make_user):
        user = await make_user()
        assert (await directory.find_by_id(user.id)).email_id == user.email_id
        assert await directory.find_by_id(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_list_excluding_keeps_insertion_order(self, directory, make_user):
        users = [await make_user() for _ in range(4)]
        result = await directory.list_excluding({users[1].id}, offset=0, limit=10)
        assert [u.id for u in result] == [users[0].id, users[2].id, users[3].id]


class TestUpdate:

    @pytest.mark.asyncio
    async def test_profile_edit_whitelist(self, directory, make_user):
        user = await make_user()
        allowed = get_settings().allowed_fields("profile_edit")
        updated = await directory.update(user.id, {"age": "27", "about": "Go and Rust", "gender": "male"}, allowed)
        assert (updated.age, updated.about, updated.gender) == (27, "Go and Rust", "male")

    @pytest.mark.asyncio
    async def test_password_not_in_profile_edit_whitelist(self, directory, make_user):
        user = await make_user()
        allowed = get_settings().allowed_fields("profile_edit")
        with pytest.raises(ForbiddenFieldError) as exc_info:
            await directory.update(user.id, {"about": "hi", "password": "N3w!Password"}, allowed)
        assert exc_info.value.fields == ["password"]

    @pytest.mark.asyncio
    async def test_touched_fields_revalidated(self, directory, make_user):
        user = await make_user()
        allowed = get_settings().allowed_fields("profile_edit")
        with pytest.raises(ValidationError):
            await directory.update(user.id, {"age": 12}, allowed)
        assert (await directory.find_by_id(user.id)).age is None

    @pytest.mark.asyncio
    async def test_password_change_rehashes(self, directory, make_user, credentials):
        user = await make_user()
        allowed = get_settings().allowed_fields("password_change")
        updated = await directory.update(user.id, {"password": "N3w!Password"}, allowed)
        assert credentials.verify_password("N3w!Password", updated.password)
        assert not credentials.verify_password(STRONG_PASSWORD, updated.password)

    @pytest.mark.asyncio
    async def test_unknown_user(self, directory):
        with pytest.raises(UserNotFound):
            await directory.update(uuid.uuid4(), {"about": "x"}, {"about"})


class TestFieldPermissions:

    def test_permission_table(self):
        settings = get_settings()
        assert settings.allowed_fields("profile_edit") == {"gender", "age", "about"}
        assert settings.allowed_fields("password_change") == {"password"}
        assert settings.allowed_fields("no_such_route") == frozenset()
