"""
Unit Tests for the Admin Service
"""
import pytest
from sqlalchemy import func, select

from scholarship.core.exceptions import DuplicateUserError
from scholarship.core.security import verify_password
from scholarship.models import User, UserRole
from scholarship.schemas.admin import StudentAccountUpdate
from scholarship.services.admin_service import AdminService, ensure_admin_account


class TestEnsureAdminAccount:

    @pytest.mark.asyncio
    async def test_creates_missing_admin(self, db_session):
        user, created = await ensure_admin_account(db_session, "root-admin", "rootpass123")

        assert created is True
        assert user.role == UserRole.ADMIN
        assert verify_password("rootpass123", user.hashed_password)

    @pytest.mark.asyncio
    async def test_promotes_existing_user(self, db_session, test_user):
        user, created = await ensure_admin_account(db_session, test_user.username, "newpass123")

        assert created is False
        assert user.id == test_user.id
        assert user.role == UserRole.ADMIN
        assert verify_password("newpass123", user.hashed_password)
        assert await db_session.scalar(select(func.count()).select_from(User)) == 1


class TestUsernameRace:
    """The unique index decides when the pre-check saw a name as free"""

    @pytest.mark.asyncio
    async def test_create_account_lost_race(self, db_session, test_user, monkeypatch):
        service = AdminService(db_session)

        async def name_looks_free(username):
            return False

        monkeypatch.setattr(service, "username_taken", name_looks_free)

        with pytest.raises(DuplicateUserError):
            await service.create_student_account(test_user.username, "secret123")

        assert await db_session.scalar(select(func.count()).select_from(User)) == 1

    @pytest.mark.asyncio
    async def test_rename_lost_race(self, db_session, test_user, admin_user, monkeypatch):
        service = AdminService(db_session)

        async def name_looks_free(username):
            return False

        monkeypatch.setattr(service, "username_taken", name_looks_free)
        patch = StudentAccountUpdate.model_validate({"username": admin_user.username})

        with pytest.raises(DuplicateUserError):
            await service.update_student_account(test_user.id, patch)

        await db_session.refresh(test_user)
        assert test_user.username != admin_user.username
