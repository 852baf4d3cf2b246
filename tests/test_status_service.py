"""Tests for activate / deactivate / ban."""

import pytest

from rolewallet.core.roles import Role
from rolewallet.exceptions import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    PermissionDeniedError,
    UnknownRoleError,
    ValidationError,
)
from rolewallet.models import AccountStatus
from rolewallet.schemas import LoginRequest, StatusAction

pytestmark = pytest.mark.asyncio


class TestSetStatus:
    async def test_deactivate_downstream_account(self, services, make_account, load_account):
        agent = await make_account(Role.AGENT)

        result = await services.status.set_status(Role.MASTER, agent, StatusAction.DEACTIVATE)

        assert result.id == agent
        assert result.status is AccountStatus.DEACTIVATED
        assert (await load_account(agent)).status == AccountStatus.DEACTIVATED

    async def test_reactivate(self, services, make_account, load_account):
        user = await make_account(Role.USER, status=AccountStatus.DEACTIVATED)

        await services.status.set_status("Sub Agent", user, "Activate")

        assert (await load_account(user)).status == AccountStatus.ACTIVATED

    async def test_peer_and_upstream_denied(self, services, make_account, load_account):
        peer = await make_account(Role.AGENT)
        senior = await make_account(Role.MASTER)

        with pytest.raises(PermissionDeniedError):
            await services.status.set_status(Role.AGENT, peer, StatusAction.DEACTIVATE)
        with pytest.raises(PermissionDeniedError):
            await services.status.set_status(Role.AGENT, senior, StatusAction.DEACTIVATE)

        assert (await load_account(peer)).status == AccountStatus.ACTIVATED
        assert (await load_account(senior)).status == AccountStatus.ACTIVATED

    async def test_mother_admin_may_change_any_account(self, services, make_account, load_account):
        other_mother = await make_account(Role.MOTHER_ADMIN)

        await services.status.set_status(Role.MOTHER_ADMIN, other_mother, StatusAction.DEACTIVATE)

        assert (await load_account(other_mother)).status == AccountStatus.DEACTIVATED

    async def test_same_status_is_conflict_without_write(self, services, make_account, load_account):
        user = await make_account(Role.USER)
        before = await load_account(user)

        with pytest.raises(ConflictError):
            await services.status.set_status(Role.MASTER, user, StatusAction.ACTIVATE)

        after = await load_account(user)
        assert after.status == AccountStatus.ACTIVATED
        assert after.updated_at == before.updated_at

    async def test_only_mother_admin_lifts_a_ban(self, services, make_account, load_account):
        user = await make_account(Role.USER, status=AccountStatus.BANNED)

        with pytest.raises(PermissionDeniedError):
            await services.status.set_status(Role.SUB_ADMIN, user, StatusAction.ACTIVATE)
        assert (await load_account(user)).status == AccountStatus.BANNED

        await services.status.set_status(Role.MOTHER_ADMIN, user, StatusAction.ACTIVATE)
        assert (await load_account(user)).status == AccountStatus.ACTIVATED

    async def test_missing_target(self, services):
        with pytest.raises(NotFoundError):
            await services.status.set_status(Role.MOTHER_ADMIN, 404, StatusAction.DEACTIVATE)

    async def test_unknown_actor_role(self, services, make_account):
        user = await make_account(Role.USER)

        with pytest.raises(UnknownRoleError):
            await services.status.set_status("Janitor", user, StatusAction.DEACTIVATE)

    async def test_unknown_action_rejected(self, services, make_account, load_account):
        user = await make_account(Role.USER)

        with pytest.raises(ValidationError):
            await services.status.set_status(Role.MOTHER_ADMIN, user, "Ban")

        assert (await load_account(user)).status == AccountStatus.ACTIVATED


class TestBan:
    async def test_mother_admin_bans(self, services, make_account, load_account):
        agent = await make_account(Role.AGENT)

        result = await services.status.ban(Role.MOTHER_ADMIN, agent)

        assert result.status is AccountStatus.BANNED
        assert (await load_account(agent)).status == AccountStatus.BANNED

    @pytest.mark.parametrize("actor", [Role.SUB_ADMIN, Role.MASTER, Role.USER])
    async def test_other_roles_cannot_ban(self, services, make_account, load_account, actor):
        user = await make_account(Role.USER)

        with pytest.raises(PermissionDeniedError):
            await services.status.ban(actor, user)

        assert (await load_account(user)).status == AccountStatus.ACTIVATED

    async def test_ban_twice_is_conflict(self, services, make_account):
        user = await make_account(Role.USER)
        await services.status.ban(Role.MOTHER_ADMIN, user)

        with pytest.raises(ConflictError):
            await services.status.ban(Role.MOTHER_ADMIN, user)

    async def test_ban_missing_account(self, services):
        with pytest.raises(NotFoundError):
            await services.status.ban(Role.MOTHER_ADMIN, 404)

    async def test_banned_account_cannot_log_in(self, services, make_account, account_password):
        await make_account(Role.USER, username="soon_banned")
        account = await services.accounts.get_by_email("soon_banned@example.com")
        await services.status.ban(Role.MOTHER_ADMIN, account.id)

        with pytest.raises(InvalidCredentialsError):
            await services.accounts.login(
                LoginRequest(identifier="soon_banned@example.com", password=account_password)
            )
