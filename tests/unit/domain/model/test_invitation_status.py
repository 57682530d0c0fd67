"""Unit tests for derived invitation status."""

from datetime import datetime, timedelta, timezone

import pytest

from steno.domain.model.invitation import Invitation
from steno.domain.value import InvitationStatus, InvitationToken, TokenId

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def _invitation(**overrides) -> Invitation:
    fields = dict(
        token=InvitationToken("token"),
        token_id=TokenId("token-id"),
        encrypted_payload="{}",
        expires_at=NOW + timedelta(days=1),
        usage_limit=1,
        usage_count=0,
        revoked_at=None,
        created_at=NOW - timedelta(days=1),
    )
    fields.update(overrides)
    return Invitation(**fields)


class TestStatusAt:
    """Tests for status derivation order."""

    def test_fresh_invitation_is_active(self):
        assert _invitation().status_at(NOW) == InvitationStatus.ACTIVE

    def test_expiry_instant_counts_as_expired(self):
        """Unusable at the exact expiry instant."""
        invitation = _invitation(expires_at=NOW)

        assert invitation.status_at(NOW) == InvitationStatus.EXPIRED
        assert invitation.status_at(NOW - timedelta(microseconds=1)) == (
            InvitationStatus.ACTIVE
        )

    def test_revoked_wins_over_expired_and_exhausted(self):
        invitation = _invitation(
            revoked_at=NOW, expires_at=NOW - timedelta(days=1), usage_count=1
        )

        assert invitation.status_at(NOW) == InvitationStatus.REVOKED

    def test_expired_wins_over_exhausted(self):
        invitation = _invitation(expires_at=NOW - timedelta(days=1), usage_count=1)

        assert invitation.status_at(NOW) == InvitationStatus.EXPIRED

    def test_used_up_invitation_is_exhausted(self):
        assert _invitation(usage_count=1).status_at(NOW) == InvitationStatus.EXHAUSTED

    def test_unlimited_invitation_never_exhausts(self):
        invitation = _invitation(usage_limit=0, usage_count=500)

        assert invitation.status_at(NOW) == InvitationStatus.ACTIVE
        assert invitation.remaining_uses() == -1


class TestRemainingUses:
    """Tests for remaining_uses."""

    @pytest.mark.parametrize(
        "limit,count,expected", [(1, 0, 1), (3, 1, 2), (3, 3, 0), (2, 5, 0)]
    )
    def test_remaining_uses(self, limit, count, expected):
        invitation = _invitation(usage_limit=limit, usage_count=count)

        assert invitation.remaining_uses() == expected
