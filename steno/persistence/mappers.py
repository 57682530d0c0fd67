"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from steno.domain.model import (
    Case,
    DebtorProfile,
    DemandLetter,
    Invitation,
    Session,
    User,
)
from steno.domain.value import (
    CaseId,
    DebtorProfileId,
    Email,
    InvitationToken,
    LetterId,
    OrganizationId,
    TokenId,
    UserId,
    UserRole,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def _optional_uuid(value: Any) -> Optional[UUID]:
    return _uuid(value) if value else None


def row_to_case(row: Dict[str, Any]) -> Case:
    """Convert database row to Case domain model.

    Args:
        row: Database row as dict

    Returns:
        Case domain model
    """
    debtor_user_id = _optional_uuid(row.get("debtor_user_id"))
    return Case(
        id=CaseId(_uuid(row["id"])),
        organization_id=OrganizationId(_uuid(row["organization_id"])),
        creditor_name=row["creditor_name"],
        debtor_name=row.get("debtor_name"),
        debtor_email=row.get("debtor_email"),
        reference_number=row.get("reference_number"),
        account_number=row.get("account_number"),
        debtor_ssn_hash=row.get("debtor_ssn_hash"),
        debtor_dob=row.get("debtor_dob"),
        verification_attempts=row["verification_attempts"],
        verification_locked_until=row.get("verification_locked_until"),
        debtor_user_id=UserId(debtor_user_id) if debtor_user_id else None,
        created_at=row["created_at"],
    )


def case_to_dict(case: Case) -> Dict[str, Any]:
    return case.model_dump()


def row_to_invitation(row: Dict[str, Any]) -> Optional[Invitation]:
    """Extract the embedded invitation from a demand letter row.

    Args:
        row: Demand letter row as dict

    Returns:
        Invitation, or None if the letter never had one
    """
    if not row.get("invitation_token_id"):
        return None
    return Invitation(
        token=InvitationToken(row["invitation_token"]),
        token_id=TokenId(row["invitation_token_id"]),
        encrypted_payload=row["invitation_payload"],
        expires_at=row["invitation_expires_at"],
        usage_limit=row["invitation_usage_limit"],
        usage_count=row["invitation_usage_count"],
        revoked_at=row.get("invitation_revoked_at"),
        created_at=row["invitation_created_at"],
    )


def invitation_to_dict(invitation: Invitation) -> Dict[str, Any]:
    """Convert an invitation to demand letter column values.

    Args:
        invitation: Invitation domain model

    Returns:
        Dict of ``invitation_*`` columns
    """
    return {
        "invitation_token": invitation.token.root,
        "invitation_token_id": invitation.token_id,
        "invitation_payload": invitation.encrypted_payload,
        "invitation_expires_at": invitation.expires_at,
        "invitation_usage_limit": invitation.usage_limit,
        "invitation_usage_count": invitation.usage_count,
        "invitation_revoked_at": invitation.revoked_at,
        "invitation_created_at": invitation.created_at,
    }


def row_to_letter(row: Dict[str, Any]) -> DemandLetter:
    """Convert database row to DemandLetter domain model.

    Args:
        row: Database row as dict

    Returns:
        DemandLetter domain model with its invitation, if any
    """
    return DemandLetter(
        id=LetterId(_uuid(row["id"])),
        case_id=CaseId(_uuid(row["case_id"])),
        organization_id=OrganizationId(_uuid(row["organization_id"])),
        invitation=row_to_invitation(row),
        created_at=row["created_at"],
    )


def letter_to_dict(letter: DemandLetter) -> Dict[str, Any]:
    letter_dict: Dict[str, Any] = {
        "id": letter.id,
        "case_id": letter.case_id,
        "organization_id": letter.organization_id,
        "created_at": letter.created_at,
    }
    if letter.invitation:
        letter_dict.update(invitation_to_dict(letter.invitation))
    return letter_dict


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    return User(
        id=UserId(_uuid(row["id"])),
        organization_id=OrganizationId(_uuid(row["organization_id"])),
        email=Email(row["email"]),
        password_hash=row["password_hash"],
        role=UserRole(row["role"]),
        email_verified=row["email_verified"],
        created_at=row["created_at"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict.

    Args:
        user: User domain model

    Returns:
        Dict suitable for database insertion/update
    """
    user_dict = user.model_dump()
    user_dict["role"] = user.role.value
    return user_dict


def row_to_debtor_profile(row: Dict[str, Any]) -> DebtorProfile:
    return DebtorProfile(
        id=DebtorProfileId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        case_id=CaseId(_uuid(row["case_id"])),
        invitation_token_id=TokenId(row["invitation_token_id"]),
        terms_accepted_at=row["terms_accepted_at"],
        terms_accepted_ip=row.get("terms_accepted_ip"),
        terms_version=row["terms_version"],
        created_at=row["created_at"],
    )


def debtor_profile_to_dict(profile: DebtorProfile) -> Dict[str, Any]:
    return profile.model_dump()


def session_to_dict(session: Session) -> Dict[str, Any]:
    return session.model_dump()
