"""Test configuration and fixtures."""

import os
from datetime import date, datetime, timezone
from uuid import uuid4

# Settings are read from the environment; these must exist before any
# container is built.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("AUTH__JWT_SECRET", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("AUTH__BCRYPT_ROUNDS", "4")

from dishka import AsyncContainer  # noqa: E402

from steno.domain.model import Case, DemandLetter  # noqa: E402
from steno.domain.repository import (  # noqa: E402
    CaseRepository,
    DemandLetterRepository,
)
from steno.domain.service import PasswordHasher  # noqa: E402
from steno.domain.value import CaseId, LetterId, OrganizationId  # noqa: E402

DEBTOR_SSN_LAST_FOUR = "1234"
DEBTOR_DOB = "1985-03-15"
DEBTOR_ACCOUNT_NUMBER = "ACCT-98765"
STRONG_PASSWORD = "Sup3rSecret!"


async def seed_case_and_letter(
    env: AsyncContainer,
    organization_id: OrganizationId | None = None,
    debtor_name: str = "Jane Doe",
) -> tuple[Case, DemandLetter]:
    """Store a case with known identity data and a letter without invitation.

    Args:
        env: Request-scoped container
        organization_id: Owning organization, random when omitted
        debtor_name: Debtor's full name

    Returns:
        The saved case and letter
    """
    case_repo = await env.get(CaseRepository)
    letter_repo = await env.get(DemandLetterRepository)
    hasher = await env.get(PasswordHasher)

    organization_id = organization_id or OrganizationId(uuid4())
    case = await case_repo.save(
        Case(
            id=CaseId(uuid4()),
            organization_id=organization_id,
            creditor_name="Acme Lending",
            debtor_name=debtor_name,
            debtor_email="jane.doe@example.com",
            reference_number="REF-2024-001",
            account_number=DEBTOR_ACCOUNT_NUMBER,
            debtor_ssn_hash=await hasher.hash(DEBTOR_SSN_LAST_FOUR),
            debtor_dob=date.fromisoformat(DEBTOR_DOB),
            created_at=datetime.now(timezone.utc),
        )
    )
    letter = await letter_repo.save(
        DemandLetter(
            id=LetterId(uuid4()),
            case_id=case.id,
            organization_id=organization_id,
        )
    )
    return case, letter
