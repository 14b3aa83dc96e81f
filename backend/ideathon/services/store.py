from __future__ import annotations
from typing import Protocol
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from ideathon.models.competition import Competition
from ideathon.models.idea import Idea
from ideathon.models.registration import Registration, ACTIVE_PARTICIPANT_INDEX, ACTIVE_IDEA_INDEX

UNIQUE_INDEXES = (ACTIVE_PARTICIPANT_INDEX, ACTIVE_IDEA_INDEX)


class UniqueViolation(Exception):
    """A commit lost a race on one of the active-registration unique indexes."""

    def __init__(self, constraint: str):
        super().__init__(constraint)
        self.constraint = constraint


class RegistrationStore(Protocol):
    async def get_competition(self, competition_id: UUID) -> Competition | None: ...
    async def get_idea(self, idea_id: UUID) -> Idea | None: ...
    async def get_registration(self, registration_id: UUID) -> Registration | None: ...
    async def registrations_for(self, competition_id: UUID) -> list[Registration]: ...
    async def registrations_of(self, participant_id: UUID) -> list[Registration]: ...
    async def add(self, obj) -> None: ...
    async def save(self, *objs) -> None: ...


def violated_index(exc: IntegrityError) -> str | None:
    orig = getattr(exc, "orig", None)
    # asyncpg's UniqueViolationError is chained under the DBAPI adapter error
    name = getattr(getattr(orig, "__cause__", None), "constraint_name", None) or getattr(orig, "constraint_name", None)
    if name in UNIQUE_INDEXES:
        return name
    text = str(orig or exc)
    for known in UNIQUE_INDEXES:
        if known in text:
            return known
    return None


class SqlRegistrationStore:
    """
    RegistrationStore over one AsyncSession. Every write is a single commit;
    on failure the session is rolled back so nothing partial is visible.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_competition(self, competition_id: UUID) -> Competition | None:
        return await self.session.get(Competition, competition_id)

    async def get_idea(self, idea_id: UUID) -> Idea | None:
        return await self.session.get(Idea, idea_id)

    async def get_registration(self, registration_id: UUID) -> Registration | None:
        return await self.session.get(Registration, registration_id)

    async def registrations_for(self, competition_id: UUID) -> list[Registration]:
        q = (
            select(Registration)
            .where(Registration.competition_id == competition_id)
            .order_by(Registration.created_at.desc())
        )
        return list((await self.session.execute(q)).scalars().all())

    async def registrations_of(self, participant_id: UUID) -> list[Registration]:
        q = (
            select(Registration)
            .where(Registration.participant_id == participant_id)
            .order_by(Registration.created_at.desc())
        )
        return list((await self.session.execute(q)).scalars().all())

    async def add(self, obj) -> None:
        self.session.add(obj)
        await self._commit()

    async def save(self, *objs) -> None:
        self.session.add_all(objs)
        await self._commit()

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            index = violated_index(e)
            if index is None:
                raise
            raise UniqueViolation(index) from e
