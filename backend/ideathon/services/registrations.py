from __future__ import annotations
import uuid
from datetime import datetime, timezone as dt_tz
from typing import Callable
from uuid import UUID
import structlog
from ideathon.models.competition import Competition
from ideathon.models.idea import Idea
from ideathon.models.registration import Registration
from ideathon.schemas.competition import CompetitionCreate
from ideathon.schemas.registration import RegistrationRequest, WithdrawalAck
from ideathon.services import lifecycle
from ideathon.services.acknowledgments import AckKind, AcknowledgmentEmitter, build_acknowledgment, emit
from ideathon.services.eligibility import EligibilityPolicy, Mode, evaluate
from ideathon.services.errors import RegistrationError, Verdict
from ideathon.services.store import RegistrationStore, UniqueViolation
from ideathon.services.uniqueness import check_uniqueness, conflict_for_index

log = structlog.get_logger()

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(dt_tz.utc)


class RegistrationService:
    """
    Runs a registration request through the pipeline:

        catalog lookups -> eligibility -> uniqueness -> transition -> commit -> acknowledgment

    The first failing stage raises RegistrationError and nothing is written.
    Acknowledgments go out only after the commit and never undo it.
    """

    def __init__(
        self,
        store: RegistrationStore,
        *,
        clock: Clock = utc_now,
        emitter: AcknowledgmentEmitter | None = None,
        policy: EligibilityPolicy | None = None,
    ):
        self.store = store
        self.clock = clock
        self.emitter = emitter
        self.policy = policy or EligibilityPolicy.from_settings()

    # --- lookups ---

    async def _competition(self, competition_id: UUID) -> Competition:
        ch = await self.store.get_competition(competition_id)
        if ch is None:
            raise RegistrationError("not_found", "Competition not found", {"competition_id": str(competition_id)})
        return ch

    async def _registration(self, registration_id: UUID) -> Registration:
        reg = await self.store.get_registration(registration_id)
        if reg is None:
            raise RegistrationError("not_found", "Registration not found", {"registration_id": str(registration_id)})
        return reg

    async def _owned_idea(self, idea_id: UUID, participant_id: UUID) -> Idea:
        idea = await self.store.get_idea(idea_id)
        if idea is None:
            raise RegistrationError("not_found", "Idea not found", {"idea_id": str(idea_id)})
        if idea.owner_id != participant_id:
            raise RegistrationError("not_owner", "You can only register your own ideas", {"idea_id": str(idea_id)})
        return idea

    # --- checks ---

    def _check(self, verdict: Verdict, **ctx) -> None:
        if not verdict.ok:
            log.info("registration_rejected", kind=verdict.kind, rule=verdict.details.get("rule"), **ctx)
            verdict.raise_for_failure()

    async def _vet(
        self,
        ch: Competition,
        request: RegistrationRequest,
        participant_id: UUID,
        now: datetime,
        mode: Mode,
        amending_id: UUID | None = None,
    ) -> None:
        ctx = {"competition_id": str(ch.id), "participant_id": str(participant_id), "mode": mode}
        self._check(evaluate(request, ch, now=now, mode=mode, policy=self.policy), **ctx)
        existing = await self.store.registrations_for(ch.id)
        self._check(
            check_uniqueness(
                participant_id=participant_id, idea_id=request.idea_id,
                existing=existing, amending_id=amending_id,
            ),
            **ctx,
        )

    async def _explain_race(
        self, e: UniqueViolation, competition_id: UUID, participant_id: UUID, idea_id: UUID, amending_id: UUID | None
    ) -> RegistrationError:
        # Ids are passed in: the rollback expired every loaded instance.
        fresh = await self.store.registrations_for(competition_id)
        verdict = check_uniqueness(participant_id=participant_id, idea_id=idea_id, existing=fresh, amending_id=amending_id)
        if verdict.ok:
            verdict = conflict_for_index(e.constraint)
        log.info(
            "registration_race_lost",
            kind=verdict.kind, constraint=e.constraint,
            competition_id=str(competition_id), participant_id=str(participant_id),
        )
        return RegistrationError(verdict.kind, verdict.message, verdict.details)

    async def _acknowledge(self, reg: Registration, kind: AckKind, ch: Competition, idea: Idea, now: datetime) -> None:
        if self.emitter is None:
            return
        event = build_acknowledgment(reg, kind, competition=ch, idea=idea, now=now)
        await emit(self.emitter, event)

    # --- transitions ---

    async def submit(self, participant_id: UUID, competition_id: UUID, request: RegistrationRequest) -> Registration:
        ch = await self._competition(competition_id)
        idea = await self._owned_idea(request.idea_id, participant_id)
        now = self.clock()
        await self._vet(ch, request, participant_id, now, "create")

        reg = lifecycle.submit(request, competition_id=ch.id, participant_id=participant_id, now=now)
        try:
            await self.store.add(reg)
        except UniqueViolation as e:
            raise await self._explain_race(e, competition_id, participant_id, request.idea_id, None) from e

        log.info("registration_submitted", registration_id=str(reg.id), competition_id=str(ch.id), participant_id=str(participant_id))
        await self._acknowledge(reg, "registration_submitted", ch, idea, now)
        return reg

    async def amend(self, registration_id: UUID, participant_id: UUID, request: RegistrationRequest) -> Registration:
        reg = await self._registration(registration_id)
        lifecycle.ensure_allowed(reg, "amend", actor_id=participant_id)
        ch = await self._competition(reg.competition_id)
        idea = await self._owned_idea(request.idea_id, participant_id)
        now = self.clock()
        await self._vet(ch, request, participant_id, now, "amend", amending_id=reg.id)

        lifecycle.amend(reg, request, participant_id=participant_id, now=now)
        competition_id = ch.id
        try:
            await self.store.save(reg)
        except UniqueViolation as e:
            raise await self._explain_race(e, competition_id, participant_id, request.idea_id, registration_id) from e

        log.info("registration_amended", registration_id=str(reg.id), competition_id=str(ch.id), participant_id=str(participant_id))
        await self._acknowledge(reg, "registration_amended", ch, idea, now)
        return reg

    async def withdraw(self, registration_id: UUID, actor_id: UUID, *, is_admin: bool = False) -> WithdrawalAck:
        reg = await self._registration(registration_id)
        lifecycle.withdraw(reg, actor_id=actor_id, now=self.clock(), is_admin=is_admin)
        await self.store.save(reg)
        log.info("registration_withdrawn", registration_id=str(reg.id), actor_id=str(actor_id), by_admin=is_admin)
        return WithdrawalAck(registration_id=reg.id, status=reg.status, withdrawn_at=reg.last_modified_at)

    async def close_competition(self, competition_id: UUID) -> int:
        """End the competition and close every submitted registration in one commit."""
        ch = await self._competition(competition_id)
        now = self.clock()
        active = [r for r in await self.store.registrations_for(ch.id) if r.status == lifecycle.SUBMITTED]
        for r in active:
            lifecycle.close(r, now=now)
        ch.status = "ended"
        await self.store.save(ch, *active)
        log.info("competition_closed", competition_id=str(ch.id), closed_registrations=len(active))
        return len(active)

    # --- competitions ---

    async def define_competition(self, payload: CompetitionCreate, *, created_by: UUID) -> Competition:
        # Window and bound ordering were validated by CompetitionCreate.
        ch = Competition(
            id=uuid.uuid4(),
            title=payload.title,
            theme=payload.theme,
            description=payload.description,
            created_by=created_by,
            opens_at=payload.opens_at,
            registration_deadline=payload.registration_deadline,
            update_deadline=payload.update_deadline,
            min_age=payload.eligibility.min_age,
            max_age=payload.eligibility.max_age,
            min_team_size=payload.eligibility.min_team_size,
            max_team_size=payload.eligibility.max_team_size,
            status="active",
            created_at=self.clock(),
        )
        await self.store.add(ch)
        log.info("competition_defined", competition_id=str(ch.id), created_by=str(created_by))
        return ch

    async def get_competition(self, competition_id: UUID) -> Competition:
        return await self._competition(competition_id)

    # --- reads ---

    async def get(self, registration_id: UUID, viewer_id: UUID, *, is_admin: bool = False) -> Registration:
        reg = await self._registration(registration_id)
        if not is_admin and reg.participant_id != viewer_id:
            raise RegistrationError("not_owner", "Not authorized to view this registration", {"registration_id": str(reg.id)})
        return reg

    async def list_for_participant(self, participant_id: UUID) -> list[Registration]:
        return await self.store.registrations_of(participant_id)

    async def list_for_competition(self, competition_id: UUID) -> tuple[Competition, list[Registration]]:
        ch = await self._competition(competition_id)
        return ch, await self.store.registrations_for(ch.id)
