from __future__ import annotations
import asyncio
import copy
import uuid
from datetime import datetime, timedelta, timezone
import pytest
from ideathon.models.competition import Competition
from ideathon.models.idea import Idea
from ideathon.models.registration import Registration, ACTIVE_PARTICIPANT_INDEX, ACTIVE_IDEA_INDEX
from ideathon.schemas.registration import RegistrationRequest
from ideathon.services.eligibility import EligibilityPolicy
from ideathon.services.registrations import RegistrationService
from ideathon.services.store import UniqueViolation

T0 = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
DAY = timedelta(days=1)

VALID_PITCH = (
    "Solar-powered cold storage for smallholder farmers, cutting post-harvest "
    "losses by keeping produce fresh for up to three weeks."
)


def clone(obj):
    """Detached copy of an ORM row, so callers can't mutate stored state in place."""
    cls = type(obj)
    return cls(**{c.key: copy.deepcopy(getattr(obj, c.key)) for c in cls.__table__.columns})


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kw) -> datetime:
        self.now = self.now + timedelta(**kw)
        return self.now


class InMemoryStore:
    """
    RegistrationStore fake. Reads hand out copies; a commit stages every
    object, enforces the two active-registration unique keys, then swaps
    the staged state in, all or nothing.
    """

    def __init__(self):
        self.competitions: dict[uuid.UUID, Competition] = {}
        self.ideas: dict[uuid.UUID, Idea] = {}
        self.registrations: dict[uuid.UUID, Registration] = {}
        self.commits = 0

    # seeding helpers (sync, for fixtures)
    def put(self, obj):
        table = self._table(obj)
        table[obj.id] = clone(obj)
        return obj

    def _table(self, obj) -> dict:
        if isinstance(obj, Competition):
            return self.competitions
        if isinstance(obj, Idea):
            return self.ideas
        if isinstance(obj, Registration):
            return self.registrations
        raise TypeError(type(obj).__name__)

    async def get_competition(self, competition_id):
        c = self.competitions.get(competition_id)
        return clone(c) if c else None

    async def get_idea(self, idea_id):
        i = self.ideas.get(idea_id)
        return clone(i) if i else None

    async def get_registration(self, registration_id):
        r = self.registrations.get(registration_id)
        return clone(r) if r else None

    async def registrations_for(self, competition_id):
        rows = [r for r in self.registrations.values() if r.competition_id == competition_id]
        return [clone(r) for r in sorted(rows, key=lambda r: r.created_at, reverse=True)]

    async def registrations_of(self, participant_id):
        rows = [r for r in self.registrations.values() if r.participant_id == participant_id]
        return [clone(r) for r in sorted(rows, key=lambda r: r.created_at, reverse=True)]

    async def add(self, obj):
        await self._commit([obj])

    async def save(self, *objs):
        await self._commit(objs)

    async def _commit(self, objs):
        # the network round-trip of a real commit; lets concurrent tasks interleave
        await asyncio.sleep(0)
        staged = {
            "competitions": dict(self.competitions),
            "ideas": dict(self.ideas),
            "registrations": dict(self.registrations),
        }
        for obj in objs:
            name = {Competition: "competitions", Idea: "ideas", Registration: "registrations"}[type(obj)]
            staged[name][obj.id] = clone(obj)
        self._enforce_unique(staged["registrations"].values())
        self.competitions = staged["competitions"]
        self.ideas = staged["ideas"]
        self.registrations = staged["registrations"]
        self.commits += 1

    @staticmethod
    def _enforce_unique(rows):
        by_participant, by_idea = set(), set()
        for r in rows:
            if r.status != "submitted":
                continue
            pk = (r.competition_id, r.participant_id)
            if pk in by_participant:
                raise UniqueViolation(ACTIVE_PARTICIPANT_INDEX)
            by_participant.add(pk)
            ik = (r.competition_id, r.idea_id)
            if ik in by_idea:
                raise UniqueViolation(ACTIVE_IDEA_INDEX)
            by_idea.add(ik)


class RecordingEmitter:
    def __init__(self):
        self.events = []

    async def deliver(self, event):
        self.events.append(event)


class BrokenEmitter:
    def __init__(self):
        self.attempts = 0

    async def deliver(self, event):
        self.attempts += 1
        raise ConnectionError("redis unavailable")


def make_competition(**overrides) -> Competition:
    fields = dict(
        id=uuid.uuid4(),
        title="Green Futures Ideathon",
        theme="Climate",
        description=None,
        created_by=uuid.uuid4(),
        opens_at=T0,
        registration_deadline=T0 + 7 * DAY,
        update_deadline=None,
        min_age=18,
        max_age=35,
        min_team_size=1,
        max_team_size=5,
        status="active",
        created_at=T0 - DAY,
    )
    fields.update(overrides)
    return Competition(**fields)


def make_idea(owner_id: uuid.UUID, **overrides) -> Idea:
    fields = dict(
        id=uuid.uuid4(),
        owner_id=owner_id,
        title="FarmFresh Cold Chain",
        category="AgriTech",
        pitch="Affordable cold storage",
        created_at=T0 - 10 * DAY,
    )
    fields.update(overrides)
    return Idea(**fields)


def make_request(idea_id: uuid.UUID, **overrides) -> RegistrationRequest:
    payload = dict(
        idea_id=idea_id,
        team_name="Solar Sprinters",
        team_members=[
            {"name": "Asha Rao", "email": "asha@startsmart.com", "role": "Lead"},
            {"name": "Dev Patel", "role": "Engineer"},
        ],
        age=20,
        team_size=3,
        contact_email="team@startsmart.com",
        contact_phone="9876543210",
        pitch_details=VALID_PITCH,
        repository_url="https://github.com/solar-sprinters/farmfresh",
        documents=["uploads/pitch-deck.pdf"],
        accepted_terms=True,
    )
    payload.update(overrides)
    return RegistrationRequest.model_validate(payload)


@pytest.fixture
def clock():
    return FixedClock(T0 + DAY)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def emitter():
    return RecordingEmitter()


@pytest.fixture
def participant_id():
    return uuid.uuid4()


@pytest.fixture
def competition(store):
    return store.put(make_competition())


@pytest.fixture
def idea(store, participant_id):
    return store.put(make_idea(participant_id))


@pytest.fixture
def service(store, clock, emitter):
    return RegistrationService(store, clock=clock, emitter=emitter, policy=EligibilityPolicy())
