from __future__ import annotations
import uuid
from ideathon.models.registration import Registration, ACTIVE_PARTICIPANT_INDEX, ACTIVE_IDEA_INDEX
from ideathon.services.uniqueness import check_uniqueness, conflict_for_index
from conftest import T0


def _reg(participant_id, idea_id, status="submitted", **kw):
    return Registration(
        id=kw.pop("id", uuid.uuid4()),
        competition_id=kw.pop("competition_id", uuid.uuid4()),
        participant_id=participant_id,
        idea_id=idea_id,
        status=status,
        created_at=T0,
        last_modified_at=T0,
        **kw,
    )


def test_empty_competition_is_ok():
    assert check_uniqueness(participant_id=uuid.uuid4(), idea_id=uuid.uuid4(), existing=[]).ok


def test_second_active_registration_by_participant():
    p, idea = uuid.uuid4(), uuid.uuid4()
    first = _reg(p, uuid.uuid4())
    v = check_uniqueness(participant_id=p, idea_id=idea, existing=[first])
    assert v.kind == "already_registered"
    assert v.details["registration_id"] == str(first.id)


def test_idea_held_by_another_participant():
    idea = uuid.uuid4()
    v = check_uniqueness(participant_id=uuid.uuid4(), idea_id=idea, existing=[_reg(uuid.uuid4(), idea)])
    assert v.kind == "idea_already_committed"
    assert v.details["idea_id"] == str(idea)


def test_participant_conflict_wins_over_idea_conflict():
    p, idea = uuid.uuid4(), uuid.uuid4()
    existing = [_reg(uuid.uuid4(), idea), _reg(p, uuid.uuid4())]
    assert check_uniqueness(participant_id=p, idea_id=idea, existing=existing).kind == "already_registered"


def test_withdrawn_and_closed_rows_do_not_count():
    p, idea = uuid.uuid4(), uuid.uuid4()
    existing = [_reg(p, idea, status="withdrawn"), _reg(uuid.uuid4(), idea, status="closed")]
    assert check_uniqueness(participant_id=p, idea_id=idea, existing=existing).ok


def test_amendment_ignores_its_own_row():
    p, idea = uuid.uuid4(), uuid.uuid4()
    mine = _reg(p, idea)
    assert check_uniqueness(participant_id=p, idea_id=idea, existing=[mine], amending_id=mine.id).ok


def test_amendment_onto_committed_idea():
    p, idea = uuid.uuid4(), uuid.uuid4()
    mine = _reg(p, uuid.uuid4())
    theirs = _reg(uuid.uuid4(), idea)
    v = check_uniqueness(participant_id=p, idea_id=idea, existing=[mine, theirs], amending_id=mine.id)
    assert v.kind == "idea_already_committed"


def test_index_names_map_to_conflicts():
    assert conflict_for_index(ACTIVE_PARTICIPANT_INDEX).kind == "already_registered"
    assert conflict_for_index(ACTIVE_IDEA_INDEX).kind == "idea_already_committed"
