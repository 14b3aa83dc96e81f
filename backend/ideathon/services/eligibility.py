from __future__ import annotations
import re
from datetime import datetime
from typing import Literal, Tuple
from email_validator import validate_email, EmailNotValidError
from pydantic import BaseModel, Field
from ideathon.config import GITHUB_REPOSITORY_PATTERN, Settings, settings as default_settings
from ideathon.models.competition import Competition
from ideathon.schemas.registration import RegistrationRequest
from ideathon.services.errors import Verdict, OK, reject
from ideathon.services.windows import ensure_utc, effective_update_deadline

Mode = Literal["create", "amend"]


class EligibilityPolicy(BaseModel):
    """Field-shape heuristics applied after the competition's own bounds."""
    pitch_min_length: int = Field(ge=0, default=50)
    pitch_max_length: int = Field(ge=1, default=1000)
    email_suffixes: Tuple[str, ...] = (".com",)
    mobile_digits: int = Field(ge=1, default=10)
    repository_url_pattern: str = GITHUB_REPOSITORY_PATTERN

    @classmethod
    def from_settings(cls, s: Settings | None = None) -> "EligibilityPolicy":
        s = s or default_settings
        return cls(
            pitch_min_length=s.pitch_min_length,
            pitch_max_length=s.pitch_max_length,
            email_suffixes=tuple(s.email_suffixes),
            mobile_digits=s.mobile_digits,
            repository_url_pattern=s.repository_url_pattern,
        )


def _check_window(ch: Competition, now: datetime, mode: Mode) -> Verdict:
    opens_at = ensure_utc(ch.opens_at)
    if now < opens_at:
        return reject("not_yet_open", f"Registration opens at {opens_at.isoformat()}", opens_at=opens_at.isoformat())
    if ch.status == "ended":
        return reject("deadline_passed", "This competition has ended", mode=mode)
    if mode == "create":
        deadline = ensure_utc(ch.registration_deadline)
        if now > deadline:
            return reject("deadline_passed", f"Registration closed at {deadline.isoformat()}", deadline=deadline.isoformat(), mode=mode)
    else:
        deadline = effective_update_deadline(ch)
        if now > deadline:
            return reject("deadline_passed", f"Updates closed at {deadline.isoformat()}", deadline=deadline.isoformat(), mode=mode)
    return OK


def _check_bounds(c: RegistrationRequest, ch: Competition) -> Verdict:
    if not (ch.min_age <= c.age <= ch.max_age):
        return reject(
            "age_out_of_range",
            f"Age must be between {ch.min_age} and {ch.max_age}",
            min=ch.min_age, max=ch.max_age, value=c.age,
        )
    if not (ch.min_team_size <= c.team_size <= ch.max_team_size):
        return reject(
            "team_size_out_of_range",
            f"Team size must be between {ch.min_team_size} and {ch.max_team_size}",
            min=ch.min_team_size, max=ch.max_team_size, value=c.team_size,
        )
    return OK


def _invalid(field: str, rule: str, message: str, **extra) -> Verdict:
    return reject("invalid_field", message, field=field, rule=rule, **extra)


def _check_fields(c: RegistrationRequest, policy: EligibilityPolicy) -> Verdict:
    n = policy.mobile_digits
    # ASCII digits only
    if not re.fullmatch(rf"[0-9]{{{n}}}", c.contact_phone or ""):
        return _invalid("contact_phone", "mobile_digits", f"Mobile number must be exactly {n} digits", digits=n)

    try:
        validate_email(c.contact_email, check_deliverability=False)
    except EmailNotValidError:
        return _invalid("contact_email", "email_format", "Please provide a valid email address")
    # an empty suffix list disables the suffix rule
    if policy.email_suffixes and not c.contact_email.lower().endswith(tuple(s.lower() for s in policy.email_suffixes)):
        suffixes = ", ".join(policy.email_suffixes)
        return _invalid(
            "contact_email", "email_suffix", f"Email address must end with {suffixes}",
            suffixes=list(policy.email_suffixes),
        )

    if c.repository_url is not None and not re.fullmatch(policy.repository_url_pattern, c.repository_url):
        return _invalid(
            "repository_url", "repository_url_format",
            "Please enter a valid repository URL (e.g., https://github.com/username/repository)",
        )

    if len(c.pitch_details.strip()) < policy.pitch_min_length:
        return _invalid(
            "pitch_details", "pitch_min_length",
            f"Pitch details must be at least {policy.pitch_min_length} characters long",
            min_length=policy.pitch_min_length,
        )
    if len(c.pitch_details.strip()) > policy.pitch_max_length:
        return _invalid(
            "pitch_details", "pitch_max_length",
            f"Pitch details must be at most {policy.pitch_max_length} characters long",
            max_length=policy.pitch_max_length,
        )

    if c.accepted_terms is not True:
        return _invalid("accepted_terms", "terms_accepted", "Please accept the terms and conditions to proceed")
    return OK


def evaluate(
    candidate: RegistrationRequest,
    competition: Competition,
    *,
    now: datetime,
    mode: Mode = "create",
    policy: EligibilityPolicy | None = None,
) -> Verdict:
    """
    Check a candidate against a competition, stopping at the first failure.

    Order: time window, age, team size, then contact/pitch/terms fields. The
    order is fixed so the same payload always reports the same rule.
    """
    policy = policy or EligibilityPolicy()
    verdict = _check_window(competition, ensure_utc(now), mode)
    if verdict.ok:
        verdict = _check_bounds(candidate, competition)
    if verdict.ok:
        verdict = _check_fields(candidate, policy)
    return verdict
