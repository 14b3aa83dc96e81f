import pytest
from ideathon.config import Settings, parse_suffixes
from ideathon.services.eligibility import EligibilityPolicy


@pytest.mark.parametrize("raw", [None, "", "   ", " , ,"])
def test_blank_suffixes_fall_back_to_default(raw):
    assert parse_suffixes(raw) == [".com"]


def test_suffixes_are_trimmed():
    assert parse_suffixes(".org, .com ,") == [".org", ".com"]


def test_policy_from_settings():
    s = Settings(email_suffixes=[".in"], pitch_min_length=20, pitch_max_length=500, mobile_digits=8)
    policy = EligibilityPolicy.from_settings(s)
    assert policy.email_suffixes == (".in",)
    assert (policy.pitch_min_length, policy.pitch_max_length, policy.mobile_digits) == (20, 500, 8)
