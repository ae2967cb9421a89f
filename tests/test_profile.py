"""Tests for the user profile record."""

from __future__ import annotations

import pytest

from mvp_activities.profile import UserProfile


def test_from_dict_reads_status_model():
    payload = {
        "userStatusModel": {"id": 17, "userProfileIdentifier": "id-17"},
        "other": True,
    }

    profile = UserProfile.from_dict(payload)

    assert profile.id == 17
    assert profile.user_profile_identifier == "id-17"
    assert profile.raw == payload


def test_from_dict_without_identifier():
    profile = UserProfile.from_dict({"userStatusModel": {"id": 3}})

    assert profile.user_profile_identifier is None


@pytest.mark.parametrize(
    "payload",
    [{}, {"userStatusModel": None}, {"userStatusModel": {}}, [1, 2], "text"],
)
def test_from_dict_requires_id(payload):
    with pytest.raises(KeyError):
        UserProfile.from_dict(payload)
