"""Tests for the record kind registry."""

import pytest

from rtotrack.exceptions import UnknownRecordKindError
from rtotrack.kinds import KindPolicy, get_kind, list_kinds


class TestRegistry:
    def test_list_kinds(self):
        assert list_kinds() == [
            "fitness",
            "gps",
            "insurance",
            "puc",
            "tax",
            "temporary_permit_other_state",
        ]

    def test_get_kind(self):
        policy = get_kind("fitness")
        assert isinstance(policy, KindPolicy)
        assert policy.label == "Fitness Certificate"

    @pytest.mark.parametrize("name", ["Fitness", " fitness ", "FITNESS"])
    def test_case_insensitive(self, name):
        assert get_kind(name).name == "fitness"

    def test_dashes_and_spaces(self):
        assert get_kind("temporary-permit-other-state").name == "temporary_permit_other_state"
        assert get_kind("Temporary Permit Other State").name == "temporary_permit_other_state"

    def test_unknown_kind(self):
        with pytest.raises(UnknownRecordKindError) as exc:
            get_kind("pollution")
        assert exc.value.kind == "pollution"
        assert "fitness" in exc.value.details


class TestWindows:
    @pytest.mark.parametrize(
        "name,expiring_soon,refresh",
        [
            ("fitness", 30, 15),
            ("tax", 30, 15),
            ("insurance", 30, 15),
            ("temporary_permit_other_state", 7, 7),
            ("puc", 30, 30),
            ("gps", 30, 30),
        ],
    )
    def test_default_windows(self, name, expiring_soon, refresh):
        policy = get_kind(name)
        assert policy.expiring_soon_days == expiring_soon
        assert policy.refresh_window_days == refresh

    def test_terms(self):
        assert get_kind("fitness").term_years == 1
        assert get_kind("insurance").term_years == 1
        assert get_kind("tax").term_years is None


class TestOverrides:
    def test_no_overrides_returns_same(self):
        policy = get_kind("tax")
        assert policy.with_overrides() is policy

    def test_override_one_window(self):
        policy = get_kind("tax").with_overrides(refresh_window_days=45)
        assert policy.refresh_window_days == 45
        assert policy.expiring_soon_days == 30

    def test_registry_unchanged(self):
        get_kind("tax").with_overrides(expiring_soon_days=1)
        assert get_kind("tax").expiring_soon_days == 30
