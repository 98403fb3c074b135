"""
Tests for availability rule parsing and slot derivation.
"""

from __future__ import annotations

import math

import pytest

from studio_desk.application.exceptions import TimeParseError
from studio_desk.application.use_cases.slot_deriver import SlotDeriver
from studio_desk.application.utils.time_parser import parse_time_token, split_range
from studio_desk.domain.entities.availability import AvailabilityRule
from studio_desk.domain.entities.time_slot import TimeOfDay
from studio_desk.domain.entities.weekday import WEEKDAYS, Weekday


MONDAY = frozenset({Weekday.MONDAY})
SATURDAY = frozenset({Weekday.SATURDAY})


@pytest.mark.parametrize(
    "token, expected",
    [
        ("2:00 PM", "14:00"),
        ("12:00 AM", "00:00"),
        ("12:00 PM", "12:00"),
        ("9:30am", "09:30"),
        ("4 PM", "16:00"),
        ("10:00 a.m.", "10:00"),
        ("14:45", "14:45"),
    ],
)
def test_parse_time_token(token, expected):
    assert parse_time_token(token).to_24h() == expected


@pytest.mark.parametrize("token", ["", "noon", "13:00 PM", "0:00 AM", "25:00", "4:75 PM", "4:00 XM"])
def test_parse_time_token_rejects_malformed(token):
    with pytest.raises(TimeParseError):
        parse_time_token(token)


def test_split_range():
    assert split_range("9:00 AM - 12:00 PM") == ("9:00 AM", "12:00 PM")
    assert split_range("9:00 AM") is None


def test_single_time_yields_one_slot():
    """A single well-formed time produces exactly one slot for that weekday."""
    derivation = SlotDeriver().derive_slots([AvailabilityRule.for_day(Weekday.MONDAY, "2:00 PM")])

    assert len(derivation.slots) == 1
    slot = derivation.slots[0]
    assert slot.time24 == "14:00"
    assert slot.label == "2:00 PM"
    assert slot.weekdays == MONDAY
    assert derivation.errors == ()


def test_scenario_monday_and_saturday_range():
    rules = [
        AvailabilityRule.for_day(Weekday.MONDAY, "4:00 PM"),
        AvailabilityRule.for_day(Weekday.SATURDAY, "10:00 AM - 10:30 AM"),
    ]

    slots = SlotDeriver().derive_slots(rules).slots

    assert [(s.weekdays, s.time24, s.label) for s in slots] == [
        (MONDAY, "16:00", "4:00 PM"),
        (SATURDAY, "10:00", "10:00 AM"),
        (SATURDAY, "10:10", "10:10 AM"),
        (SATURDAY, "10:20", "10:20 AM"),
    ]


@pytest.mark.parametrize(
    "start, end",
    [
        (TimeOfDay(9, 0), TimeOfDay(12, 0)),
        (TimeOfDay(10, 0), TimeOfDay(10, 25)),
        (TimeOfDay(16, 5), TimeOfDay(16, 6)),
        (TimeOfDay(0, 0), TimeOfDay(23, 59)),
    ],
)
def test_expand_range_properties(start, end):
    slots = SlotDeriver().expand_range(start, end, MONDAY)
    minutes = [parse_time_token(s.time24).total_minutes for s in slots]

    assert len(slots) == math.ceil((end.total_minutes - start.total_minutes) / 10)
    assert minutes[0] == start.total_minutes
    assert minutes[-1] < end.total_minutes
    assert all(a < b for a, b in zip(minutes, minutes[1:]))


@pytest.mark.parametrize("start, end", [(TimeOfDay(12, 0), TimeOfDay(9, 0)), (TimeOfDay(9, 0), TimeOfDay(9, 0))])
def test_expand_range_inverted_or_empty(start, end):
    assert SlotDeriver().expand_range(start, end, MONDAY) == []


def test_range_uses_configured_increment():
    deriver = SlotDeriver(increment_minutes=30)
    slots = deriver.derive_slots([AvailabilityRule.for_day(Weekday.MONDAY, "9:00 AM - 10:30 AM")]).slots
    assert [s.time24 for s in slots] == ["09:00", "09:30", "10:00"]


def test_empty_and_none_rules_are_skipped():
    rules = [
        AvailabilityRule.for_day(Weekday.SUNDAY, "none"),
        AvailabilityRule.for_day(Weekday.TUESDAY, ""),
        AvailabilityRule.for_day(Weekday.TUESDAY, None),
    ]
    derivation = SlotDeriver().derive_slots(rules)
    assert derivation.slots == ()
    assert derivation.errors == ()


def test_bad_rule_is_reported_and_others_still_derive():
    bad = AvailabilityRule.for_day(Weekday.WEDNESDAY, "after lunch")
    rules = [bad, AvailabilityRule.for_day(Weekday.THURSDAY, "5:00 PM")]

    derivation = SlotDeriver().derive_slots(rules)

    assert [s.time24 for s in derivation.slots] == ["17:00"]
    assert len(derivation.errors) == 1
    assert derivation.errors[0].rule == bad
    assert "after lunch" in derivation.errors[0].reason


def test_bad_range_endpoint_is_reported():
    derivation = SlotDeriver().derive_slots([AvailabilityRule.for_day(Weekday.FRIDAY, "9:00 AM - later")])
    assert derivation.slots == ()
    assert len(derivation.errors) == 1


def test_duplicate_slots_are_collapsed_by_default():
    rules = [
        AvailabilityRule.for_day(Weekday.MONDAY, "4:00 PM"),
        AvailabilityRule.for_day(Weekday.MONDAY, "3:50 PM - 4:20 PM"),
    ]
    slots = SlotDeriver().derive_slots(rules).slots
    assert [s.time24 for s in slots] == ["16:00", "15:50", "16:10"]


def test_duplicates_kept_when_dedupe_disabled():
    rules = [
        AvailabilityRule.for_day(Weekday.MONDAY, "4:00 PM"),
        AvailabilityRule.for_day(Weekday.MONDAY, "4:00 PM"),
    ]
    slots = SlotDeriver(dedupe=False).derive_slots(rules).slots
    assert len(slots) == 2


def test_multi_day_rule_keeps_weekday_set():
    slots = SlotDeriver().derive_slots([AvailabilityRule(weekdays=WEEKDAYS, time_spec="4:00 PM")]).slots
    assert len(slots) == 1
    assert slots[0].is_offered_on(Weekday.FRIDAY)
    assert not slots[0].is_offered_on(Weekday.SATURDAY)


def test_derivation_is_deterministic():
    rules = [AvailabilityRule.for_day(Weekday.SATURDAY, "10:00 AM - 11:00 AM")]
    deriver = SlotDeriver()
    assert deriver.derive_slots(rules) == deriver.derive_slots(rules)


def test_increment_must_be_positive():
    with pytest.raises(ValueError):
        SlotDeriver(increment_minutes=0)
