#!/usr/bin/env python3
"""Tests for resolving split tags to Splitwise groups."""

import logging

import pytest

from monzosplitwise.reconcile.groups import (
    GroupNotFoundError,
    MalformedTagError,
    normalize_group_name,
    parse_group_name,
    resolve_group,
)
from tests.fixtures.synthetic_data import CURRENT_USER_ID, make_group


@pytest.mark.reconcile
class TestParseGroupName:
    def test_names(self):
        assert parse_group_name("#splitwise-Trip") == "Trip"
        assert parse_group_name("#splitwise-flat-mates") == "flat-mates"
        assert parse_group_name("#splitwise") == ""
        assert parse_group_name("#splitwise-") == ""

    @pytest.mark.parametrize("tag", ["x#splitwise", "#splitwiseTrip", "lunch#splitwise-trip"])
    def test_malformed(self, tag):
        with pytest.raises(MalformedTagError):
            parse_group_name(tag)

    def test_normalize(self):
        assert normalize_group_name(" Flat  Mates ") == "flatmates"
        assert normalize_group_name("FLATMATES") == "flatmates"


@pytest.mark.reconcile
class TestResolveGroup:
    @pytest.mark.parametrize("tag", ["#splitwise", "#splitwise-"])
    def test_ungrouped(self, tag, flatmates_group):
        resolved = resolve_group(tag, [flatmates_group], CURRENT_USER_ID)

        assert resolved.group_id == 0
        assert resolved.participant_ids == (CURRENT_USER_ID,)
        assert resolved.payer_id == CURRENT_USER_ID

    def test_case_and_space_insensitive(self, flatmates_group, trip_group):
        resolved = resolve_group("#splitwise-FlatMates", [trip_group, flatmates_group], CURRENT_USER_ID)

        assert resolved.group_id == 10
        assert resolved.name == "Flat Mates"
        assert resolved.participant_ids == (1001, 1002, 1003)
        assert resolved.payer_id == CURRENT_USER_ID

    def test_not_found(self, flatmates_group):
        with pytest.raises(GroupNotFoundError) as exc_info:
            resolve_group("#splitwise-holiday", [flatmates_group], CURRENT_USER_ID)
        assert exc_info.value.tag == "#splitwise-holiday"

    def test_malformed_is_not_found(self, flatmates_group):
        with pytest.raises(GroupNotFoundError):
            resolve_group("#splitwiseFlatMates", [flatmates_group], CURRENT_USER_ID)

    def test_duplicate_names_first_wins(self, caplog):
        groups = [make_group(30, "Trip", [1001, 1002]), make_group(31, "trip", [1001, 1003])]

        with caplog.at_level(logging.WARNING, logger="monzosplitwise.reconcile.groups"):
            resolved = resolve_group("#splitwise-trip", groups, CURRENT_USER_ID)

        assert resolved.group_id == 30
        assert "matches 2 groups" in caplog.text


@pytest.mark.reconcile
def test_malformed_tag_error_is_a_group_not_found_error():
    error = MalformedTagError("#splitwiseTrip")

    assert isinstance(error, GroupNotFoundError)
    assert GroupNotFoundError.__bases__ == (Exception,)
    assert error.tag == "#splitwiseTrip"
    assert "Unrecognized split tag" in str(error)
