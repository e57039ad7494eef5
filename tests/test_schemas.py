"""
Tests for inbound frame parsing.
"""
import json

import pytest

from bingo_relay.schemas import (
    AdminJoin,
    AssignCartones,
    MessageParseError,
    NewNumber,
    PlayerJoin,
    Pong,
    Report,
    RequestPlayerList,
    ResetNumbers,
    parse_message,
)


def frame(**fields) -> str:
    return json.dumps(fields)


class TestRecognisedMessages:
    """Each known type maps to its own model."""

    def test_player_join(self):
        msg = parse_message(frame(type="player-join", playerKey="player-ana"))
        assert isinstance(msg, PlayerJoin)
        assert msg.player_key == "player-ana"

    def test_admin_join(self):
        assert isinstance(parse_message(frame(type="admin-join")), AdminJoin)

    def test_assign_cartones(self):
        cards = [[[1, 2, 3]], [[4, 5, 6]]]
        msg = parse_message(frame(type="assign-cartones", playerKey="ana", cartones=cards))
        assert isinstance(msg, AssignCartones)
        assert msg.cartones == cards

    def test_assign_empty_cartones_is_accepted(self):
        msg = parse_message(frame(type="assign-cartones", playerKey="ana", cartones=[]))
        assert msg.cartones == []

    def test_new_number(self):
        msg = parse_message(frame(type="new-number", number=7))
        assert isinstance(msg, NewNumber)
        assert msg.number == 7

    def test_simple_types(self):
        assert isinstance(parse_message(frame(type="reset-numbers")), ResetNumbers)
        assert isinstance(parse_message(frame(type="request-player-list")), RequestPlayerList)
        assert isinstance(parse_message(frame(type="pong")), Pong)

    def test_report_payload_is_opaque(self):
        payload = {"playerKey": "ana", "kind": "bingo", "carton": 2}
        msg = parse_message(frame(type="report", report=payload))
        assert isinstance(msg, Report)
        assert msg.report == payload

    def test_bytes_frame(self):
        assert isinstance(parse_message(b'{"type": "admin-join"}'), AdminJoin)

    def test_extra_fields_ignored(self):
        msg = parse_message(frame(type="new-number", number=3, by="admin"))
        assert msg.number == 3


class TestRejectedFrames:
    """Malformed frames raise MessageParseError."""

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "",
            "[1, 2]",
            "42",
            frame(kind="player-join"),
            frame(type="launch-rockets"),
        ],
    )
    def test_unparseable_or_unknown(self, raw):
        with pytest.raises(MessageParseError):
            parse_message(raw)

    @pytest.mark.parametrize(
        "fields",
        [
            {"type": "player-join"},
            {"type": "player-join", "playerKey": ""},
            {"type": "player-join", "playerKey": 12},
            {"type": "assign-cartones", "playerKey": "ana"},
            {"type": "assign-cartones", "cartones": []},
            {"type": "new-number"},
            {"type": "new-number", "number": "7"},
            {"type": "new-number", "number": 7.5},
            {"type": "report"},
            {"type": "report", "report": None},
            {"type": "report", "report": ""},
        ],
    )
    def test_missing_or_ill_typed_fields(self, fields):
        with pytest.raises(MessageParseError):
            parse_message(json.dumps(fields))
