"""
tests/test_router.py — Tests for the DiceRouter request handlers (router.py).

The router is exercised directly, without any MCP transport, to verify the
request/response semantics of all six request kinds.
"""

import json
import locale
import os
import sys

import pytest

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, REPO_ROOT)

from dice_roll_mcp.dice import DiceRoller
from dice_roll_mcp.errors import (
    DiceServerError,
    RollNotFoundError,
    UnknownPromptError,
    UnknownToolError,
)
from dice_roll_mcp.roll_log import RollLog
from dice_roll_mcp.router import DiceRouter, format_timestamp, parse_roll_uri, roll_uri


class FakeClock:
    def __init__(self, start=1_700_000_000_000):
        self.now = start

    def __call__(self):
        self.now += 1
        return self.now


@pytest.fixture()
def router():
    return DiceRouter(roll_log=RollLog(clock=FakeClock()), roller=DiceRoller(seed=7))


def roll_n(router, n, sides=6):
    return [router.call_tool("roll_dice", {"sides": sides}) for _ in range(n)]


def result_from_text(content):
    return int(content[0].text.rsplit(" ", 1)[-1])


# ---------------------------------------------------------------------------
# URI helpers
# ---------------------------------------------------------------------------

class TestRollUri:
    def test_roll_uri_format(self):
        assert roll_uri(0) == "dice:///0"
        assert roll_uri(12) == "dice:///12"

    @pytest.mark.parametrize("uri, expected", [
        ("dice:///0", 0),
        ("dice:///42", 42),
    ])
    def test_parse_valid(self, uri, expected):
        assert parse_roll_uri(uri) == expected

    @pytest.mark.parametrize("uri", [
        "dice:///-1",
        "dice:///abc",
        "dice:///",
        "dice:///1.5",
        "dice:///1/2",
        "dice:///\u0661",
        "dice:///0\n",
        "file:///0",
    ])
    def test_parse_invalid(self, uri):
        assert parse_roll_uri(uri) is None


# ---------------------------------------------------------------------------
# call_tool / roll_dice
# ---------------------------------------------------------------------------

class TestCallTool:
    def test_roll_returns_text_confirmation(self, router):
        content = router.call_tool("roll_dice", {"sides": 6})
        assert len(content) == 1
        assert content[0].type == "text"
        assert content[0].text.startswith("Rolled the die. Result: ")

    def test_roll_appends_one_record(self, router):
        router.call_tool("roll_dice", {})
        assert len(router.roll_log) == 1

    def test_text_result_matches_recorded_result(self, router):
        content = router.call_tool("roll_dice", {"sides": 20})
        assert result_from_text(content) == router.roll_log.get(0).result

    def test_one_sided_die(self, router):
        for _ in range(10):
            router.call_tool("roll_dice", {"sides": 1})
        assert [r.result for r in router.roll_log] == [1] * 10

    def test_results_in_range(self, router):
        roll_n(router, 500, sides=3)
        assert {r.result for r in router.roll_log} <= {1, 2, 3}

    @pytest.mark.parametrize("arguments", [
        None,
        {},
        {"sides": None},
        {"sides": 0},
        {"sides": "not a number"},
        {"sides": float("nan")},
    ])
    def test_invalid_sides_behaves_like_six(self, arguments):
        coerced = DiceRouter(roller=DiceRoller(seed=3))
        six = DiceRouter(roller=DiceRoller(seed=3))
        for _ in range(50):
            coerced.call_tool("roll_dice", arguments)
            six.call_tool("roll_dice", {"sides": 6})
        assert [r.result for r in coerced.roll_log] == [r.result for r in six.roll_log]

    def test_k_rolls_k_entries_in_order(self, router):
        texts = roll_n(router, 8, sides=100)
        assert len(router.roll_log) == 8
        assert [result_from_text(t) for t in texts] == [r.result for r in router.roll_log]
        stamps = [r.timestamp for r in router.roll_log]
        assert stamps == sorted(stamps)

    @pytest.mark.parametrize("name", ["roll_die", "ROLL_DICE", "", "dice_history"])
    def test_unknown_tool(self, router, name):
        with pytest.raises(UnknownToolError) as exc_info:
            router.call_tool(name, {})
        assert exc_info.value.name == name
        assert len(router.roll_log) == 0

    def test_unknown_tool_is_a_dice_server_error(self, router):
        with pytest.raises(DiceServerError):
            router.call_tool("nope")


# ---------------------------------------------------------------------------
# list_tools
# ---------------------------------------------------------------------------

class TestListTools:
    def test_single_roll_dice_tool(self, router):
        tools = router.list_tools()
        assert [t.name for t in tools] == ["roll_dice"]

    def test_sides_schema(self, router):
        schema = router.list_tools()[0].inputSchema
        assert schema["type"] == "object"
        assert schema["properties"]["sides"]["type"] == "number"
        assert schema["properties"]["sides"]["default"] == 6
        assert "required" not in schema


# ---------------------------------------------------------------------------
# list_resources / read_resource
# ---------------------------------------------------------------------------

class TestListResources:
    def test_empty_log_lists_nothing(self, router):
        assert router.list_resources() == []

    def test_one_descriptor_per_roll_in_order(self, router):
        roll_n(router, 3)
        resources = router.list_resources()
        assert [str(r.uri) for r in resources] == ["dice:///0", "dice:///1", "dice:///2"]
        assert [r.name for r in resources] == ["Dice roll 1", "Dice roll 2", "Dice roll 3"]
        assert all(r.mimeType == "application/json" for r in resources)

    def test_description_has_timestamp_and_result(self, router):
        router.call_tool("roll_dice", {"sides": 1})
        record = router.roll_log.get(0)
        description = router.list_resources()[0].description
        assert description == f"Timestamp: {format_timestamp(record.timestamp)}, Result: 1"

    def test_description_follows_active_time_locale(self, router):
        router.call_tool("roll_dice", {"sides": 1})
        previous = locale.setlocale(locale.LC_TIME)
        try:
            locale.setlocale(locale.LC_TIME, "C")
            in_c = router.list_resources()[0].description
            try:
                locale.setlocale(locale.LC_TIME, "de_DE.UTF-8")
            except locale.Error:
                pytest.skip("de_DE.UTF-8 locale not installed")
            in_german = router.list_resources()[0].description
        finally:
            locale.setlocale(locale.LC_TIME, previous)
        assert in_german != in_c
        assert in_german.endswith(", Result: 1")

    def test_listing_has_no_side_effects(self, router):
        roll_n(router, 2)
        router.list_resources()
        router.list_resources()
        assert len(router.roll_log) == 2


class TestReadResource:
    def test_read_matches_roll(self, router):
        roll_n(router, 4, sides=20)
        for index, record in enumerate(router.roll_log):
            contents = router.read_resource(f"dice:///{index}")
            body = json.loads(contents.text)
            assert body == {"timestamp": record.timestamp, "result": record.result}
            assert str(contents.uri) == f"dice:///{index}"
            assert contents.mimeType == "application/json"

    def test_read_after_one_sided_roll(self, router):
        router.call_tool("roll_dice", {"sides": 1})
        body = json.loads(router.read_resource("dice:///0").text)
        assert body["result"] == 1
        assert isinstance(body["timestamp"], int)

    @pytest.mark.parametrize("uri, index", [
        ("dice:///1", "1"),
        ("dice:///99", "99"),
        ("dice:///-1", "-1"),
        ("dice:///abc", "abc"),
    ])
    def test_missing_roll(self, router, uri, index):
        router.call_tool("roll_dice", {})
        with pytest.raises(RollNotFoundError) as exc_info:
            router.read_resource(uri)
        assert exc_info.value.index == index
        assert index in str(exc_info.value)

    def test_read_on_empty_log(self, router):
        with pytest.raises(RollNotFoundError):
            router.read_resource("dice:///0")

    def test_not_found_is_a_lookup_error(self, router):
        with pytest.raises(LookupError):
            router.read_resource("dice:///0")


# ---------------------------------------------------------------------------
# list_prompts / get_prompt
# ---------------------------------------------------------------------------

class TestPrompts:
    def test_single_dice_history_prompt(self, router):
        prompts = router.list_prompts()
        assert [p.name for p in prompts] == ["dice_history"]
        assert prompts[0].description

    def test_empty_log_two_messages(self, router):
        result = router.get_prompt("dice_history")
        assert len(result.messages) == 2
        assert [m.content.type for m in result.messages] == ["text", "text"]
        assert all(m.role == "user" for m in result.messages)

    def test_k_entries_k_plus_two_messages(self, router):
        roll_n(router, 5)
        messages = router.get_prompt("dice_history").messages
        assert len(messages) == 7
        assert messages[0].content.type == "text"
        assert messages[-1].content.type == "text"
        assert "Summarize" in messages[0].content.text
        assert "concise summary" in messages[-1].content.text

    def test_embedded_resources_in_log_order(self, router):
        roll_n(router, 3, sides=100)
        embedded = router.get_prompt("dice_history").messages[1:-1]
        for index, message in enumerate(embedded):
            assert message.role == "user"
            assert message.content.type == "resource"
            resource = message.content.resource
            expected = router.read_resource(f"dice:///{index}")
            assert str(resource.uri) == f"dice:///{index}"
            assert resource.mimeType == "application/json"
            assert resource.text == expected.text

    @pytest.mark.parametrize("name", ["history", "roll_dice", "DICE_HISTORY", ""])
    def test_unknown_prompt(self, router, name):
        with pytest.raises(UnknownPromptError) as exc_info:
            router.get_prompt(name)
        assert exc_info.value.name == name
