"""Tests for the append-only conversation state."""

import pytest

from stockresearch.exceptions import StockResearchError
from stockresearch.state import ConversationState, Message, StateCommittedError, research_tool_call


def test_update_appends_in_order():
    state = ConversationState()
    first = state.update(Message(role="user", content="research NVDA"))
    state.update(Message(role="assistant", content="report"))
    assert state.messages[0] is first
    assert [m.content for m in state.messages] == ["research NVDA", "report"]


def test_commit_returns_snapshot_and_blocks_updates():
    state = ConversationState()
    state.update(Message(role="user", content="hi"))
    snapshot = state.commit()

    assert state.committed is True
    assert len(snapshot) == 1
    with pytest.raises(StateCommittedError):
        state.update(Message(role="assistant", content="late"))
    assert len(state.messages) == 1


def test_committed_error_is_stock_research_error():
    assert issubclass(StateCommittedError, StockResearchError)


def test_research_tool_call_pair():
    call, result = research_tool_call("research NVDA")
    assert call.role == "assistant"
    assert result.role == "tool"
    assert call.content[0]["toolName"] == result.content[0]["toolName"] == "showResearch"
    assert call.content[0]["toolCallId"] == result.content[0]["toolCallId"]
    assert result.content[0]["result"] == {"symbol": "research NVDA"}


def test_message_ids_unique():
    assert Message(role="user", content="a").id != Message(role="user", content="a").id
