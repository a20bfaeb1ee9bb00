"""Tests for MessageResponseAgent."""

from unittest.mock import AsyncMock, Mock

import pytest

from chat_ai_bridge.agent import MessageResponseAgent
from chat_ai_bridge.errors import ConfigurationError, ProviderError
from chat_ai_bridge.models import AgentStatus, CompletionResult

from conftest import new_message_event


def call_names(calls):
    return [c[0] for c in calls]


def indicator_payloads(calls):
    return [c[1] for c in calls if c[0] == "send_event"]


class TestAgentFilters:
    """Events that must not produce any outbound calls."""

    @pytest.mark.asyncio
    async def test_ai_generated_message_ignored(self, agent, calls, mock_llm):
        await agent.handle_message(new_message_event(ai_generated=True))

        assert calls == []
        mock_llm.complete.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", None])
    async def test_empty_text_ignored(self, agent, calls, text):
        await agent.handle_message(new_message_event(text=text))

        assert calls == []

    @pytest.mark.asyncio
    async def test_event_without_message_ignored(self, agent, calls):
        from chat_ai_bridge.models import ChatEvent

        await agent.handle_message(ChatEvent(type="message.new", cid="messaging:general"))

        assert calls == []

    @pytest.mark.asyncio
    async def test_filtered_events_leave_last_interaction(self, agent):
        before = agent.get_last_interaction()

        await agent.handle_message(new_message_event(ai_generated=True))
        await agent.handle_message(new_message_event(text=""))

        assert agent.get_last_interaction() == before

    @pytest.mark.asyncio
    async def test_handler_before_init_is_noop(self, chat_client, channel, calls):
        llm_factory = Mock()
        a = MessageResponseAgent(chat_client, channel, llm_factory=llm_factory)

        await a.handle_message(new_message_event())

        assert calls == []
        llm_factory.assert_not_called()


class TestAgentReply:
    """Tests for the reply flow."""

    @pytest.mark.asyncio
    async def test_success_flow_order(self, agent, calls):
        await agent.handle_message(new_message_event("Write me a haiku"))

        assert call_names(calls) == [
            "send_message",
            "send_event",
            "complete",
            "partial_update_message",
            "send_event",
        ]

    @pytest.mark.asyncio
    async def test_placeholder_is_empty_and_ai_generated(self, agent, calls):
        await agent.handle_message(new_message_event())

        assert calls[0] == ("send_message", "", True)

    @pytest.mark.asyncio
    async def test_success_writes_exact_content(self, agent, calls, mock_llm):
        mock_llm.complete = AsyncMock(return_value=CompletionResult("Hello world"))

        await agent.handle_message(new_message_event())

        updates = [c for c in calls if c[0] == "partial_update_message"]
        assert updates == [("partial_update_message", "msg-1", {"text": "Hello world"})]

    @pytest.mark.asyncio
    async def test_success_indicators_thinking_then_clear(self, agent, calls):
        await agent.handle_message(new_message_event())

        assert indicator_payloads(calls) == [
            {
                "type": "ai_indicator.update",
                "ai_state": "AI_STATE_THINKING",
                "cid": "messaging:general",
                "message_id": "msg-1",
            },
            {
                "type": "ai_indicator.clear",
                "cid": "messaging:general",
                "message_id": "msg-1",
            },
        ]

    @pytest.mark.asyncio
    async def test_empty_completion_writes_empty_text(self, agent, calls, mock_llm):
        mock_llm.complete = AsyncMock(return_value=CompletionResult.empty())

        await agent.handle_message(new_message_event())

        assert ("partial_update_message", "msg-1", {"text": ""}) in calls
        assert indicator_payloads(calls)[-1]["type"] == "ai_indicator.clear"

    @pytest.mark.asyncio
    async def test_completion_request_shape(self, agent, mock_llm):
        await agent.handle_message(new_message_event("Fix my grammar"))

        kwargs = mock_llm.complete.call_args.kwargs
        assert kwargs["messages"] == [{"role": "user", "content": "Fix my grammar"}]
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 1500
        assert "November 3, 2025" in kwargs["system"]
        assert "General writing assistance." in kwargs["system"]

    @pytest.mark.asyncio
    async def test_writing_task_reaches_prompt(self, agent, mock_llm):
        await agent.handle_message(
            new_message_event(custom={"writingTask": "blog intro"})
        )

        assert "Writing Task: blog intro" in mock_llm.complete.call_args.kwargs["system"]

    @pytest.mark.asyncio
    async def test_last_interaction_updated(self, agent):
        before = agent.get_last_interaction()

        await agent.handle_message(new_message_event())

        assert agent.get_last_interaction() >= before


class TestAgentFailure:
    """Tests for completion failures."""

    @pytest.mark.asyncio
    async def test_provider_error_text_written(self, agent, calls, mock_llm):
        mock_llm.complete = AsyncMock(side_effect=ProviderError("rate limited"))

        await agent.handle_message(new_message_event())

        assert ("partial_update_message", "msg-1", {"text": "rate limited"}) in calls

    @pytest.mark.asyncio
    async def test_error_indicator_instead_of_clear(self, agent, calls, mock_llm):
        mock_llm.complete = AsyncMock(side_effect=RuntimeError("rate limited"))

        await agent.handle_message(new_message_event())

        payloads = indicator_payloads(calls)
        assert [p.get("ai_state") for p in payloads] == [
            "AI_STATE_THINKING",
            "AI_STATE_ERROR",
        ]
        assert all(p["type"] != "ai_indicator.clear" for p in payloads)

    @pytest.mark.asyncio
    async def test_error_without_message_uses_fallback(self, agent, calls, mock_llm):
        mock_llm.complete = AsyncMock(side_effect=RuntimeError())

        await agent.handle_message(new_message_event())

        assert (
            "partial_update_message",
            "msg-1",
            {"text": "Error generating response"},
        ) in calls

    @pytest.mark.asyncio
    async def test_failure_does_not_block_next_message(self, agent, calls, mock_llm):
        mock_llm.complete = AsyncMock(
            side_effect=[RuntimeError("boom"), CompletionResult("second")]
        )

        await agent.handle_message(new_message_event("first"))
        await agent.handle_message(new_message_event("second"))

        assert ("partial_update_message", "msg-2", {"text": "second"}) in calls

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, agent, channel, mock_llm):
        channel.fail_send_message = True

        with pytest.raises(RuntimeError, match="transport down"):
            await agent.handle_message(new_message_event())

        mock_llm.complete.assert_not_called()


class TestAgentLifecycle:
    """Tests for init/dispose."""

    @pytest.mark.asyncio
    async def test_init_registers_listener(self, agent, event_bus):
        assert agent.status is AgentStatus.ACTIVE
        assert event_bus.handler_count("message.new") == 1

    @pytest.mark.asyncio
    async def test_init_is_idempotent(self, agent, event_bus):
        await agent.init()

        assert event_bus.handler_count("message.new") == 1

    @pytest.mark.asyncio
    async def test_init_without_token_registers_nothing(
        self, chat_client, channel, event_bus, monkeypatch
    ):
        from chat_ai_bridge.llm import LLMProvider

        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        a = MessageResponseAgent(chat_client, channel, llm_factory=LLMProvider)

        with pytest.raises(ConfigurationError):
            await a.init()

        assert event_bus.handler_count("message.new") == 0
        assert a.status is AgentStatus.UNINITIALIZED

    @pytest.mark.asyncio
    async def test_event_bus_delivers_to_agent(self, agent, event_bus, calls):
        await event_bus.publish(new_message_event())

        assert "partial_update_message" in call_names(calls)

    @pytest.mark.asyncio
    async def test_dispose_removes_listener(self, agent, event_bus, chat_client, calls):
        await agent.dispose()
        calls.clear()

        await event_bus.publish(new_message_event())

        assert calls == []
        assert chat_client.disconnected is True
        assert event_bus.handler_count("message.new") == 0

    @pytest.mark.asyncio
    async def test_dispose_twice_is_safe(self, agent, calls):
        await agent.dispose()
        await agent.dispose()

        assert call_names(calls).count("disconnect") == 1

    @pytest.mark.asyncio
    async def test_init_after_dispose_raises(self, agent):
        await agent.dispose()

        with pytest.raises(RuntimeError, match="disposed"):
            await agent.init()

    def test_last_interaction_starts_at_construction(self, chat_client, channel):
        from chat_ai_bridge.agent.agent import now_ms

        before = now_ms()
        a = MessageResponseAgent(chat_client, channel)
        after = now_ms()

        assert before <= a.get_last_interaction() <= after
