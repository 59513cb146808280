"""Tests for the Groq text generator wiring."""

from unittest.mock import MagicMock, patch

from langchain_core.messages import HumanMessage

from app.agent.diagnostic_agent import DiagnosticAgent
from app.agent.llm import GroqTextGenerator
from app.config import Settings


class TestGroqTextGenerator:
    """Test ChatGroq construction and invocation."""

    @patch("app.agent.llm.ChatGroq")
    def test_client_built_from_settings(self, mock_chat_class):
        GroqTextGenerator(Settings(groq_api_key="secret"))

        mock_chat_class.assert_called_once_with(
            api_key="secret",
            model="llama-3.1-8b-instant",
            temperature=0.2,
        )

    @patch("app.agent.llm.ChatGroq")
    def test_single_human_message(self, mock_chat_class):
        mock_llm = mock_chat_class.return_value
        mock_llm.invoke.return_value = MagicMock(content='{"ok": 1}')

        text = GroqTextGenerator(Settings(groq_api_key="secret")).generate("PROMPT")

        assert text == '{"ok": 1}'
        (messages,), _ = mock_llm.invoke.call_args
        assert len(messages) == 1
        assert isinstance(messages[0], HumanMessage)
        assert messages[0].content == "PROMPT"

    @patch("app.agent.llm.ChatGroq")
    def test_non_string_content_stringified(self, mock_chat_class):
        mock_chat_class.return_value.invoke.return_value = MagicMock(content=[{"type": "text"}])

        text = GroqTextGenerator(Settings(groq_api_key="secret")).generate("PROMPT")

        assert text == str([{"type": "text"}])


class TestAgentGenerator:
    """Test which generator the agent ends up with."""

    @patch("app.agent.llm.ChatGroq")
    def test_groq_generator_built_when_key_present(self, mock_chat_class):
        agent = DiagnosticAgent(Settings(groq_api_key="secret"))

        assert isinstance(agent.generator, GroqTextGenerator)
        mock_chat_class.assert_called_once()

    @patch("app.agent.llm.ChatGroq")
    def test_no_client_without_key(self, mock_chat_class):
        agent = DiagnosticAgent(Settings(groq_api_key=None))

        assert agent.generator is None
        mock_chat_class.assert_not_called()
