import unittest
from unittest import mock

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from convo.errors import ConfigurationError, ModelInvocationError
from convo.llm_client import ChatModelClient
from convo.messages import Message
from convo.session import ConversationSession


class TestChatModelClient(unittest.TestCase):
    def test_requires_key_and_model(self):
        with self.assertRaises(ConfigurationError):
            ChatModelClient("", "gpt-4o-mini")
        with self.assertRaises(ConfigurationError):
            ChatModelClient("   ", "gpt-4o-mini")
        with self.assertRaises(ConfigurationError):
            ChatModelClient("sk-test", "")

    @mock.patch("convo.llm_client.ChatOpenAI")
    def test_construction_is_lazy(self, chat_openai):
        ChatModelClient("sk-test", "gpt-4o-mini")
        chat_openai.assert_not_called()

    @mock.patch("convo.llm_client.ChatOpenAI")
    def test_generate_converts_messages(self, chat_openai):
        chat_openai.return_value.invoke.return_value = AIMessage(content="Hi there")
        client = ChatModelClient("sk-test", "gpt-4o-mini", base_url="https://openrouter.ai/api/v1", temperature=0.3)

        reply = client.generate([Message.system("be brief"), Message.user("hello")])

        self.assertEqual(reply, "Hi there")
        chat_openai.assert_called_once_with(
            api_key="sk-test",
            model="gpt-4o-mini",
            temperature=0.3,
            base_url="https://openrouter.ai/api/v1",
        )
        sent = chat_openai.return_value.invoke.call_args[0][0]
        self.assertEqual(sent, [SystemMessage(content="be brief"), HumanMessage(content="hello")])

    @mock.patch("convo.llm_client.ChatOpenAI")
    def test_chat_model_is_reused(self, chat_openai):
        chat_openai.return_value.invoke.return_value = AIMessage(content="ok")
        client = ChatModelClient("sk-test", "gpt-4o-mini")
        client.generate([Message.user("one")])
        client.generate([Message.user("two")])
        self.assertEqual(chat_openai.call_count, 1)

    @mock.patch("convo.llm_client.ChatOpenAI")
    def test_api_errors_become_model_invocation_errors(self, chat_openai):
        failure = RuntimeError("429 quota exceeded")
        chat_openai.return_value.invoke.side_effect = failure
        client = ChatModelClient("sk-test", "gpt-4o-mini")

        with self.assertRaises(ModelInvocationError) as ctx:
            client.generate([Message.user("hello")])
        self.assertIs(ctx.exception.__cause__, failure)

    @mock.patch("convo.llm_client.ChatOpenAI")
    def test_invalid_response_shape(self, chat_openai):
        chat_openai.return_value.invoke.return_value = mock.Mock(content=[{"type": "image"}])
        client = ChatModelClient("sk-test", "gpt-4o-mini")

        with self.assertRaises(ModelInvocationError):
            client.generate([Message.user("draw")])

    @mock.patch("convo.llm_client.ChatOpenAI")
    def test_failed_call_is_logged_once(self, chat_openai):
        chat_openai.return_value.invoke.side_effect = RuntimeError("503 unavailable")
        session = ConversationSession("sk-test", "gpt-4o-mini")

        with self.assertLogs(level="ERROR") as logs:
            with self.assertRaises(ModelInvocationError):
                session.ask_question("ctx", "hello")

        self.assertEqual(len(logs.records), 1)
        self.assertEqual(logs.records[0].name, "app.prompt")


if __name__ == '__main__':
    unittest.main()
