import unittest

from convo.errors import InvalidArgumentError
from convo.memory import BoundedConversationMemory, DEFAULT_MAX_MESSAGES
from convo.messages import Message


class TestBoundedConversationMemory(unittest.TestCase):
    def test_default_capacity(self):
        memory = BoundedConversationMemory()
        self.assertEqual(memory.max_messages, DEFAULT_MAX_MESSAGES)
        self.assertEqual(memory.max_messages, 10)
        self.assertEqual(memory.snapshot(), ())

    def test_keeps_last_messages_in_order(self):
        memory = BoundedConversationMemory(max_messages=4)
        sent = [Message.user(f"m{i}") for i in range(11)]
        for message in sent:
            memory.append(message)
        self.assertEqual(len(memory), 4)
        self.assertEqual(memory.snapshot(), tuple(sent[-4:]))

    def test_eviction_scenario(self):
        memory = BoundedConversationMemory(max_messages=2)
        ctx1, q1, a1 = Message.system("ctx1"), Message.user("q1"), Message.assistant("a1")
        memory.append(ctx1)
        memory.append(q1)
        self.assertEqual(memory.snapshot(), (ctx1, q1))
        memory.append(a1)
        self.assertEqual(memory.snapshot(), (q1, a1))

    def test_snapshot_is_detached(self):
        memory = BoundedConversationMemory(max_messages=3)
        memory.append(Message.user("hello"))
        snapshot = list(memory.snapshot())
        snapshot.append(Message.user("injected"))
        snapshot.clear()
        self.assertEqual(memory.snapshot(), (Message.user("hello"),))

    def test_clear_keeps_capacity(self):
        memory = BoundedConversationMemory(max_messages=2)
        for text in ("a", "b", "c"):
            memory.append(Message.user(text))
        memory.clear()
        self.assertEqual(memory.snapshot(), ())
        self.assertEqual(memory.max_messages, 2)

        for text in ("x", "y", "z"):
            memory.append(Message.user(text))
        self.assertEqual([m.text for m in memory], ["y", "z"])

    def test_capacity_is_read_only(self):
        memory = BoundedConversationMemory(max_messages=3)
        with self.assertRaises(AttributeError):
            memory.max_messages = 5

    def test_rejects_bad_capacity(self):
        for bad in (0, -1, 2.5, True, "10"):
            with self.assertRaises(InvalidArgumentError):
                BoundedConversationMemory(max_messages=bad)

    def test_render(self):
        memory = BoundedConversationMemory()
        self.assertEqual(memory.render(), "(no messages)")
        memory.append(Message.system("be brief"))
        memory.append(Message.user("hi"))
        self.assertEqual(str(memory), "1. system: be brief\n2. user: hi")


if __name__ == '__main__':
    unittest.main()
