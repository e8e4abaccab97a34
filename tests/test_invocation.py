import sys
import unittest
from pathlib import Path

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from fakes import MARKET_ANSWER, TINY_PNG, FakeChatModel
from kisanmitra.agent.invocation import ModelInvoker
from kisanmitra.errors import InvocationError, OutputParseError, ToolExecutionError
from kisanmitra.observability.logging_utils import flow_log_scope
from kisanmitra.prompts.fragments import RenderedPrompt, media_part
from kisanmitra.schemas import AskAIOutput, ChatTurn, MarketPriceOutput


def _tool_call(name="market_data_lookup", args=None, call_id="call-1"):
    return AIMessage(
        content="",
        tool_calls=[
            {
                "name": name,
                "args": args or {"crop": "Wheat", "mandi": "Azadpur", "reference_date": "2026-10-19"},
                "id": call_id,
            }
        ],
    )


class JsonRecoveryTests(unittest.TestCase):
    def test_plain_json(self) -> None:
        self.assertEqual(ModelInvoker._load_json_payload('{"answer": "ok"}'), {"answer": "ok"})

    def test_code_fence(self) -> None:
        text = '```json\n{"answer": "ok"}\n```'
        self.assertEqual(ModelInvoker._load_json_payload(text), {"answer": "ok"})

    def test_surrounding_prose(self) -> None:
        text = 'Here you go: {"answer": "ok"} Hope this helps.'
        self.assertEqual(ModelInvoker._load_json_payload(text), {"answer": "ok"})

    def test_python_literal(self) -> None:
        self.assertEqual(ModelInvoker._load_json_payload("{'answer': 'ok'}"), {"answer": "ok"})

    def test_not_an_object(self) -> None:
        self.assertIsNone(ModelInvoker._load_json_payload("[1, 2]"))
        self.assertIsNone(ModelInvoker._load_json_payload("no json here"))
        self.assertIsNone(ModelInvoker._load_json_payload(""))


class ModelInvokerTests(unittest.IsolatedAsyncioTestCase):
    async def test_structured_answer_is_validated(self) -> None:
        llm = FakeChatModel(lambda _messages: {"answer": "Irrigate at dawn."})
        invoker = ModelInvoker(llm, max_tool_rounds=2)
        result = await invoker.invoke_structured(RenderedPrompt("When?"), AskAIOutput)
        self.assertEqual(result.answer, "Irrigate at dawn.")
        system, human = llm.calls[0]
        self.assertIsInstance(system, SystemMessage)
        self.assertIn('"answer"', system.content)
        self.assertEqual(human.content, "When?")

    async def test_history_precedes_prompt(self) -> None:
        llm = FakeChatModel(lambda _messages: {"answer": "Yes."})
        invoker = ModelInvoker(llm, max_tool_rounds=2)
        history = [ChatTurn(role="user", text="Hi"), ChatTurn(role="assistant", text="Hello")]
        await invoker.invoke_structured(RenderedPrompt("Q"), AskAIOutput, history=history)
        messages = llm.calls[0]
        self.assertEqual([type(m) for m in messages], [SystemMessage, HumanMessage, AIMessage, HumanMessage])
        self.assertEqual(messages[2].content, "Hello")

    async def test_media_sent_as_content_blocks(self) -> None:
        llm = FakeChatModel(lambda _messages: {"answer": "A leaf."})
        invoker = ModelInvoker(llm, max_tool_rounds=2)
        prompt = RenderedPrompt("Describe", media=(media_part(TINY_PNG, "Photo"),))
        await invoker.invoke_structured(prompt, AskAIOutput)
        content = llm.calls[0][-1].content
        self.assertIsInstance(content, list)
        self.assertEqual(content[-1]["type"], "image_url")

    async def test_schema_mismatch_raises_parse_error(self) -> None:
        llm = FakeChatModel(lambda _messages: {"reply": "wrong key"})
        invoker = ModelInvoker(llm, max_tool_rounds=2)
        with self.assertRaises(OutputParseError):
            await invoker.invoke_structured(RenderedPrompt("Q"), AskAIOutput)

    async def test_unparsable_answer_raises_parse_error(self) -> None:
        llm = FakeChatModel(lambda _messages: "I cannot help with that.")
        invoker = ModelInvoker(llm, max_tool_rounds=2)
        with flow_log_scope("ask_ai"), self.assertRaises(OutputParseError) as ctx:
            await invoker.invoke_structured(RenderedPrompt("Q"), AskAIOutput)
        self.assertEqual(ctx.exception.flow, "ask_ai")

    async def test_transport_failure_raises_invocation_error(self) -> None:
        llm = FakeChatModel(lambda _messages: ConnectionError("network down"))
        invoker = ModelInvoker(llm, max_tool_rounds=2)
        with self.assertRaises(InvocationError) as ctx:
            await invoker.invoke_structured(RenderedPrompt("Q"), AskAIOutput)
        self.assertNotIsInstance(ctx.exception, OutputParseError)

    async def test_tool_loop_feeds_results_back(self) -> None:
        def handler(messages):
            if not any(isinstance(m, ToolMessage) for m in messages):
                return _tool_call()
            return MARKET_ANSWER

        llm = FakeChatModel(handler)
        invoker = ModelInvoker(llm, max_tool_rounds=2)
        result = await invoker.invoke_structured(
            RenderedPrompt("Price?"), MarketPriceOutput, tools=("market_data_lookup",)
        )
        self.assertEqual(result.price, 2060.0)
        self.assertEqual(llm.bound_tools, [["market_data_lookup"]])
        self.assertEqual(len(llm.calls), 2)
        tool_message = llm.calls[1][-1]
        self.assertIsInstance(tool_message, ToolMessage)
        self.assertEqual(tool_message.tool_call_id, "call-1")
        self.assertIn('"priceHistory"', tool_message.content)

    async def test_tool_rounds_are_bounded(self) -> None:
        llm = FakeChatModel(lambda _messages: _tool_call())
        invoker = ModelInvoker(llm, max_tool_rounds=2)
        with self.assertRaises(InvocationError):
            await invoker.invoke_structured(
                RenderedPrompt("Price?"), MarketPriceOutput, tools=("market_data_lookup",)
            )
        self.assertEqual(len(llm.calls), 3)

    async def test_unbound_tool_is_rejected(self) -> None:
        llm = FakeChatModel(lambda _messages: _tool_call(name="delete_everything", args={"x": 1}))
        invoker = ModelInvoker(llm, max_tool_rounds=2)
        with self.assertRaises(ToolExecutionError):
            await invoker.invoke_structured(
                RenderedPrompt("Price?"), MarketPriceOutput, tools=("market_data_lookup",)
            )


if __name__ == "__main__":
    unittest.main()
