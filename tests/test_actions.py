import json
import os
import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from fakes import DIAGNOSIS_ANSWER, TINY_PNG, TINY_WEBM, FakeChatModel
from kisanmitra import actions
from kisanmitra.agent.invocation import get_invoker
from kisanmitra.infra.config import get_config
from kisanmitra.schemas import ActionFailure, ActionSuccess, to_payload


class ActionBoundaryTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.llm = FakeChatModel(lambda _messages: DIAGNOSIS_ANSWER)
        get_config.cache_clear()
        get_invoker.cache_clear()
        self._llm_patch = patch(
            "kisanmitra.agent.invocation.get_chat_model", return_value=self.llm
        )
        self._llm_patch.start()

    def tearDown(self) -> None:
        self._llm_patch.stop()
        get_invoker.cache_clear()

    async def test_success_wraps_output(self) -> None:
        result = await actions.diagnose_crop_disease_action(
            {"photoDataUri": TINY_PNG, "language": "en"}
        )
        self.assertIsInstance(result, ActionSuccess)
        payload = to_payload(result)
        self.assertEqual(payload["success"], True)
        self.assertEqual(payload["data"]["cropName"], "Tomato")
        self.assertEqual(payload["data"]["severity"], "Medium")
        self.assertNotIn("error", payload)

    async def test_invalid_input_skips_model(self) -> None:
        result = await actions.get_market_price_action({"crop": "Wheat", "language": "en"})
        self.assertIsInstance(result, ActionFailure)
        self.assertEqual(result.error, "Mandi name is required.")
        self.assertEqual(self.llm.calls, [])
        self.assertEqual(to_payload(result), {"success": False, "error": "Mandi name is required."})

    async def test_flow_error_becomes_generic_message(self) -> None:
        self.llm.handler = lambda _messages: RuntimeError("secret upstream detail")
        with self.assertLogs("kisanmitra.actions", level="ERROR"):
            result = await actions.get_weather_forecast_action(
                {"location": "Pune", "language": "en"}
            )
        self.assertIsInstance(result, ActionFailure)
        self.assertEqual(
            result.error,
            "An unexpected error occurred while fetching the forecast. Please try again.",
        )
        self.assertNotIn("secret", result.error)

    async def test_missing_api_key_is_generic_failure(self) -> None:
        self._llm_patch.stop()
        backup = os.environ.pop("OPENAI_API_KEY", None)
        get_config.cache_clear()
        get_invoker.cache_clear()
        try:
            with patch.dict(os.environ, {"LLM_PROVIDER": "openai"}):
                with self.assertLogs("kisanmitra.actions", level="ERROR"):
                    result = await actions.ask_ai_action({"query": "Hello", "language": "en"})
        finally:
            if backup is not None:
                os.environ["OPENAI_API_KEY"] = backup
            get_config.cache_clear()
            self._llm_patch.start()
        self.assertIsInstance(result, ActionFailure)
        self.assertEqual(result.error, "An unexpected error occurred. Please try again.")

    async def test_webm_recording_is_transcribed(self) -> None:
        create = AsyncMock(return_value=SimpleNamespace(text=" gehu ka bhav kya hai "))
        client = SimpleNamespace(
            audio=SimpleNamespace(transcriptions=SimpleNamespace(create=create))
        )
        with patch("kisanmitra.agent.flows.simple.get_speech_client", return_value=client):
            result = await actions.speech_to_text_action({"audio": TINY_WEBM, "language": "hi"})
        self.assertIsInstance(result, ActionSuccess)
        self.assertEqual(result.data.text, "gehu ka bhav kya hai")
        filename, content, mime = create.await_args.kwargs["file"]
        self.assertEqual(filename, "recording.webm")
        self.assertTrue(content.startswith(b"\x1a\x45\xdf\xa3"))
        self.assertEqual(mime, "audio/webm")
        self.assertEqual(create.await_args.kwargs["language"], "hi")
        self.assertEqual(self.llm.calls, [])

    async def test_unsupported_audio_format_is_rejected(self) -> None:
        with patch("kisanmitra.agent.flows.simple.get_speech_client") as factory:
            result = await actions.speech_to_text_action(
                {"audio": "data:audio/aac;base64,AAAA", "language": "hi"}
            )
        self.assertEqual(to_payload(result), {"success": False, "error": "Invalid audio input."})
        factory.assert_not_called()

    async def test_events_carry_trace_and_action(self) -> None:
        with self.assertLogs("kisanmitra.events", level="INFO") as captured:
            await actions.diagnose_crop_disease_action({"photoDataUri": TINY_PNG, "language": "en"})
        events = [json.loads(record.getMessage()) for record in captured.records]
        self.assertEqual({event["action"] for event in events}, {"diagnose_crop_disease"})
        self.assertEqual(len({event["trace_id"] for event in events}), 1)
        self.assertNotEqual(events[0]["trace_id"], "unknown")
        by_name = {event["event"]: event for event in events}
        self.assertEqual(by_name["flow_start"]["flow"], "diagnose_crop_disease")
        self.assertNotIn("flow", by_name["action_success"])

    async def test_run_action_by_name(self) -> None:
        result = await actions.run_action("diagnose_crop_disease", {"language": "en"})
        self.assertEqual(result.error, "Image is required.")
        with self.assertRaises(KeyError):
            await actions.run_action("launch_rocket", {})

    def test_every_action_listed(self) -> None:
        names = [item["name"] for item in actions.list_actions()]
        self.assertEqual(len(names), 12)
        self.assertIn("get_farm_insights", names)
        self.assertIn("get_crop_recommendations", names)
        self.assertIn("text_to_speech", names)


if __name__ == "__main__":
    unittest.main()
