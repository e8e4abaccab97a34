import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from fakes import TINY_PNG, TINY_WAV, TINY_WEBM
from kisanmitra.prompts.assistant import HISTORY_NOTE, render_ask_ai
from kisanmitra.prompts.carbon_credits import (
    AGROFORESTRY_METHOD,
    RICE_METHOD,
    render_carbon_credits,
)
from kisanmitra.prompts.crop_recommendations import render_crop_recommendations
from kisanmitra.prompts.diagnosis import render_diagnosis
from kisanmitra.prompts.farm_insights import UNAVAILABLE, render_farm_insights
from kisanmitra.prompts.fragments import field_line, join_lines, numbered
from kisanmitra.prompts.market import MARKET_TOOL_NAME, render_market_price
from kisanmitra.prompts.speech import render_transcription, transcription_language
from kisanmitra.prompts.yield_prediction import PHOTO_NOTE, render_yield_prediction
from kisanmitra.schemas import (
    AskAIInput,
    CarbonCreditsInput,
    CropRecommendationsInput,
    DiagnoseCropDiseaseInput,
    FarmInsightsInput,
    MarketPriceInput,
    SpeechToTextInput,
    YieldPredictionInput,
)


YIELD_BASE = {
    "crop": "Wheat",
    "hectares": 2.5,
    "soilType": "Loamy",
    "rainfall": 650,
    "region": "Punjab",
    "plantingDate": "2026-11-05",
    "language": "Punjabi",
}


class FragmentTests(unittest.TestCase):
    def test_field_line_drops_absent_values(self) -> None:
        self.assertIsNone(field_line("Crop", None))
        self.assertIsNone(field_line("Crop", "  "))
        self.assertEqual(field_line("Area", 2.0, suffix=" ha"), "* Area: 2 ha")

    def test_join_lines_skips_empty_parts(self) -> None:
        self.assertEqual(join_lines("a", None, ("b", None, "c"), ""), "a\nb\nc")

    def test_numbered_renumbers_after_gaps(self) -> None:
        self.assertEqual(numbered(["one", None, "two"]), "1. one\n2. two")


class RendererTests(unittest.TestCase):
    def test_render_is_deterministic(self) -> None:
        payload = MarketPriceInput.model_validate(
            {"crop": "Onion", "mandi": "Lasalgaon", "language": "Marathi"}
        )
        first = render_market_price(payload)
        second = render_market_price(payload)
        self.assertEqual(first, second)
        self.assertIn(MARKET_TOOL_NAME, first.text)
        self.assertIn("* Crop: Onion", first.text)
        self.assertIn("* Mandi: Lasalgaon", first.text)
        self.assertTrue(
            first.text.endswith("Respond in the specified language: Marathi.")
        )

    def test_diagnosis_reported_crop_is_conditional(self) -> None:
        without = render_diagnosis(
            DiagnoseCropDiseaseInput.model_validate({"photoDataUri": TINY_PNG, "language": "en"})
        )
        self.assertNotIn("Reported crop", without.text)
        self.assertNotIn("None", without.text)

        with_crop = render_diagnosis(
            DiagnoseCropDiseaseInput.model_validate(
                {"photoDataUri": TINY_PNG, "cropName": "Tomato", "language": "en"}
            )
        )
        self.assertIn("* Reported crop: Tomato", with_crop.text)

    def test_diagnosis_attaches_photo(self) -> None:
        prompt = render_diagnosis(
            DiagnoseCropDiseaseInput.model_validate({"photoDataUri": TINY_PNG, "language": "en"})
        )
        self.assertEqual(len(prompt.media), 1)
        blocks = prompt.content_blocks()
        self.assertEqual(blocks[0], {"type": "text", "text": prompt.text})
        self.assertEqual(blocks[-1], {"type": "image_url", "image_url": {"url": TINY_PNG}})

    def test_yield_photo_note_only_with_photo(self) -> None:
        plain = render_yield_prediction(YieldPredictionInput.model_validate(YIELD_BASE))
        self.assertNotIn(PHOTO_NOTE, plain.text)
        self.assertEqual(plain.media, ())
        self.assertIn("* Area: 2.5 hectares", plain.text)
        self.assertIn("* Planting date: 2026-11-05", plain.text)

        with_photo = render_yield_prediction(
            YieldPredictionInput.model_validate({**YIELD_BASE, "photoDataUri": TINY_PNG})
        )
        self.assertIn(PHOTO_NOTE, with_photo.text)
        self.assertEqual(len(with_photo.media), 1)

    def test_carbon_method_follows_project_type(self) -> None:
        agro = render_carbon_credits(
            CarbonCreditsInput.model_validate(
                {
                    "projectType": "agroforestry",
                    "hectares": 1,
                    "region": "Kerala",
                    "treeCount": 120,
                    "plantingYear": 2021,
                    "language": "ml",
                }
            )
        )
        self.assertIn(AGROFORESTRY_METHOD, agro.text)
        self.assertIn("* Number of trees: 120", agro.text)
        self.assertNotIn("Water management", agro.text)

        rice = render_carbon_credits(
            CarbonCreditsInput.model_validate(
                {
                    "projectType": "rice_cultivation",
                    "hectares": 2,
                    "region": "Tamil Nadu",
                    "waterManagement": "intermittent_awd",
                    "strawManagement": "incorporated_retained",
                    "language": "ta",
                }
            )
        )
        self.assertIn(RICE_METHOD, rice.text)
        self.assertIn("* Water management: intermittent_awd", rice.text)
        self.assertNotIn("Number of trees", rice.text)

    def test_ask_ai_history_note(self) -> None:
        plain = render_ask_ai(AskAIInput.model_validate({"query": "Hi", "language": "en"}))
        self.assertNotIn(HISTORY_NOTE, plain.text)
        followup = render_ask_ai(
            AskAIInput.model_validate(
                {
                    "query": "And for wheat?",
                    "history": [{"role": "user", "text": "Best fertilizer for rice?"}],
                    "language": "en",
                }
            )
        )
        self.assertIn(HISTORY_NOTE, followup.text)

    def test_transcription_carries_recording_as_upload(self) -> None:
        prompt = render_transcription(
            SpeechToTextInput.model_validate({"audio": TINY_WEBM, "language": "Hindi"})
        )
        self.assertIn("Hindi", prompt.text)
        filename, content, mime = prompt.media[0].as_upload()
        self.assertEqual(filename, "recording.webm")
        self.assertEqual(mime, "audio/webm")
        self.assertTrue(content.startswith(b"\x1a\x45\xdf\xa3"))
        with self.assertRaises(ValueError):
            prompt.content_blocks()

    def test_transcription_language_only_passes_iso_codes(self) -> None:
        coded = SpeechToTextInput.model_validate({"audio": TINY_WAV, "language": "HI"})
        named = SpeechToTextInput.model_validate({"audio": TINY_WAV, "language": "Hindi"})
        self.assertEqual(transcription_language(coded), "hi")
        self.assertIsNone(transcription_language(named))

    def test_farm_insights_marks_missing_sources(self) -> None:
        payload = FarmInsightsInput.model_validate(
            {"crop": "Wheat", "region": "Punjab", "language": "en"}
        )
        prompt = render_farm_insights(
            payload, {"weather": {"summary": "Dry week"}, "disease": UNAVAILABLE}
        )
        self.assertIn("Disease Risk Forecast:\nnot available", prompt.text)
        self.assertIn("Market Price:\nnot available", prompt.text)
        self.assertIn('"summary": "Dry week"', prompt.text)
        self.assertNotIn("Mandi", prompt.text)

    def test_crop_recommendations_optional_soil_report(self) -> None:
        payload = CropRecommendationsInput.model_validate(
            {"currentCrop": "Rice", "region": "Bihar", "language": "en"}
        )
        prompt = render_crop_recommendations(payload, [{"cropName": "Maize"}])
        self.assertNotIn("Soil report:", prompt.text)
        self.assertIn('"cropName": "Maize"', prompt.text)
        self.assertIn("exactly 3", prompt.text)


if __name__ == "__main__":
    unittest.main()
