import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.ai.types import LLMError
from app.prompts.interview import build_interviewer_prompt, conversation_messages, OPENING_TURN
from app.schemas.interview import ConversationMessage
from app.services.interview_service import filter_relevance_critiques, repair_feedback, upstream_error_message


class RelevanceFilterTests(unittest.TestCase):
    def test_generic_relevance_critiques_are_dropped_and_padded(self):
        feedback = {
            "improvements": [
                "Avoid pleasantries and get to the point.",
                "Try to stay focused on the question asked.",
                "Explain trade-offs between caching strategies.",
            ],
            "detailedFeedback": "Solid fundamentals. Some answers were off topic. Good grasp of indexing.",
        }
        cleaned = filter_relevance_critiques(feedback)
        self.assertEqual(
            cleaned["improvements"],
            [
                "Explain trade-offs between caching strategies.",
                "Consider providing more specific examples to illustrate technical concepts.",
            ],
        )
        self.assertEqual(cleaned["detailedFeedback"], "Solid fundamentals. Good grasp of indexing.")

    def test_specific_example_keeps_critiques(self):
        feedback = {
            "improvements": ["Answers were sometimes irrelevant to the question."],
            "detailedFeedback": "For instance, the answer about hobbies was irrelevant to the system design prompt.",
        }
        self.assertEqual(filter_relevance_critiques(feedback), feedback)

    def test_all_critiques_removed_restores_two(self):
        cleaned = filter_relevance_critiques({"improvements": ["Stay focused."], "detailedFeedback": ""})
        self.assertEqual(len(cleaned["improvements"]), 2)

    def test_non_list_improvements_untouched(self):
        feedback = {"improvements": "n/a", "detailedFeedback": "ok"}
        self.assertIs(filter_relevance_critiques(feedback), feedback)


class RepairTests(unittest.TestCase):
    def test_defaults_fill_missing_fields(self):
        repaired = repair_feedback({"overallScore": 7, "strengths": ["Clear communication"]})
        self.assertEqual(repaired["overallScore"], 7)
        self.assertEqual(repaired["technicalAccuracy"], 5)
        self.assertEqual(repaired["strengths"], ["Clear communication"])
        self.assertEqual(len(repaired["improvements"]), 2)
        self.assertTrue(repaired["detailedFeedback"])


class UpstreamMessageTests(unittest.TestCase):
    def test_status_mapping(self):
        self.assertIn("Invalid OpenAI API key", upstream_error_message(LLMError("x", status_code=401), "d"))
        self.assertIn("rate limit", upstream_error_message(LLMError("x", status_code=429), "d"))
        self.assertIn("unavailable", upstream_error_message(LLMError("x", status_code=503), "d"))
        self.assertEqual(upstream_error_message(LLMError("bad request", status_code=400), "d"), "bad request")


class InterviewPromptTests(unittest.TestCase):
    def test_fresher_prompt(self):
        prompt = build_interviewer_prompt("Data Engineer", "fresher", 3)
        self.assertIn("Data Engineer", prompt)
        self.assertIn("(no professional experience).", prompt)
        self.assertIn("Focus on fundamentals", prompt)

    def test_senior_prompt(self):
        prompt = build_interviewer_prompt("SRE", "senior", 9)
        self.assertIn("(9 years of experience).", prompt)
        self.assertIn("leadership evidence", prompt)

    def test_opening_turn_only_without_history(self):
        opening = conversation_messages(["system"], [])
        self.assertEqual(opening[-1].content, OPENING_TURN)
        history = [ConversationMessage(role="assistant", content="Q1"), ConversationMessage(role="user", content="A1")]
        continued = conversation_messages(["system"], history)
        self.assertEqual([m.content for m in continued], ["system", "Q1", "A1"])


if __name__ == "__main__":
    unittest.main()
