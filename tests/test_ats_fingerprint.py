import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.ats.fingerprint import (
    _rolling_hash,
    _to_base36,
    create_resume_content_hash,
    normalize_job_description,
    serialize_for_hashing,
)
from app.schemas.resume import ATSAnalysis, ResumeContent


def _content(**overrides):
    payload = {
        "contactInfo": {"name": "Ada Lovelace", "email": "ada@example.com"},
        "summary": "Experienced engineer",
        "experience": [
            {
                "company": "Analytical Engines",
                "position": "Engineer",
                "startDate": "2020-01",
                "endDate": "",
                "description": "Built things",
                "achievements": ["Cut costs by 20%"],
            }
        ],
        "education": [],
        "skills": ["Python", "SQL"],
    }
    payload.update(overrides)
    return ResumeContent.model_validate(payload)


class RollingHashTests(unittest.TestCase):
    def test_known_values(self):
        self.assertEqual(_rolling_hash(""), 0)
        self.assertEqual(_rolling_hash("a"), 97)
        self.assertEqual(_rolling_hash("ab"), 3105)

    def test_wraps_to_signed_32_bit(self):
        value = _rolling_hash("x" * 200)
        self.assertGreaterEqual(value, -(2**31))
        self.assertLess(value, 2**31)

    def test_lone_surrogate_hashes_as_its_code_unit(self):
        self.assertEqual(_rolling_hash("\ud800"), 0xD800)
        self.assertEqual(_rolling_hash("a\udfff"), 97 * 31 + 0xDFFF)

    def test_base36_rendering(self):
        self.assertEqual(_to_base36(0), "0")
        self.assertEqual(_to_base36(35), "z")
        self.assertEqual(_to_base36(36), "10")
        self.assertEqual(_to_base36(3105), "2e9")


class FingerprintTests(unittest.TestCase):
    def test_deterministic(self):
        content = _content()
        self.assertEqual(
            create_resume_content_hash(content, "Python developer"),
            create_resume_content_hash(content, "Python developer"),
        )

    def test_output_is_base36(self):
        fingerprint = create_resume_content_hash(_content(), "")
        self.assertTrue(fingerprint)
        self.assertTrue(set(fingerprint) <= set("0123456789abcdefghijklmnopqrstuvwxyz"))

    def test_job_description_is_normalized(self):
        content = _content()
        self.assertEqual(
            create_resume_content_hash(content, "  Senior Python Developer \n"),
            create_resume_content_hash(content, "senior python developer"),
        )
        self.assertEqual(normalize_job_description(None), "")

    def test_missing_job_description_matches_empty(self):
        content = _content()
        self.assertEqual(create_resume_content_hash(content), create_resume_content_hash(content, None))
        self.assertEqual(create_resume_content_hash(content), create_resume_content_hash(content, "   "))

    def test_content_changes_change_fingerprint(self):
        base = create_resume_content_hash(_content(), "jd")
        self.assertNotEqual(base, create_resume_content_hash(_content(summary="Seasoned engineer"), "jd"))
        self.assertNotEqual(base, create_resume_content_hash(_content(skills=["Python", "Go"]), "jd"))
        self.assertNotEqual(base, create_resume_content_hash(_content(), "different jd"))

    def test_analysis_payload_is_ignored(self):
        plain = _content()
        analysed = _content(ats_analysis={"score": 91, "feedback": "Great", "content_hash": "abc"})
        other = plain.model_copy(update={"ats_analysis": ATSAnalysis(score=12, feedback="Poor")})
        expected = create_resume_content_hash(plain, "jd")
        self.assertEqual(create_resume_content_hash(analysed, "jd"), expected)
        self.assertEqual(create_resume_content_hash(other, "jd"), expected)

    def test_serialization_uses_stored_camel_case_keys(self):
        serialized = serialize_for_hashing(_content(), "JD")
        self.assertIn('"contactInfo"', serialized)
        self.assertIn('"startDate"', serialized)
        self.assertIn('"jobDescription":"jd"', serialized)
        self.assertNotIn("ats_analysis", serialized)

    def test_non_ascii_content(self):
        content = _content(summary="Ingénieur expérimenté 🚀")
        self.assertEqual(create_resume_content_hash(content, ""), create_resume_content_hash(content, ""))
        self.assertIn("Ingénieur", serialize_for_hashing(content))

    def test_lone_surrogates_are_hashed(self):
        content = _content(summary="Engineer \udc00")
        with_jd = create_resume_content_hash(_content(), "Python \ud800 dev")
        self.assertTrue(with_jd)
        self.assertNotEqual(with_jd, create_resume_content_hash(_content(), "Python dev"))
        self.assertEqual(create_resume_content_hash(content, ""), create_resume_content_hash(content, ""))
        self.assertNotEqual(create_resume_content_hash(content, ""), create_resume_content_hash(_content(), ""))


if __name__ == "__main__":
    unittest.main()
