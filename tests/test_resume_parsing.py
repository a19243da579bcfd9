import unittest
import sys
from io import BytesIO
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from docx import Document

from app.parsing.extract import extract_resume_text, file_extension
from app.services.errors import ServiceError
from app.services.resume_ai_service import structured_resume, validate_experience_entries


class ExtractResumeTextTests(unittest.TestCase):
    def test_docx_skips_blank_paragraphs(self):
        document = Document()
        for text in ("Ada Lovelace", "   ", "Engineer"):
            document.add_paragraph(text)
        buffer = BytesIO()
        document.save(buffer)
        self.assertEqual(extract_resume_text("CV.DOCX", buffer.getvalue()), "Ada Lovelace\nEngineer")

    def test_legacy_doc_rejected(self):
        with self.assertRaises(ServiceError) as ctx:
            extract_resume_text("resume.doc", b"\xd0\xcf\x11\xe0")
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertIn(".doc", str(ctx.exception))

    def test_unknown_extension_rejected(self):
        with self.assertRaises(ServiceError) as ctx:
            extract_resume_text("resume", b"plain")
        self.assertEqual(str(ctx.exception), "Unsupported file format. Please upload a PDF or DOCX file.")

    def test_file_extension(self):
        self.assertEqual(file_extension("a.b.PDF"), "pdf")
        self.assertEqual(file_extension("noext"), "")


class StructuredResumeTests(unittest.TestCase):
    def test_experience_defaults(self):
        entries = validate_experience_entries([{"company": "A", "current": 1, "achievements": "oops"}, None])
        self.assertEqual(
            entries,
            [
                {
                    "company": "A",
                    "position": "",
                    "startDate": "",
                    "endDate": "",
                    "location": "",
                    "description": "",
                    "achievements": [],
                    "current": True,
                }
            ],
        )

    def test_malformed_sections_are_dropped(self):
        content = structured_resume({"contactInfo": "Ada", "experience": {"company": "A"}, "skills": "Python"})
        self.assertEqual(content.contact_info.name, "")
        self.assertEqual(content.experience, [])
        self.assertEqual(content.skills, [])


if __name__ == "__main__":
    unittest.main()
