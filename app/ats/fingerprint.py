from __future__ import annotations

import json

from app.schemas.resume import ResumeContent, dump_resume_content

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def _rolling_hash(text: str) -> int:
    """32-bit shift-subtract hash over UTF-16 code units, returned as a signed int."""
    # surrogatepass keeps lone surrogates as their raw code units
    encoded = text.encode("utf-16-le", "surrogatepass")
    acc = 0
    for index in range(0, len(encoded), 2):
        code_unit = encoded[index] | (encoded[index + 1] << 8)
        acc = ((acc << 5) - acc + code_unit) & 0xFFFFFFFF
    if acc >= 0x80000000:
        acc -= 0x100000000
    return acc


def normalize_job_description(job_description: str | None) -> str:
    return (job_description or "").strip().lower()


def serialize_for_hashing(content: ResumeContent, job_description: str | None = "") -> str:
    payload = {
        "content": dump_resume_content(content, exclude={"ats_analysis"}),
        "jobDescription": normalize_job_description(job_description),
    }
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def create_resume_content_hash(content: ResumeContent, job_description: str | None = "") -> str:
    """Fingerprint resume content plus job description for change detection.

    The embedded ``ats_analysis`` is left out so a stored analysis never
    invalidates its own fingerprint. Not collision resistant.
    """
    return _to_base36(abs(_rolling_hash(serialize_for_hashing(content, job_description))))
