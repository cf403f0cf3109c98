"""
LLM-backed receipt OCR.

Sends a receipt image to an OpenAI-compatible chat-completions endpoint and
turns the JSON reply into ``OcrData``.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Optional

from openai import OpenAI, OpenAIError

from app.config import settings
from app.rewards.schemas import OcrData

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")

_SYSTEM_PROMPT = """\
You are a receipt analysis assistant. Extract the following information from receipt images:
1. Vendor/Store name - Try to match with these partner vendors if possible: {vendors}
2. Total amount (in AZN - Azerbaijani Manat)
3. Date of purchase (format: YYYY-MM-DD)

Respond ONLY with a valid JSON object in this exact format:
{{
  "vendorName": "extracted vendor name or best match from partner list",
  "amount": 123.45,
  "date": "2024-01-15",
  "confidence": 0.85,
  "isPartnerVendor": true,
  "rawVendorName": "original vendor name from receipt"
}}

If you cannot extract a field, use null for that field. The confidence should be between 0 and 1."""

_USER_PROMPT = "Please analyze this receipt image and extract the vendor name, total amount, and date."


class OcrError(Exception):
    """Raised when the OCR call fails or its reply can not be read."""
    pass


def absolute_image_url(image_url: str, base_url: str) -> str:
    """Uploaded objects are referenced as ``/objects/...``; the model needs a full URL."""
    if image_url.startswith("/objects/"):
        return base_url.rstrip("/") + image_url
    return image_url


def parse_ocr_reply(content: Optional[str]) -> OcrData:
    if not content:
        raise OcrError("empty reply")
    json_str = content
    match = _FENCE_RE.search(content)
    if match:
        json_str = match.group(1)
    try:
        raw = json.loads(json_str.strip())
    except json.JSONDecodeError as exc:
        raise OcrError(f"unparseable reply: {content[:200]!r}") from exc
    if not isinstance(raw, dict):
        raise OcrError("reply is not a JSON object")

    try:
        return OcrData(
            vendor_name=raw.get("vendorName") or None,
            amount=raw.get("amount") or None,
            date=raw.get("date") or None,
            confidence=raw.get("confidence") or 0,
            is_partner_vendor=bool(raw.get("isPartnerVendor") or False),
            raw_vendor_name=raw.get("rawVendorName") or raw.get("vendorName") or None,
        )
    except ValueError as exc:
        raise OcrError(f"unexpected field types: {exc}") from exc


def build_client() -> OpenAI:
    if not settings.LLM_API_KEY:
        raise OcrError("LLM_API_KEY is not configured")
    return OpenAI(api_key=settings.LLM_API_KEY, base_url=settings.LLM_BASE_URL or None)


def analyze_receipt_image(
    image_url: str,
    vendor_names: list[str],
    client: Optional[OpenAI] = None,
) -> OcrData:
    """Extract vendor, amount and date from a receipt image."""
    client = client or build_client()
    logger.info("OCR request: %s  (%d partner vendors)", image_url, len(vendor_names))
    try:
        response = client.chat.completions.create(
            model=settings.LLM_MODEL,
            messages=[
                {"role": "system", "content": _SYSTEM_PROMPT.format(vendors=", ".join(vendor_names))},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": _USER_PROMPT},
                        {"type": "image_url", "image_url": {"url": image_url}},
                    ],
                },
            ],
            max_tokens=settings.LLM_MAX_TOKENS,
        )
    except OpenAIError as exc:
        raise OcrError(f"OCR request failed: {exc}") from exc

    content = response.choices[0].message.content if response.choices else None
    data = parse_ocr_reply(content)
    logger.info("OCR result: vendor=%s amount=%s date=%s", data.vendor_name, data.amount, data.date)
    return data
