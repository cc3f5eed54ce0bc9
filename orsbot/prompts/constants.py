"""
Centralized constants: model catalog, section labels, and reference
block wording.
"""

from __future__ import annotations


# ── Model catalog ───────────────────────────────────────────────────
#    Ids the front end may send. Only Google models can run the ANSWER
#    stage; OpenAI ids are known so they fail with a clear message.
MODEL_CATALOG: dict[str, str] = {
    # OpenAI
    "gpt-4o": "openai",
    "gpt-4o-mini": "openai",
    "gpt-4-turbo": "openai",
    "gpt-3.5-turbo": "openai",
    # Google
    "gemini-2.5-pro": "google",
    "gemini-2.5-flash": "google",
    "gemini-2.5-flash-lite": "google",
    "gemini-2.0-flash": "google",
    "gemini-2.0-flash-lite": "google",
    "gemini-2.0-pro": "google",
    "gemini-1.5-flash": "google",
    "gemini-1.5-flash-lite": "google",
    "gemini-1.5-pro": "google",
    "gemini-1.0-pro": "google",
}

ANSWER_PROVIDER = "google"


def is_answer_model(model: str) -> bool:
    return MODEL_CATALOG.get(model) == ANSWER_PROVIDER


# ── Conversation labels ─────────────────────────────────────────────
ROLE_LABELS: dict[str, str] = {
    "user": "Người dùng",
    "assistant": "Trợ lý",
}


# ── Search data labels ──────────────────────────────────────────────
SEARCH_SUMMARY_LABEL = "TÓM TẮT TỪ NGUỒN TÌM KIẾM:"
SEARCH_REFERENCES_LABEL = "THAM KHẢO:"
NO_SEARCH_DATA = "Không có dữ liệu tìm kiếm bổ sung."
MISSING_URL = "(không có URL)"


# ── Reference block ─────────────────────────────────────────────────
REFERENCES_HEADER = "Nguồn tham khảo:"
REFERENCES_EMPTY = "Nguồn tham khảo: (không có)"
