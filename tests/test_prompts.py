"""
Prompt sections and the answer/rewrite prompt composition rules.
"""

from orsbot.prompts.answer import GROUNDED_ANSWER_INSTRUCTION, build_answer_prompt
from orsbot.prompts.rewrite import build_rewrite_input
from orsbot.prompts.sections import format_conversation_context, format_search_data
from orsbot.schemas.messages import ConversationMessage, ImagePart
from orsbot.schemas.search import SearchOutcome, SearchResult


def test_conversation_context_labels_and_window():
    history = [ConversationMessage(role="user", content=f"câu {i}") for i in range(12)]
    history.insert(5, ConversationMessage(role="assistant", content=[ImagePart(image_url={"url": "https://x/a.png"})]))

    context = format_conversation_context(history, max_messages=3)
    assert context == "Người dùng: câu 9\nNgười dùng: câu 10\nNgười dùng: câu 11"
    assert format_conversation_context(history, max_messages=0) == ""
    assert format_conversation_context([]) == ""


def test_search_data_sections():
    outcome = SearchOutcome(
        provider="perplexity",
        summary="Tóm tắt.",
        results=[
            SearchResult(title="A", url="https://a.example", content="nội dung A"),
            SearchResult(title="B"),
        ],
    )
    assert format_search_data(outcome) == (
        "TÓM TẮT TỪ NGUỒN TÌM KIẾM:\nTóm tắt.\n\n"
        "THAM KHẢO:\n1. A - https://a.example\nnội dung A\n2. B - (không có URL)"
    )
    assert format_search_data(SearchOutcome(provider="tavily")) == ""
    assert format_search_data(None) == ""


def test_rewrite_input_with_empty_search():
    text = build_rewrite_input("Câu hỏi?", searched=True)
    assert text == "DỮ LIỆU NGHIÊN CỨU:\nKhông có dữ liệu tìm kiếm bổ sung.\n\nCÂU HỎI GỐC: Câu hỏi?"


def test_answer_prompt_variants():
    assert build_answer_prompt("Q") == "Q"
    assert build_answer_prompt("Q", rewritten="R") == "R"
    assert build_answer_prompt("Q", rewritten="R", searched=True, conversation_context="C") == "R"
    assert build_answer_prompt("Q", rewritten="R", conversation_context="C") == (
        "NGỮ CẢNH CUỘC TRÒ CHUYỆN:\nC\n\nCÂU HỎI HIỆN TẠI: Q\n\nPROMPT ĐÃ TỐI ƯU:\nR"
    )
    grounded = build_answer_prompt("Q", searched=True, conversation_context="C", search_data="D")
    assert grounded == (
        f"{GROUNDED_ANSWER_INSTRUCTION}\n\n"
        "Ngữ cảnh cuộc trò chuyện:\nC\n\n"
        "Dữ liệu tìm kiếm:\nD\n\n"
        "Câu hỏi hiện tại: Q"
    )
