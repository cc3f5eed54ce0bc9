"""
Prompt templates for the ANSWER stage.
"""

from __future__ import annotations

from orsbot.prompts.constants import NO_SEARCH_DATA


# System instruction passed to Gemini on every ANSWER call.
ANSWER_SYSTEM_INSTRUCTION = (
    "Bạn là một trợ lý AI hữu ích. Khi trả lời câu hỏi, vui lòng tuân thủ các yêu cầu sau:\n"
    "1. Không sử dụng bất kỳ định dạng markdown nào (không **, ##, ```, v.v.)\n"
    "2. Trả lời bằng văn bản thuần, không cần xuống dòng thừa\n"
    "3. Trả lời bằng tiếng Việt\n"
    "4. Giữ câu trả lời ngắn gọn, súc tích\n"
    '5. Không tự thêm phần "Nguồn tham khảo" trong câu trả lời; hệ thống sẽ hiển thị riêng nếu có dữ liệu kèm theo\n'
    "6. Nếu không có nguồn, chỉ cần trả lời nội dung chính xác, không bổ sung ghi chú nào"
)

# Preamble of the search-grounded prompt (SEARCH → ANSWER without rewrite).
GROUNDED_ANSWER_INSTRUCTION = (
    "Bạn là một trợ lý AI hữu ích. Hãy trả lời câu hỏi dựa trên dữ liệu tìm kiếm được cung cấp, "
    "tuân thủ các yêu cầu sau:\n"
    "1. Không sử dụng bất kỳ định dạng markdown nào (không **, ##, ```, v.v.)\n"
    "2. Trả lời bằng văn bản thuần, không cần xuống dòng thừa\n"
    "3. Trả lời bằng tiếng Việt\n"
    "4. Chỉ tổng hợp thông tin được cung cấp, không thêm nguồn bên ngoài\n"
    '5. Không chèn phần "Nguồn tham khảo" trong câu trả lời; hệ thống sẽ hiển thị phần này từ dữ liệu đầu vào\n'
    "6. Nếu cần nhắc đến nguồn, chỉ đề cập tên hoặc nguồn gốc trong nội dung, không đính kèm URL"
)


def build_answer_prompt(
    question: str,
    *,
    conversation_context: str = "",
    search_data: str = "",
    searched: bool = False,
    rewritten: str | None = None,
) -> str:
    """
    Compose the text that replaces the last user turn.

    - SEARCH → REWRITE: the rewritten prompt already carries the research.
    - REWRITE only: the rewritten prompt, prefixed by the conversation
      context and the literal question when there is prior context.
    - SEARCH only: grounding instructions + context + search data + question.
    - neither: the question unchanged.
    """
    if rewritten is not None:
        if searched or not conversation_context:
            return rewritten
        return (
            f"NGỮ CẢNH CUỘC TRÒ CHUYỆN:\n{conversation_context}\n\n"
            f"CÂU HỎI HIỆN TẠI: {question}\n\n"
            f"PROMPT ĐÃ TỐI ƯU:\n{rewritten}"
        )

    if searched:
        parts = [GROUNDED_ANSWER_INSTRUCTION]
        if conversation_context:
            parts.append(f"Ngữ cảnh cuộc trò chuyện:\n{conversation_context}")
        parts.append(f"Dữ liệu tìm kiếm:\n{search_data or NO_SEARCH_DATA}")
        parts.append(f"Câu hỏi hiện tại: {question}")
        return "\n\n".join(parts)

    return question
