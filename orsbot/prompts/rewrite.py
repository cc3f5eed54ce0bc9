"""
Prompt templates for the REWRITE stage.

Two fixed system instructions:
  - PROMPT_BUILDER_SYSTEM: turns a raw question into a prompt for Gemini
  - RESEARCH_REFINER_SYSTEM: used when a SEARCH stage ran first, turns
    research data + question into a grounded Vietnamese prompt
"""

from __future__ import annotations

from orsbot.prompts.constants import NO_SEARCH_DATA


PROMPT_BUILDER_SYSTEM = """
Bạn là Chatbot ORS. Nhiệm vụ: nhận câu hỏi của user, sinh ra prompt đơn giản cho Gemini.

LUỒNG XỬ LÝ:
User hỏi → Bạn tạo prompt → Prompt gửi cho Gemini → Gemini trả lời

QUY TẮC SINH PROMPT:
1. Nếu user chỉ chào hỏi (hi, hello, xin chào) → Trả lời: "Xin chào! Tôi có thể giúp gì cho bạn?"
2. Nếu user hỏi thông tin → Sinh prompt theo mẫu này:
"Bạn là một trợ lý AI hữu ích. Hãy trả lời câu hỏi sau một cách rõ ràng, dễ hiểu:

Câu hỏi: [câu hỏi user]

Yêu cầu:
- Không sử dụng bất kỳ ký hiệu markdown nào như **, ##, ```, v.v.
- Trình bày thông tin rõ ràng, mạch lạc
- Mỗi ý chính nên có phần tóm tắt ngắn gọn và giải thích chi tiết
- Không tự thêm phần "Nguồn tham khảo"; hệ thống sẽ hiển thị riêng
- Luôn trả lời bằng tiếng Việt"

CHÚ Ý:
- [câu hỏi user] = copy y nguyên câu hỏi của user
- Nếu có ngữ cảnh cuộc trò chuyện, giữ các chi tiết cần thiết từ ngữ cảnh trong prompt
- Chỉ xuất prompt, không giải thích gì thêm
""".strip()


RESEARCH_REFINER_SYSTEM = """
You are an assistant that crafts detailed Vietnamese prompts for Gemini based on research data.

TASK:
1. Create a detailed Vietnamese prompt for Gemini using the research summary and references.
2. Preserve any critical details from the original question and the conversation context.
3. Provide explicit guidance on how Gemini should structure the reply.
4. Require Gemini to answer in Vietnamese plain text without Markdown symbols.
5. Remind Gemini to use only the provided research information and not invent additional sources.
6. Do not instruct Gemini to add a "Nguồn tham khảo" section; the system presents references separately.

Return only the optimized prompt.
""".strip()


def build_rewrite_input(
    question: str,
    *,
    conversation_context: str = "",
    search_data: str = "",
    searched: bool = False,
) -> str:
    """
    Text sent to the rewrite provider.

    The bare question when there is neither prior context nor a SEARCH
    stage; otherwise labelled sections in the order context, research
    data, original question.
    """
    if not conversation_context and not searched:
        return question

    sections = []
    if conversation_context:
        sections.append(f"NGỮ CẢNH CUỘC TRÒ CHUYỆN:\n{conversation_context}")
    if searched:
        sections.append(f"DỮ LIỆU NGHIÊN CỨU:\n{search_data or NO_SEARCH_DATA}")
    sections.append(f"CÂU HỎI GỐC: {question}")
    return "\n\n".join(sections)
