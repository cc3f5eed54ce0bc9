"""
Sanitizer and reference-section stripping.
"""

import pytest

from orsbot.utils.text import (
    is_reference_heading,
    preview,
    sanitize,
    strip_accents,
    strip_reference_section,
)


MARKDOWN_SAMPLES = [
    "## Giá vàng hôm nay\n\n**SJC** tăng *nhẹ*.\n\n\n\n- Mua vào: 80 triệu\n- Bán ra: 82 triệu",
    "```python\nprint('xin chào')\n```\nDùng `print` để in.",
    "1. Bước một\n2) Bước hai\n\n[Trang chủ](https://example.com) và ![ảnh](https://example.com/a.png)",
    "__đậm__ **lồng *nghiêng* trong đậm**",
    "Dòng có khoảng trắng cuối   \r\nDòng tiếp\r\n\r\n\r\n\r\nHết",
    "***Ba dấu sao*** và * không phải nghiêng *",
    "",
]


@pytest.mark.parametrize("text", MARKDOWN_SAMPLES)
def test_sanitize_is_idempotent(text):
    once = sanitize(text)
    assert sanitize(once) == once


def test_sanitize_strips_markup_but_keeps_content():
    text = "## Giá vàng hôm nay\n\n**SJC** tăng *nhẹ*.\n\n\n\n- Mua vào: 80 triệu\n- Bán ra: 82 triệu"
    assert sanitize(text) == "Giá vàng hôm nay\n\nSJC tăng nhẹ.\n\nMua vào: 80 triệu\nBán ra: 82 triệu"


def test_sanitize_keeps_code_body():
    text = "```python\nprint('xin chào')\n```\nDùng `print` để in."
    assert sanitize(text) == "print('xin chào')\n\nDùng print để in."


def test_sanitize_links_and_numbered_lists():
    text = "1. Bước một\n2) Bước hai\n\nXem [Trang chủ](https://example.com)"
    assert sanitize(text) == "Bước một\nBước hai\n\nXem Trang chủ"


def test_sanitize_normalizes_crlf_and_blank_runs():
    assert sanitize("A   \r\nB\r\n\r\n\r\n\r\nC") == "A\nB\n\nC"


def test_sanitize_handles_empty_input():
    assert sanitize("") == ""
    assert sanitize(None) == ""


def test_sanitize_keeps_underscores_inside_identifiers():
    assert sanitize("Gọi hàm __init__ và biến my__var__x") == "Gọi hàm __init__ và biến my__var__x"
    assert sanitize("Đây là __đậm__ thôi") == "Đây là đậm thôi"


def test_sanitize_leaves_plain_vietnamese_untouched():
    text = "Xin chào! Tôi có thể giúp gì cho bạn?"
    assert sanitize(text) == text


def test_strip_accents():
    assert strip_accents("Nguồn tham khảo") == "Nguon tham khao"
    assert strip_accents("Đường đi") == "Duong di"


@pytest.mark.parametrize("line", [
    "Nguồn tham khảo:",
    "NGUỒN THAM KHẢO",
    "Tài liệu tham khảo",
    "Sources:",
    "references",
    "Nguồn tham khảo (tham khảo thêm):",
])
def test_reference_headings(line):
    assert is_reference_heading(line)


@pytest.mark.parametrize("line", [
    "Các nguồn tin cho biết giá tăng",
    "Sources say the price rose",
    "Nguồn tham khảo chính là báo cáo của NHNN",
    "Tài liệu tham khảo cho thấy SJC dẫn đầu thị trường.",
    "",
])
def test_non_reference_lines(line):
    assert not is_reference_heading(line)


def test_strip_reference_section_drops_last_heading_and_below():
    text = "Giá vàng tăng.\n\nNguồn tham khảo:\n1) VnExpress - https://vnexpress.net"
    assert strip_reference_section(text) == "Giá vàng tăng."


def test_strip_reference_section_uses_last_heading():
    text = "Phần một\nSources:\nPhần hai\nReferences:\nhttps://a.example"
    assert strip_reference_section(text) == "Phần một\nSources:\nPhần hai"


def test_strip_reference_section_keeps_sentences_that_start_like_a_heading():
    text = "Giá vàng hôm nay tăng.\nTài liệu tham khảo cho thấy SJC dẫn đầu thị trường.\nKết luận: nên chờ."
    assert strip_reference_section(text) == text


def test_strip_reference_section_without_heading():
    assert strip_reference_section("Chỉ có nội dung.\n") == "Chỉ có nội dung."


def test_preview_is_bounded():
    assert preview("a" * 250) == "a" * 200 + "..."
    assert preview("ngắn") == "ngắn"
    assert preview("abcdef", 3) == "abc..."
