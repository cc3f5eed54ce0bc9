"""
Reference block rendering.
"""

from orsbot.pipeline.references import Citation, format_references
from orsbot.schemas.messages import UploadedFileHandle
from orsbot.schemas.search import SearchResult


def test_empty_list_renders_placeholder():
    assert format_references([]) == "Nguồn tham khảo: (không có)"


def test_numbered_lines_in_input_order():
    citations = [
        Citation("VnExpress", "https://vnexpress.net/gia-vang"),
        Citation("SJC", "https://sjc.com.vn"),
    ]
    assert format_references(citations) == (
        "Nguồn tham khảo:\n"
        "1) VnExpress - https://vnexpress.net/gia-vang\n"
        "2) SJC - https://sjc.com.vn"
    )


def test_capped_at_max_count():
    citations = [Citation(f"Nguồn {i}", f"https://example.com/{i}") for i in range(1, 9)]
    rendered = format_references(citations, max_count=5)
    lines = rendered.splitlines()
    assert len(lines) == 6
    assert lines[-1] == "5) Nguồn 5 - https://example.com/5"


def test_deterministic():
    citations = [Citation("A", "https://a.example"), Citation("B", "")]
    assert format_references(citations) == format_references(list(citations))


def test_missing_location_placeholder():
    assert format_references([Citation("Ghi chú", "")]).endswith("1) Ghi chú - (không có URL)")


def test_citation_constructors():
    from_search = Citation.from_search_result(SearchResult(title="Tuổi Trẻ", url="https://tuoitre.vn"))
    from_file = Citation.from_uploaded_file(
        UploadedFileHandle(remote_uri="https://files.example/abc", mime_type="application/pdf", display_name="bao-cao.pdf")
    )
    assert from_search == Citation("Tuổi Trẻ", "https://tuoitre.vn")
    assert from_file == Citation("bao-cao.pdf", "https://files.example/abc")
