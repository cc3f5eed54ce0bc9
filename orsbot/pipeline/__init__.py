"""
Answer-composition pipeline.

selector.py    workflow id → ordered stage plan
executor.py    runs SEARCH → REWRITE → ANSWER as the plan dictates
references.py  "Nguồn tham khảo" block for search-backed answers
"""
