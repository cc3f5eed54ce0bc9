"""
Provider adapters, one per external service.

search.py   Perplexity / Tavily → SearchOutcome
rewrite.py  OpenAI chat completions → RewriteResult (degrades, never raises upstream errors)
answer.py   Gemini → AnswerResult
normalize.py  payload shape sniffing shared by the search adapters
"""
