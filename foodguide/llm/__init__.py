"""
LLM integration layer.

Responsibilities:
- Manage Gemini API configuration and credentials.
- Build the maps-grounded restaurant search prompt from a location and category.
- Call Gemini once per search and surface classified failures.
- Extract and normalize the fenced JSON answer into Restaurant records.
"""
