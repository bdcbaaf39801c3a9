"""Infrastructure adapters (SQLite, Gemini, Groq, CLI)."""
