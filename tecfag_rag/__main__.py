"""Allow ``python -m tecfag_rag``."""

from .adapters.inbound.cli import app

app()
