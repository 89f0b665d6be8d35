"""
Shared fixtures. Tests never reach an LLM provider.
"""
import pytest

from sheetstats.core.config import reload_settings
from sheetstats.services.ai_insights import reset_clients


@pytest.fixture(autouse=True)
def offline_narrator(monkeypatch):
    """Disable the narrative collaborator and drop cached provider clients."""
    monkeypatch.setenv("NARRATIVE_ENABLED", "false")
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    reload_settings()
    reset_clients()
    yield
    reset_clients()


@pytest.fixture
def mixed_rows():
    """Small sales log with a date, money, entity and status column."""
    return [
        {"order_date": "2024-03-01", "customer": "Acme", "amount": "$1,200.00", "status": "Delivered", "notes": ""},
        {"order_date": "2024-03-01", "customer": "Globex", "amount": 300, "status": "Pending", "notes": "rush"},
        {"order_date": 45353, "customer": "Acme", "amount": 450.5, "status": "Delivered", "notes": None},
        {"order_date": "2024-03-05", "customer": "Initech", "amount": None, "status": "Open"},
        {"order_date": "bad date", "customer": "Acme", "amount": "n/a", "status": "Delivered", "notes": "call"},
    ]
