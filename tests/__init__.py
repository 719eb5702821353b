"""
Test suite for the perfect competition game backend.

Contains:
- tests/unit/          : Engine modules (costs, scenarios, resolver, feedback, session, AI fallback)
- tests/integration/   : HTTP routes through FastAPI's TestClient
"""
