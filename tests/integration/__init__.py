"""
Integration tests for the Arabic Grammar Gateway.

Components run together, with no network access:
- API endpoints through FastAPI TestClient with a scripted generation client
- Generation pipeline over GeminiClient with httpx.MockTransport
"""
