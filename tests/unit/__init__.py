"""
Unit tests for the Arabic Grammar Gateway.

Test individual components in isolation:
- Backoff policy and retrying invoker
- Gemini client and prompt builder
- Sanitizer, shape repairer, schema validator and pipeline
- Request models, auth helpers and services
- API dependencies and error handlers
"""
