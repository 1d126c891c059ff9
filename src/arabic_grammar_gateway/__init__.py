"""
Arabic Grammar Gateway.

Accepts Arabic text, forwards structured prompts to a generative model
(Google Gemini) and returns responses that have passed a strict
sanitize -> repair -> validate pipeline:
- Grammar analysis (tokens + recursive syntax tree, i'rab text)
- Exercise generation and answer checking
- Quiz generation and evaluation
- Grammar concept lookup

Architecture: FastAPI gateway + retrying Gemini client + schema validation
"""

__version__ = "0.1.0"
