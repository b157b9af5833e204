"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build gift-explanation prompts from a scored item and the request.
- Call Groq to write a short, personalised explanation per item.
- Expose a null generator so the service runs without credentials.
"""
