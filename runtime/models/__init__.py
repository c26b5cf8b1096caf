"""
Pydantic models used by the dialogue runtime.

Split into:
- session_models: Session, Message, Turn, UserProfile, OutboundMessage, TurnOutcome
- api_models: HTTP request/response schemas
"""
