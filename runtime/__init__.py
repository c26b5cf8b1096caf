"""
Runtime package for the health dialogue server.

This package contains:
- API layer (FastAPI server + routes)
- Agents (state machine + dialogue controller)
- Stores (cache, sessions, profiles, context log)
- Transport (outbound rendering and degradation)
- Models (Pydantic models for sessions, turns and HTTP schemas)
"""
