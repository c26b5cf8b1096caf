"""
Storage abstractions for the dialogue runtime.

Includes:
- CacheService: explicit TTL cache with an injectable clock
- SessionStore: per-user sessions with a sliding TTL (cache + optional JSON files)
- ProfileStore: language / script / accessibility preferences
- ContextLog: append-only turn log (in-memory + optional JSONL)
"""
