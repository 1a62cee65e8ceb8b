"""Authentication and authorization.

Learn: One authentication path: email/password login issues a signed
bearer token; every protected request presents it back.

    tokens      → issue / verify signed, expiring identity tokens
    identity    → Authorization header → token → user (or no identity)
    dependencies→ FastAPI guards that reject unauthenticated requests
    ownership   → per-record owner checks (404 for other users' data)
    password    → bcrypt hashing and credential rules
"""
