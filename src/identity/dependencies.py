"""FastAPI dependency that authenticates requests by bearer token."""

from fastapi import Header, HTTPException

from identity.tokens import Actor, verify_token


def require_actor(authorization: str = Header(default="")) -> Actor:
    scheme, _, token = authorization.partition(" ")
    actor = verify_token(token.strip()) if scheme.lower() == "bearer" else None
    if actor is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return actor
