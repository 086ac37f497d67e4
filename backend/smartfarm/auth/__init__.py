"""Bearer-token authentication.

Tokens are issued by the main Smart Farm backend; this service only verifies
them. The verified caller is exposed as a FastAPI dependency.

Services:
    - decode_access_token: Verify a JWT and return its claims.
    - get_current_user: Dependency that rejects requests without a valid token.
"""
