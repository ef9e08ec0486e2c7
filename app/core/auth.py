import time
from typing import Optional, Dict, Any

import requests
from fastapi import Header, HTTPException
from jose import jwt, JWTError
from jose.utils import base64url_decode
from loguru import logger

from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.backends import default_backend

from app.core import config


# JWKS cache (simple in-memory cache)
_JWKS_CACHE: Dict[str, Any] = {"ts": 0, "jwks": None}


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------
def _get_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid Authorization header format")

    token = parts[1].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing bearer token")

    return token


# ------------------------------------------------------------
# JWKS Fetch + Cache
# ------------------------------------------------------------
def _fetch_jwks() -> Dict[str, Any]:
    if not config.AUTH_JWKS_URL:
        raise HTTPException(status_code=500, detail="AUTH_JWKS_URL not set (required for JWKS mode)")

    headers = {"apikey": config.AUTH_JWKS_API_KEY} if config.AUTH_JWKS_API_KEY else {}
    resp = requests.get(config.AUTH_JWKS_URL, headers=headers, timeout=10)

    try:
        data = resp.json()
    except ValueError:
        raise HTTPException(
            status_code=500,
            detail=f"Invalid JWKS JSON response: HTTP {resp.status_code}",
        )

    if resp.status_code != 200 or "keys" not in data:
        raise HTTPException(status_code=500, detail="Invalid JWKS response")

    return data


def _get_cached_jwks() -> Dict[str, Any]:
    now = time.time()

    if _JWKS_CACHE["jwks"] and now - _JWKS_CACHE["ts"] < config.JWKS_TTL_SECONDS:
        return _JWKS_CACHE["jwks"]

    jwks = _fetch_jwks()
    _JWKS_CACHE["jwks"] = jwks
    _JWKS_CACHE["ts"] = now

    return jwks


def _find_key(jwks: Dict[str, Any], kid: str) -> Optional[Dict[str, Any]]:
    return next((k for k in jwks["keys"] if k.get("kid") == kid), None)


def _public_key_from_jwk(jwk: Dict[str, Any]):
    """EC P-256 public key from the x/y coordinates of an ES256 JWK."""
    x = base64url_decode(jwk["x"].encode())
    y = base64url_decode(jwk["y"].encode())

    public_numbers = ec.EllipticCurvePublicNumbers(
        int.from_bytes(x, "big"),
        int.from_bytes(y, "big"),
        ec.SECP256R1(),
    )

    return public_numbers.public_key(default_backend())


# ------------------------------------------------------------
# Verification Modes
# ------------------------------------------------------------
def _verify_jwt_hs256(token: str) -> Dict[str, Any]:
    if not config.AUTH_JWT_SECRET:
        raise HTTPException(status_code=500, detail="AUTH_JWT_SECRET not set")

    try:
        return jwt.decode(
            token,
            config.AUTH_JWT_SECRET,
            algorithms=["HS256"],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")


def _verify_jwt_jwks(token: str) -> Dict[str, Any]:
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token header")

    alg = header.get("alg")
    kid = header.get("kid")

    if config.AUTH_DEBUG:
        logger.debug(f"[auth] header.alg={alg} header.kid={kid}")

    if not kid:
        raise HTTPException(status_code=401, detail="Token missing kid")

    if alg != "ES256":
        raise HTTPException(status_code=401, detail=f"Unsupported JWT alg: {alg}")

    key_data = _find_key(_get_cached_jwks(), kid)

    if not key_data:
        # key rotation: refresh once
        _JWKS_CACHE["jwks"] = None
        key_data = _find_key(_get_cached_jwks(), kid)

    if not key_data:
        raise HTTPException(status_code=401, detail="Public key not found for kid")

    try:
        return jwt.decode(
            token,
            _public_key_from_jwk(key_data),
            algorithms=["ES256"],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")


# ------------------------------------------------------------
# Main Dependency
# ------------------------------------------------------------
def get_current_user_id(
    authorization: Optional[str] = Header(default=None),
    x_user_id: Optional[str] = Header(default=None),
) -> str:
    """Acting user id for this request. Passed explicitly into every service call."""
    mode = config.AUTH_VERIFY_MODE

    if mode == "header":
        # identity already verified by an upstream gateway
        if not x_user_id or not x_user_id.strip():
            raise HTTPException(status_code=401, detail="Missing X-User-Id header")
        return x_user_id.strip()

    token = _get_bearer_token(authorization)

    if mode == "hs256":
        payload = _verify_jwt_hs256(token)
    elif mode == "jwks":
        payload = _verify_jwt_jwks(token)
    else:
        raise HTTPException(status_code=500, detail=f"Invalid AUTH_VERIFY_MODE: {mode}")

    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Token missing sub claim")

    if config.AUTH_DEBUG:
        logger.debug(f"[auth] mode={mode} user_id={sub}")

    return str(sub)
