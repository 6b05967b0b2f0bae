"""
Bearer token verification for Enchanted Tome.

Tokens are issued by an external identity provider (Google / email
sign-in through a federated provider) and verified here against the
provider's public key set:
- Signature and expiry checked with python-jose
- Optional audience / issuer pinning
- Key picked by the token's ``kid`` header

Verification never raises to the caller: any bad, missing or expired
token simply yields no identity. Loading the key set is different: a
missing or malformed trust root is a startup failure.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

import httpx
from jose import jwk, jwt, JWTError
from jose.exceptions import JOSEError
from loguru import logger


DEFAULT_ALGORITHMS = ("RS256",)


class TrustRootError(RuntimeError):
    """The identity provider key set could not be loaded."""


@dataclass(frozen=True)
class Identity:
    """A verified caller, decoded from token claims."""

    subject_id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    picture_url: Optional[str] = None

    @property
    def first_name(self) -> Optional[str]:
        if not self.display_name:
            return None
        return self.display_name.split(" ")[0]

    @property
    def last_name(self) -> Optional[str]:
        if not self.display_name:
            return None
        return " ".join(self.display_name.split(" ")[1:])

    @classmethod
    def from_claims(cls, claims: dict) -> Optional["Identity"]:
        """Build an identity from decoded claims; None without a subject."""
        subject = claims.get("sub") or claims.get("user_id")
        if not subject or not isinstance(subject, str):
            return None
        return cls(
            subject_id=subject,
            email=claims.get("email"),
            display_name=claims.get("name"),
            picture_url=claims.get("picture"),
        )


# =============================================================================
# Trust root
# =============================================================================

def _validate_key_set(key_set: Any, algorithms: Sequence[str]) -> dict:
    """Make sure every key in the set can actually be constructed."""
    if not isinstance(key_set, dict) or not key_set:
        raise TrustRootError("Key set must be a non-empty JSON object")

    if "keys" in key_set:
        keys = key_set["keys"]
        if not isinstance(keys, list) or not keys:
            raise TrustRootError("JWKS 'keys' must be a non-empty list")
        candidates = [(k.get("kid") if isinstance(k, dict) else None, k) for k in keys]
    else:
        # {kid: PEM certificate} map, as served by Google's securetoken endpoint
        candidates = list(key_set.items())

    for kid, key in candidates:
        if not isinstance(key, (dict, str)):
            raise TrustRootError(f"Key {kid!r} is neither a JWK nor a PEM string")
        algorithm = key.get("alg") if isinstance(key, dict) else None
        try:
            jwk.construct(key, algorithm or algorithms[0])
        except JOSEError as e:
            raise TrustRootError(f"Key {kid!r} is malformed: {e}") from e

    return key_set


def load_key_set(
    jwks_json: Optional[str] = None,
    jwks_path: Optional[str] = None,
    jwks_url: Optional[str] = None,
    algorithms: Sequence[str] = DEFAULT_ALGORITHMS,
    timeout: float = 10.0,
) -> dict:
    """
    Load the identity provider's public keys.

    Sources are tried in order: inline JSON, file, URL.

    Raises:
        TrustRootError: No source configured, source unreachable or
            key material malformed.
    """
    try:
        if jwks_json:
            raw = json.loads(jwks_json)
            source = "inline configuration"
        elif jwks_path:
            raw = json.loads(Path(jwks_path).read_text(encoding="utf-8"))
            source = jwks_path
        elif jwks_url:
            response = httpx.get(jwks_url, timeout=timeout)
            response.raise_for_status()
            raw = response.json()
            source = jwks_url
        else:
            raise TrustRootError(
                "No identity provider keys configured. "
                "Set AUTH_JWKS_JSON, AUTH_JWKS_PATH or AUTH_JWKS_URL."
            )
    except (ValueError, OSError, httpx.HTTPError) as e:
        raise TrustRootError(f"Failed to load identity provider keys: {e}") from e

    key_set = _validate_key_set(raw, algorithms)
    logger.info(f"Loaded identity provider keys from {source}")
    return key_set


# =============================================================================
# Verification
# =============================================================================

class TokenVerifier:
    """
    Verifies bearer tokens against a fixed key set.

    Usage:
        verifier = TokenVerifier(load_key_set(jwks_url=...), audience="my-project")
        identity = verifier.authenticate(token)  # None when anonymous
    """

    def __init__(
        self,
        key_set: dict,
        algorithms: Sequence[str] = DEFAULT_ALGORITHMS,
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
    ):
        self.key_set = key_set
        self.algorithms = list(algorithms)
        self.audience = audience
        self.issuer = issuer

    def _select_key(self, token: str) -> Any:
        """Pick the signing key by ``kid``; the whole set when absent."""
        kid = jwt.get_unverified_header(token).get("kid")
        if kid is None:
            return self.key_set
        if not isinstance(kid, str):
            return None

        if "keys" in self.key_set:
            for key in self.key_set["keys"]:
                if isinstance(key, dict) and key.get("kid") == kid:
                    return key
            return None
        return self.key_set.get(kid)

    def decode(self, token: str) -> dict:
        """
        Verify a token and return its claims.

        Raises:
            JWTError: Malformed, expired, wrongly signed or unknown key.
        """
        key = self._select_key(token)
        if key is None:
            raise JWTError("Unknown signing key")

        return jwt.decode(
            token,
            key,
            algorithms=self.algorithms,
            audience=self.audience,
            issuer=self.issuer,
            options={
                "verify_aud": self.audience is not None,
                "require_exp": True,
            },
        )

    def authenticate(self, token: Optional[str]) -> Optional[Identity]:
        """
        Resolve a bearer token to an identity.

        Returns None (anonymous) on any verification failure.
        """
        if not token:
            return None

        try:
            claims = self.decode(token)
        except JOSEError as e:
            logger.debug(f"Rejected bearer token: {e}")
            return None

        identity = Identity.from_claims(claims)
        if identity is None:
            logger.debug("Rejected bearer token: no subject claim")
        return identity
