"""
JWT token handler.
Validates bearer tokens and extracts the caller identity and ACL claims.
"""

from typing import Optional, Dict, Any, List
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt

from time_reporting.config import Settings, get_settings
from time_reporting.application.use_cases.base_use_case import UseCaseContext
from time_reporting.domain.models.base import ValidationError


class JWTHandler:
    """Handles JWT token validation and caller extraction."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.jwt_secret = self.settings.jwt_secret_key
        self.jwt_algorithm = self.settings.jwt_algorithm
        self.jwt_audience = self.settings.jwt_audience
        self.acl_claim_name = self.settings.acl_claim_name

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.

        Args:
            token: JWT token string, with or without the 'Bearer ' prefix

        Returns:
            Dict containing token payload

        Raises:
            ValidationError: If token is invalid or expired
        """
        if token.startswith('Bearer '):
            token = token[7:]

        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                audience=self.jwt_audience,
                options={"verify_exp": True, "verify_aud": self.jwt_audience is not None}
            )
        except JWTError as e:
            raise ValidationError(f"Invalid JWT token: {str(e)}")

        if not self.get_user_id(payload):
            raise ValidationError("Token missing user ID (oid or sub claim)")

        return payload

    @staticmethod
    def get_user_id(payload: Dict[str, Any]) -> Optional[str]:
        """Object ID first, then subject."""
        return payload.get('oid') or payload.get('sub')

    @staticmethod
    def get_user_email(payload: Dict[str, Any]) -> Optional[str]:
        return payload.get('email')

    @staticmethod
    def get_user_name(payload: Dict[str, Any]) -> Optional[str]:
        """Display name, falling back to the username, then given plus family name."""
        name = payload.get('name') or payload.get('preferred_username')
        if name:
            return name

        full_name = " ".join(
            part for part in (payload.get('given_name'), payload.get('family_name')) if part
        )
        return full_name or None

    def get_acl_claims(self, payload: Dict[str, Any]) -> List[str]:
        """ACL strings from the configured claim; a single string is accepted too."""
        claims = payload.get(self.acl_claim_name)
        if isinstance(claims, str):
            return [claims]
        if not isinstance(claims, (list, tuple)):
            return []
        return [claim for claim in claims if isinstance(claim, str)]

    def get_caller(self, token: str, request_id: Optional[str] = None) -> UseCaseContext:
        """
        Verify a token and build the per-request caller context.

        Raises:
            ValidationError: If token is invalid
        """
        payload = self.verify_token(token)
        return UseCaseContext.from_claims(
            user_id=self.get_user_id(payload),
            acl_claims=self.get_acl_claims(payload),
            user_email=self.get_user_email(payload),
            user_name=self.get_user_name(payload),
            request_id=request_id
        )

    def generate_test_token(
        self,
        user_id: str,
        acl: Optional[List[str]] = None,
        email: str = "test@example.com",
        name: str = "Test User",
        expires_minutes: int = 60
    ) -> str:
        """
        Generate a JWT token for development/testing purposes.
        """
        now = datetime.now(timezone.utc)
        payload = {
            'sub': user_id,
            'email': email,
            'name': name,
            self.acl_claim_name: list(acl or []),
            'iat': now,
            'exp': now + timedelta(minutes=expires_minutes)
        }
        if self.jwt_audience:
            payload['aud'] = self.jwt_audience

        return jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)
