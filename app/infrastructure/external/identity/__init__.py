"""Third-party identity verifiers (one per provider, implementing IIdentityVerifier)."""

from app.infrastructure.external.identity.google import GoogleIdentityVerifier

__all__ = ["GoogleIdentityVerifier"]
