"""License verification data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class VerifyResult:
    """Outcome of a single Gumroad license verification call.

    reason is one of "not_found", "invalid", "inactive", "malformed"
    when ok is False.
    """

    ok: bool
    reason: Optional[str] = None
    email: Optional[str] = None
    uses: Optional[int] = None
    raw: dict = field(default_factory=dict)


@dataclass(frozen=True)
class LicenseVerification:
    """Cached verdict for an active license (product_id:license_key)."""

    email: Optional[str]
    uses: Optional[int]
    cached_at: float

    @staticmethod
    def from_result(result: VerifyResult, cached_at: float) -> LicenseVerification:
        return LicenseVerification(
            email=result.email,
            uses=result.uses,
            cached_at=cached_at,
        )
