"""Gumroad license verification client.

POST /v2/licenses/verify (form-encoded) → active / inactive verdict.
"""

from __future__ import annotations

import logging
from typing import Optional

import aiohttp

from cfbspread.config import DEFAULT_TIMEOUT, GUMROAD_VERIFY_URL
from cfbspread.models.license import VerifyResult

logger = logging.getLogger(__name__)

# Any truthy field here means the purchase no longer grants access.
INACTIVE_PURCHASE_FIELDS = (
    "refunded",
    "chargebacked",
    "disputed",
    "subscription_ended_at",
    "subscription_cancelled_at",
    "subscription_failed_at",
)


def purchase_is_inactive(purchase: Optional[dict]) -> bool:
    """Refund, chargeback, dispute, or ended/cancelled/failed subscription."""
    purchase = purchase or {}
    return any(bool(purchase.get(f)) for f in INACTIVE_PURCHASE_FIELDS)


def interpret_response(body) -> VerifyResult:
    """Gumroad JSON body → VerifyResult."""
    if not isinstance(body, dict) or not body.get("success"):
        return VerifyResult(ok=False, reason="invalid")

    purchase = body.get("purchase") or {}
    if purchase_is_inactive(purchase):
        return VerifyResult(ok=False, reason="inactive", raw=body)

    return VerifyResult(
        ok=True,
        email=purchase.get("email"),
        uses=body.get("uses"),
        raw=body,
    )


class GumroadVerifier:
    """Async client for the Gumroad license API.

    Usage:
        async with GumroadVerifier() as verifier:
            result = await verifier.verify(product_id, license_key)
    """

    def __init__(
        self,
        url: str = GUMROAD_VERIFY_URL,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        self.url = url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    async def open(self) -> None:
        """Open aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)

    async def close(self) -> None:
        """Close aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> GumroadVerifier:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def verify(
        self,
        product_id: str,
        license_key: str,
        increment: bool = True,
    ) -> VerifyResult:
        """Verify a license key for a product.

        Args:
            product_id: Gumroad product identifier.
            license_key: License key from the Authorization header.
            increment: False면 uses 카운터를 증가시키지 않음.

        Returns:
            VerifyResult. Network errors propagate to the caller.
        """
        await self.open()
        form = {"product_id": product_id, "license_key": license_key}
        if increment is False:
            form["increment_uses_count"] = "false"

        async with self._session.post(self.url, data=form) as resp:
            if resp.status == 404:
                logger.info("Gumroad license not found")
                return VerifyResult(ok=False, reason="not_found")
            try:
                body = await resp.json(content_type=None)
            except ValueError:
                logger.warning("Gumroad returned non-JSON body (status %d)", resp.status)
                return VerifyResult(ok=False, reason="malformed")

        result = interpret_response(body)
        if not result.ok:
            logger.info("Gumroad license rejected: %s", result.reason)
        return result
