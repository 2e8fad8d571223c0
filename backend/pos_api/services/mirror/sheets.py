"""
Spreadsheet mirror client.

Pushes a full snapshot to a spreadsheet webhook (an Apps Script web app)
that replaces each sheet wholesale. The mirror is a reporting copy only:
a failed push is logged and reported, never raised.
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from shared.config.logging import mirror_logger as logger
from shared.config.settings import settings
from pos_api.services.snapshot import Snapshot


@dataclass(frozen=True)
class MirrorResult:
    success: bool
    message: str


class SheetsMirror:
    """
    HTTP client for the spreadsheet webhook.

    `transport` is passed straight to httpx.AsyncClient (tests use
    httpx.MockTransport).
    """

    def __init__(
        self,
        url: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    async def push(self, snapshot: Snapshot) -> MirrorResult:
        """POST the snapshot. Never raises."""
        if not self.enabled:
            return MirrorResult(False, "Spreadsheet mirror is not configured")

        try:
            # Apps Script answers the POST with a redirect to the result
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.post(self.url, json=snapshot.as_payload())
        except httpx.HTTPError as exc:
            logger.warning("Mirror push failed", url=self.url, error=str(exc), version=snapshot.version)
            return MirrorResult(False, f"Could not reach spreadsheet webhook: {exc}")

        if response.status_code >= 400:
            logger.warning(
                "Mirror push rejected",
                url=self.url,
                status_code=response.status_code,
                version=snapshot.version,
            )
            return MirrorResult(False, f"Spreadsheet webhook returned HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("success") is False:
            message = str(body.get("message") or "Spreadsheet webhook reported a failure")
            logger.warning("Mirror push refused by receiver", url=self.url, detail=message)
            return MirrorResult(False, message)

        message = body.get("message") if isinstance(body, dict) and body.get("message") else "Data synced to spreadsheet"
        logger.info(
            "Mirror push succeeded",
            version=snapshot.version,
            tables=len(snapshot.tables),
            orders=len(snapshot.orders),
            payments=len(snapshot.payments),
        )
        return MirrorResult(True, str(message))


def get_mirror() -> SheetsMirror:
    """Mirror configured from settings."""
    return SheetsMirror(settings.mirror_webhook_url, settings.mirror_timeout_seconds)
