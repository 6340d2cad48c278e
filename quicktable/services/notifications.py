"""
Outbound notifications.

Builds the chat messages and WhatsApp deep links shown after a booking,
and forwards reservation copies to the spreadsheet webhook. Forwarding
is best-effort: failures are logged and reported as False, never raised,
because the reservation is already persisted by the time it runs.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timezone
from typing import Any, Optional
from urllib.parse import quote

import httpx

from quicktable.config import get_settings
from quicktable.schemas.reservation import ReservationRead

logger = logging.getLogger(__name__)

WHATSAPP_BASE_URL = "https://wa.me"


def long_date(value: date) -> str:
    """Format like "Saturday, March 14, 2026"."""
    return f"{value:%A}, {value:%B} {value.day:02d}, {value.year}"


def short_date(value: date) -> str:
    """Format like "Mar 14"."""
    return f"{value:%b} {value.day:02d}"


def digits_only(phone: str) -> str:
    return re.sub(r"\D", "", phone or "")


def whatsapp_link(phone: str, message: str) -> str:
    """Deep link that opens a WhatsApp chat with a prefilled message."""
    return f"{WHATSAPP_BASE_URL}/{digits_only(phone)}?text={quote(message, safe='')}"


def compose_booking_message(
    restaurant_name: str,
    booking_date: date,
    time: str,
    party_size: int,
    customer_name: str,
    special_requests: str = "",
) -> str:
    """Message a customer sends the restaurant to request a table."""
    lines = [
        f"Hello {restaurant_name}! 🍽️",
        "",
        "I'd like to make a reservation:",
        "",
        f"📅 Date: {long_date(booking_date)}",
        f"⏰ Time: {time}",
        f"👥 Party Size: {party_size} people",
        f"👤 Name: {customer_name}",
    ]
    if special_requests:
        lines += ["", f"📝 Special Requests: {special_requests}"]
    lines += ["", "Please confirm availability. Thank you!"]
    return "\n".join(lines)


def compose_confirmation_message(
    restaurant_name: str,
    booking_date: date,
    time: str,
    party_size: int,
    customer_name: str,
) -> str:
    """Message staff send a guest after entering a booking for them."""
    return "\n".join(
        [
            f"Hello {customer_name}! 🍽️",
            "",
            f"Your reservation at {restaurant_name} is confirmed:",
            "",
            f"📅 Date: {long_date(booking_date)}",
            f"⏰ Time: {time}",
            f"👥 Party Size: {party_size} people",
            "",
            "We look forward to seeing you!",
        ]
    )


def compose_contact_message(
    restaurant_name: str,
    customer_name: str,
    booking_date: date,
    time: str,
) -> str:
    """Short opener for staff following up on an existing reservation."""
    return (
        f"Hello {customer_name}, this is {restaurant_name} regarding your "
        f"reservation for {short_date(booking_date)} at {time}."
    )


def build_webhook_payload(
    reservation: ReservationRead,
    restaurant_name: str,
    source: str,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Flat reservation record plus restaurant name, source tag and timestamp."""
    now = now or datetime.now(timezone.utc)
    payload = reservation.model_dump(mode="json", by_alias=True)
    payload.update(
        {
            "restaurantName": restaurant_name,
            "source": source,
            "timestamp": now.isoformat().replace("+00:00", "Z"),
        }
    )
    return payload


class WebhookForwarder:
    """Posts reservation copies to an external aggregation endpoint."""

    def __init__(
        self,
        url: Optional[str] = None,
        source: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.url = settings.webhook_url if url is None else url
        self.source = source or settings.webhook_source
        self.timeout = timeout or settings.webhook_timeout
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    async def forward(self, reservation: ReservationRead, restaurant_name: str) -> bool:
        """
        Send one reservation to the webhook.

        Returns:
            True when the endpoint accepted the request, False when
            forwarding is disabled or delivery failed
        """
        if not self.enabled:
            logger.debug("Webhook URL not configured; skipping forward of %s", reservation.id)
            return False

        payload = build_webhook_payload(reservation, restaurant_name, self.source)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self.transport,
                follow_redirects=True,
            ) as client:
                response = await client.post(self.url, json=payload)

            if response.status_code >= 400:
                logger.error(
                    "Webhook rejected reservation %s: %s %s",
                    reservation.id,
                    response.status_code,
                    response.text[:200],
                )
                return False

        except httpx.TimeoutException:
            logger.warning("Webhook timed out forwarding reservation %s", reservation.id)
            return False
        except httpx.HTTPError as e:
            logger.warning("Webhook delivery failed for reservation %s: %s", reservation.id, e)
            return False

        logger.info("Reservation %s forwarded to spreadsheet webhook", reservation.id)
        return True
