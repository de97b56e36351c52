"""Newsletter subscriber registration against a SharePoint list."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from models import DeliveryOutcome, InboundRequest, SubscriptionRequest
from services.graph_client import GraphClient
from services.observability import LogContext, StructuredLogger, get_logger

ACTIVE_STATUS = "Active"


def email_filter(email: str) -> str:
    # Caller guarantees the address holds no quote or backslash.
    return f"fields/Email eq '{email}'"


class SubscriberRegistry:
    """Downstream step for the newsletter form: duplicate check, then insert."""

    def __init__(
        self,
        graph: GraphClient,
        *,
        site_id: str,
        list_id: str,
        now: Callable[[], datetime] | None = None,
        logger: StructuredLogger | None = None,
    ) -> None:
        self._graph = graph
        self._site_id = site_id
        self._list_id = list_id
        self._now = now or (lambda: datetime.now(UTC))
        self._logger = logger or get_logger()

    def deliver(
        self,
        subscription: SubscriptionRequest,
        request: InboundRequest,
        request_id: str,
    ) -> DeliveryOutcome:
        existing = self._graph.find_list_items(
            site_id=self._site_id,
            list_id=self._list_id,
            filter_expression=email_filter(subscription.email),
        )
        if existing:
            return DeliveryOutcome(already_subscribed=True)

        self._graph.create_list_item(
            site_id=self._site_id,
            list_id=self._list_id,
            fields={
                "Title": subscription.email,
                "Email": subscription.email,
                "IPAddress": request.client_ip,
                "SubscribedAt": self._now().isoformat().replace("+00:00", "Z"),
                "Source": subscription.source,
                "Status": ACTIVE_STATUS,
                "UserAgent": request.user_agent,
            },
        )
        self._logger.info("subscriber_added", context=LogContext(request_id=request_id))
        return DeliveryOutcome(already_subscribed=False)
