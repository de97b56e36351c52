"""Deliver contact submissions as email through Graph sendMail."""

from __future__ import annotations

from typing import Any

from models import ContactSubmission, DeliveryOutcome, InboundRequest
from services.graph_client import GraphClient
from services.renderer import ContactEmailRenderer

SUBJECT_PREFIX = "[Hybetech Contact]"


class ContactMailer:
    """Downstream step for the contact form."""

    def __init__(
        self,
        graph: GraphClient,
        renderer: ContactEmailRenderer,
        *,
        sender_email: str,
        recipient_email: str,
    ) -> None:
        self._graph = graph
        self._renderer = renderer
        self._sender_email = sender_email
        self._recipient_email = recipient_email

    def deliver(
        self,
        submission: ContactSubmission,
        request: InboundRequest,
        request_id: str,
    ) -> DeliveryOutcome:
        self._graph.send_mail(
            sender=self._sender_email,
            message=self.build_message(submission),
        )
        return DeliveryOutcome()

    def build_message(self, submission: ContactSubmission) -> dict[str, Any]:
        topic = submission.interest.value or "General Inquiry"
        return {
            "subject": f"{SUBJECT_PREFIX} {topic} - {submission.full_name}",
            "body": {
                "contentType": "HTML",
                "content": self._renderer.render(submission),
            },
            "toRecipients": [{"emailAddress": {"address": self._recipient_email}}],
            "replyTo": [
                {
                    "emailAddress": {
                        "address": submission.email,
                        "name": submission.full_name,
                    }
                }
            ],
        }
