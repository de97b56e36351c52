"""Tests for contact email rendering and delivery."""

from __future__ import annotations

from models import ContactSubmission, InboundRequest, InterestCategory
from services.graph_client import GraphClient
from services.mailer import ContactMailer
from services.renderer import ContactEmailRenderer
from tests.fakes import SEND_MAIL_FRAGMENT, FakeResponse, FakeSession


class _StaticTokenCache:
    def get_token(self) -> str:
        return "bearer"

    def refresh(self) -> str:
        return "bearer"


def _mailer(session: FakeSession) -> ContactMailer:
    return ContactMailer(
        GraphClient(_StaticTokenCache(), session=session),
        ContactEmailRenderer(site_name="Hybetech", site_domain="hybe.tech"),
        sender_email="noreply@hybe.tech",
        recipient_email="hello@hybe.tech",
    )


def _request() -> InboundRequest:
    return InboundRequest(method="POST", client_ip="203.0.113.7", user_agent="ua", body=None)


def test_every_field_is_html_escaped() -> None:
    renderer = ContactEmailRenderer(site_name="Hybetech", site_domain="hybe.tech")
    submission = ContactSubmission(
        first_name="<b>Al</b>",
        last_name="O'Hara & Sons",
        email="al@example.com",
        message='<script>alert("x")</script>',
        turnstile_token="tok",
        company="<i>Acme</i>",
        phone="+1 <555>",
    )

    html = renderer.render(submission)

    assert "&lt;b&gt;Al&lt;/b&gt;" in html
    assert "<b>Al</b>" not in html
    assert "O&#39;Hara &amp; Sons" in html
    assert "&lt;script&gt;alert(&#34;x&#34;)&lt;/script&gt;" in html
    assert "&lt;i&gt;Acme&lt;/i&gt;" in html
    assert "tel:+1 &lt;555&gt;" in html
    assert "Not specified" in html


def test_optional_rows_are_omitted_and_interest_labelled() -> None:
    renderer = ContactEmailRenderer(site_name="Hybetech", site_domain="hybe.tech")
    submission = ContactSubmission(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        message="Hello world!",
        turnstile_token="tok",
        interest=InterestCategory.DEVELOPMENT,
    )

    html = renderer.render(submission)

    assert "Company" not in html
    assert "Phone" not in html
    assert "Custom AI Development" in html


def test_deliver_sends_one_message(session: FakeSession) -> None:
    session.queue("POST", SEND_MAIL_FRAGMENT, FakeResponse(202))
    submission = ContactSubmission(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        message="Hello world!",
        turnstile_token="tok",
        interest=InterestCategory.TRAINING,
    )

    outcome = _mailer(session).deliver(submission, _request(), "req_1")

    assert outcome.already_subscribed is False
    (call,) = session.calls_to(SEND_MAIL_FRAGMENT)
    message = call.kwargs["json"]["message"]
    assert message["subject"] == "[Hybetech Contact] training - Ada Lovelace"
    assert message["body"]["contentType"] == "HTML"
    assert message["toRecipients"] == [{"emailAddress": {"address": "hello@hybe.tech"}}]
    assert message["replyTo"] == [
        {"emailAddress": {"address": "ada@example.com", "name": "Ada Lovelace"}}
    ]


def test_subject_defaults_to_general_inquiry(session: FakeSession) -> None:
    submission = ContactSubmission(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        message="Hello world!",
        turnstile_token="tok",
    )

    message = _mailer(session).build_message(submission)

    assert message["subject"] == "[Hybetech Contact] General Inquiry - Ada Lovelace"


def test_header_and_footer_use_display_names() -> None:
    renderer = ContactEmailRenderer(site_name="Hybetech", site_domain="hybe.tech")
    submission = ContactSubmission(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        message="Hello world!",
        turnstile_token="tok",
    )

    html = renderer.render(submission)

    assert "from hybe.tech" in html
    assert "via the Hybetech website contact form" in html
    assert "www.hybe.tech" not in html
