"""Contact form endpoint: validate, verify, then email the submission."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

from api.common import build_graph_client, build_verifier, new_session, serve
from config import FormsConfig, get_config
from models import ContactSubmission
from services.mailer import ContactMailer
from services.pipeline import FormPipeline, FormWorkflow
from services.renderer import ContactEmailRenderer
from services.responses import CONTACT_MESSAGES, ResponseBuilder
from services.validator import validate_contact


def build_pipeline(
    config: FormsConfig,
    *,
    session: Any | None = None,
    clock: Callable[[], float] | None = None,
    template_path: Path | None = None,
) -> FormPipeline[ContactSubmission]:
    sender_email, recipient_email = config.require_contact_settings()
    http = session or new_session()

    mailer = ContactMailer(
        build_graph_client(config, session=http, clock=clock),
        ContactEmailRenderer(
            template_path, site_name=config.site_name, site_domain=config.site_domain
        ),
        sender_email=sender_email,
        recipient_email=recipient_email,
    )
    workflow = FormWorkflow(
        name="contact",
        messages=CONTACT_MESSAGES,
        validate=validate_contact,
        challenge_token=lambda submission: submission.turnstile_token,
        delivery=mailer,
    )
    return FormPipeline(
        workflow,
        verifier=build_verifier(config, session=http),
        responses=ResponseBuilder(config.allowed_origin),
    )


@lru_cache(maxsize=1)
def _process_pipeline() -> FormPipeline[ContactSubmission]:
    # Built once per warm process so the token cache outlives a single request.
    return build_pipeline(get_config())


def handler(event: Mapping[str, Any], context: Any = None) -> dict[str, Any]:
    """AWS Lambda entry point."""
    return serve(
        event,
        endpoint="contact",
        messages=CONTACT_MESSAGES,
        pipeline_factory=_process_pipeline,
    )
