"""Newsletter signup endpoint: validate, verify, then register the subscriber."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from functools import lru_cache
from typing import Any

from api.common import build_graph_client, build_verifier, new_session, serve
from config import FormsConfig, get_config
from models import SubscriptionRequest
from services.pipeline import FormPipeline, FormWorkflow
from services.responses import SUBSCRIPTION_MESSAGES, ResponseBuilder
from services.subscribers import SubscriberRegistry
from services.validator import validate_subscription


def build_pipeline(
    config: FormsConfig,
    *,
    session: Any | None = None,
    clock: Callable[[], float] | None = None,
    now: Callable[[], datetime] | None = None,
) -> FormPipeline[SubscriptionRequest]:
    site_id, list_id = config.require_subscription_settings()
    http = session or new_session()

    registry = SubscriberRegistry(
        build_graph_client(config, session=http, clock=clock),
        site_id=site_id,
        list_id=list_id,
        now=now,
    )
    workflow = FormWorkflow(
        name="newsletter",
        messages=SUBSCRIPTION_MESSAGES,
        validate=validate_subscription,
        challenge_token=lambda subscription: subscription.turnstile_token,
        delivery=registry,
    )
    return FormPipeline(
        workflow,
        verifier=build_verifier(config, session=http),
        responses=ResponseBuilder(config.allowed_origin),
    )


@lru_cache(maxsize=1)
def _process_pipeline() -> FormPipeline[SubscriptionRequest]:
    return build_pipeline(get_config())


def handler(event: Mapping[str, Any], context: Any = None) -> dict[str, Any]:
    """AWS Lambda entry point."""
    return serve(
        event,
        endpoint="newsletter",
        messages=SUBSCRIPTION_MESSAGES,
        pipeline_factory=_process_pipeline,
    )
