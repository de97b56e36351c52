"""Shared validate -> verify -> deliver -> respond pipeline for form endpoints."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

from models import (
    DeliveryOutcome,
    EndpointResponse,
    InboundRequest,
    VerificationFailure,
    VerificationResult,
)
from services.errors import (
    ClientInputError,
    DownstreamError,
    MethodNotAllowedError,
    UpstreamError,
    VerificationError,
)
from services.observability import LogContext, StructuredLogger, get_logger, new_request_id
from services.request_context import extract_request
from services.responses import (
    INVALID_FORMAT,
    METHOD_NOT_ALLOWED,
    ORIGIN_UNVERIFIED,
    VERIFICATION_FAILED,
    EndpointMessages,
    ResponseBuilder,
)
from services.validator import ValidationResult, parse_json_body

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)


class Verifier(Protocol):
    def verify(self, token: str, client_ip: str, request_id: str) -> VerificationResult: ...


class Delivery(Protocol[T_contra]):
    def deliver(
        self, value: T_contra, request: InboundRequest, request_id: str
    ) -> DeliveryOutcome: ...


@dataclass(frozen=True)
class FormWorkflow(Generic[T]):
    """Per-endpoint strategy plugged into the shared pipeline."""

    name: str
    messages: EndpointMessages
    validate: Callable[[Any], ValidationResult[T]]
    challenge_token: Callable[[T], str]
    delivery: Delivery[T]


class FormPipeline(Generic[T]):
    """Run one form request through the fail-fast stages and map the outcome."""

    def __init__(
        self,
        workflow: FormWorkflow[T],
        *,
        verifier: Verifier,
        responses: ResponseBuilder,
        logger: StructuredLogger | None = None,
        request_id_factory: Callable[[], str] = new_request_id,
    ) -> None:
        self._workflow = workflow
        self._verifier = verifier
        self._responses = responses
        self._logger = logger or get_logger()
        self._request_id_factory = request_id_factory

    def handle(self, event: Mapping[str, Any]) -> EndpointResponse:
        request_id = self._request_id_factory()
        context = LogContext(request_id=request_id, endpoint=self._workflow.name)
        request = extract_request(event)
        method = request.method.upper()
        self._logger.info("request_received", context=context, method=method)

        if method == "OPTIONS":
            return self._responses.preflight()

        messages = self._workflow.messages
        try:
            if method != "POST":
                raise MethodNotAllowedError(method)
            outcome = self._process(request, request_id)
        except MethodNotAllowedError:
            self._logger.warning("method_not_allowed", context=context, method=method)
            return self._responses.error(405, METHOD_NOT_ALLOWED)
        except ClientInputError as exc:
            self._logger.warning(
                "validation_failed",
                context=context,
                reason=exc.reason,
                fields=[f"{item.field}:{item.rule}" for item in exc.failures],
            )
            return self._responses.error(400, self._client_input_message(exc.reason))
        except VerificationError as exc:
            self._logger.warning(
                "verification_failed",
                context=context,
                reason=exc.reason.value,
                error_codes=list(exc.error_codes),
            )
            return self._responses.error(400, VERIFICATION_FAILED)
        except UpstreamError as exc:
            details: dict[str, Any] = {}
            if isinstance(exc, DownstreamError):
                details = {"operation": exc.operation, "status": exc.status_code}
            self._logger.error("request_failed", context=context, error=exc.tag, **details)
            return self._responses.error(500, messages.server_error)
        except Exception as exc:  # noqa: BLE001
            # Only the class name: messages can carry submitted values.
            self._logger.error("request_failed", context=context, error=type(exc).__name__)
            return self._responses.error(500, messages.server_error)

        self._logger.info(
            "request_succeeded",
            context=context,
            already_subscribed=outcome.already_subscribed,
        )
        return self._responses.success(messages.success)

    def _process(self, request: InboundRequest, request_id: str) -> DeliveryOutcome:
        payload = parse_json_body(
            request.body,
            require_body=self._workflow.messages.missing_body is not None,
        )

        result = self._workflow.validate(payload)
        if not result.ok or result.value is None:
            raise ClientInputError("schema", result.failures)
        value = result.value

        if not request.client_ip:
            raise ClientInputError("client_ip_missing")

        verification = self._verifier.verify(
            self._workflow.challenge_token(value),
            request.client_ip,
            request_id,
        )
        if not verification.valid:
            raise VerificationError(
                verification.reason or VerificationFailure.VERIFICATION_FAILED,
                verification.error_codes,
            )

        return self._workflow.delivery.deliver(value, request, request_id)

    def _client_input_message(self, reason: str) -> str:
        if reason == "missing_body" and self._workflow.messages.missing_body:
            return self._workflow.messages.missing_body
        if reason == "invalid_json":
            return INVALID_FORMAT
        if reason == "client_ip_missing":
            return ORIGIN_UNVERIFIED
        return self._workflow.messages.invalid_input
