"""Provider router: the single entry point for a generation call.

``generate_response`` validates configuration, picks a wire adapter and
relays its chunks to the caller's ``on_chunk``:

=====================================  ==========================================
Condition                              Route
=====================================  ==========================================
gemini + enterprise enabled            Enterprise adapter (retry policy)
gemini + override on the Google host   Official adapter against the override (retry)
gemini + other override                OpenAI-compatible adapter on the override (retry)
gemini + Google-shaped key             Official adapter on the default host (retry)
gemini + anything else                 ``ConfigurationError``
any other provider tag                 OpenAI-compatible adapter (no retry)
=====================================  ==========================================

Configuration errors are raised before any network call. Adapter errors
propagate unchanged after the retry policy gives up; the router does not
catch them. Each call builds its own request, adapter, sink and retry
counter, so concurrent calls share no mutable state.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Sequence, Union

from ..base.cancellation import CancellationToken, CancelledError
from ..base.errors import ConfigurationError
from ..base.logging import LogContext, get_logger, log_event, normalized_log_event
from ..base.models import GenerationExtras, GenerationRequest, Message
from ..base.resilience.retry import DEFAULT_RETRY_POLICY, RetryPolicy, retry_generation
from ..base.routing import CredentialKind, EndpointKind, classify_credential, classify_endpoint
from ..base.streaming import ChunkCallback, ChunkSink
from ..base.timeouts import get_timeout_config
from ..config import get_provider_config
from ..config.defaults import GEMINI_DEFAULT_BASE_URL, GEMINI_ENTERPRISE_DEFAULT_LOCATION
from ..gemini.enterprise import GeminiEnterpriseAdapter
from ..gemini.official import GeminiOfficialAdapter
from ..openai.client import OpenAICompatAdapter

logger = get_logger("router")

MISSING_KEY_MESSAGE = "missing API key: pass a credential or set one of the provider environment variables"
MISSING_TOKEN_MESSAGE = "enterprise mode requires an Access Token"
MISSING_PROJECT_MESSAGE = "enterprise mode requires a Project ID"
NON_GOOGLE_KEY_MESSAGE = (
    "the credential is not a Google API key (AIza...): set a compatible endpoint override "
    "for this key, or use a real Google API key for the official Gemini API"
)


def _coerce_extras(extras: Union[GenerationExtras, Dict[str, Any], None]) -> GenerationExtras:
    if extras is None:
        return GenerationExtras()
    if isinstance(extras, GenerationExtras):
        return extras
    return GenerationExtras.model_validate(extras)


def _select_route(request: GenerationRequest, override: Optional[str], family: str):
    """Return ``(adapter, base_url, use_retry)`` for the request."""
    if family != "gemini":
        base = override or get_provider_config("openai").get("base_url")
        return OpenAICompatAdapter(), base, False
    if request.extras.enterprise_enabled:
        return GeminiEnterpriseAdapter(), override, True
    if override:
        if classify_endpoint(override) is EndpointKind.GOOGLE:
            return GeminiOfficialAdapter(), override, True
        return OpenAICompatAdapter(), override, True
    if classify_credential(request.credential) is CredentialKind.GOOGLE_SHAPED:
        return GeminiOfficialAdapter(), GEMINI_DEFAULT_BASE_URL, True
    raise ConfigurationError(NON_GOOGLE_KEY_MESSAGE, provider="gemini", model=request.model)


def _validate_enterprise(extras: GenerationExtras, model: str) -> GenerationExtras:
    if not extras.enterprise_token.strip():
        raise ConfigurationError(MISSING_TOKEN_MESSAGE, provider="gemini", model=model)
    if not extras.enterprise_project_id.strip():
        raise ConfigurationError(MISSING_PROJECT_MESSAGE, provider="gemini", model=model)
    if not extras.enterprise_location.strip():
        return extras.model_copy(update={"enterprise_location": GEMINI_ENTERPRISE_DEFAULT_LOCATION})
    return extras


async def generate_response(
    model: str,
    history: Sequence[Message],
    new_text: str,
    on_chunk: ChunkCallback,
    credential: Optional[str] = None,
    wants_stream: bool = True,
    images: Optional[Sequence[str]] = None,
    endpoint_override: Optional[str] = None,
    provider: str = "openai",
    cancel_token: Optional[CancellationToken] = None,
    extras: Union[GenerationExtras, Dict[str, Any], None] = None,
    *,
    timeout_seconds: Optional[float] = None,
    retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
) -> None:
    """Generate a reply for ``new_text`` and deliver it through ``on_chunk``.

    Parameters
    ----------
    model:
        Model identifier sent to the backend.
    history:
        Prior turns, oldest first.
    new_text / images:
        The new user turn; empty image entries are dropped.
    on_chunk:
        Called synchronously with each non-empty text chunk, in order. A
        non-streaming call delivers exactly one chunk.
    credential:
        API key (or proxy key). Falls back to the environment.
    wants_stream:
        Streaming preference; adapters may downgrade it.
    endpoint_override:
        Custom base URL.
    provider:
        ``"gemini"`` or any OpenAI-family tag.
    cancel_token:
        Cancels network I/O, timeouts and retry sleeps; surfaces as
        :class:`CancelledError`.
    extras:
        :class:`GenerationExtras` or its (camelCase) mapping.
    timeout_seconds:
        Per-attempt bound. Gemini routes default to ``GEMINI_TIMEOUT_MS`` or
        120 s; OpenAI-family calls are unbounded unless set.

    Raises
    ------
    ConfigurationError
        Missing credential, enterprise token/project, or a non-Google key
        without an endpoint override.
    ProviderError
        Adapter failure after retries.
    CancelledError
        The token fired.
    """
    family = "gemini" if (provider or "").strip().lower() == "gemini" else "openai"
    resolved_extras = _coerce_extras(extras)
    enterprise = family == "gemini" and resolved_extras.enterprise_enabled
    override = (endpoint_override or "").strip() or None
    key = (credential or "").strip() or get_provider_config(family).get("api_key") or ""
    if not key and not enterprise:
        raise ConfigurationError(MISSING_KEY_MESSAGE, provider=family, model=model)
    if enterprise:
        resolved_extras = _validate_enterprise(resolved_extras, model)

    if family == "gemini":
        timeout = timeout_seconds if timeout_seconds is not None else get_timeout_config().generation_timeout_seconds
    else:
        timeout = timeout_seconds

    request = GenerationRequest(
        model=model,
        history=list(history or []),
        text=new_text or "",
        images=[u for u in (images or []) if u],
        stream=bool(wants_stream),
        provider=family,
        credential=key,
        cancel_token=cancel_token,
        extras=resolved_extras,
        timeout_seconds=timeout,
    )
    adapter, base_url, use_retry = _select_route(request, override, family)
    request.base_url = base_url

    ctx = LogContext(provider=family, model=model, route=adapter.route, stream=request.stream)
    log_event(
        logger,
        "route.select",
        ctx,
        adapter=type(adapter).__name__,
        retry=use_retry,
        base_url=base_url,
        enterprise=enterprise or None,
        images=len(request.images) or None,
    )

    generate: Callable[[ChunkSink], Any] = lambda sink: adapter.generate(request, sink)  # noqa: E731
    try:
        if use_retry:
            await retry_generation(generate, on_chunk, cancel_token, retry_policy, ctx)
        else:
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            await generate(ChunkSink(on_chunk, cancel_token))
    except CancelledError as exc:
        normalized_log_event(logger, "cancelled", ctx, phase="finalize", error_code="cancelled", reason=str(exc))
        raise


__all__ = ["generate_response"]
