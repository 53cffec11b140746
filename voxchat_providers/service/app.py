"""FastAPI bridge exposing the completion gateway to a browser chat UI.

Routes:
    GET  /api/health        liveness
    GET  /api/models        the model catalog
    POST /api/chat          blocking completion, ``{ok, text}``
    POST /api/chat/stream   NDJSON stream (see :mod:`.chat_stream`)

The gateway is created by :func:`create_app` and stored on ``app.state``;
routes obtain it through the :func:`get_gateway` dependency so tests can
substitute one built on ``httpx.MockTransport``. Nothing is built at import
time; servers load the factory (``uvicorn --factory ...:create_app``).
"""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from ..base.dto import ChatBodyDTO
from ..base.errors import GatewayError
from ..config.catalog import list_models
from ..config.defaults import SERVICE_CORS_DEFAULT_ORIGINS
from ..gateway import CompletionGateway
from .app_parts.app_core import build_call, get_gateway, http_error
from .chat_stream import iter_ndjson


def create_app(gateway: Optional[CompletionGateway] = None) -> FastAPI:
    """Build the bridge application around ``gateway`` (a new one if None)."""
    application = FastAPI(title="voxchat gateway", version="0.1.0")
    application.state.gateway = gateway or CompletionGateway()

    cors_origins_env = os.getenv("VOXCHAT_CORS_ORIGINS", SERVICE_CORS_DEFAULT_ORIGINS)
    allow_origins = [o.strip() for o in cors_origins_env.split(",") if o.strip()]
    application.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.get("/api/health")
    def health() -> Dict[str, Any]:
        return {"ok": True}

    @application.get("/api/models")
    def get_models() -> Dict[str, Any]:
        """List the selectable models (built-in catalog plus config file)."""
        return {"ok": True, "models": [m.to_dict() for m in list_models()]}

    @application.post("/api/chat")
    def post_chat(
        body: ChatBodyDTO, gw: CompletionGateway = Depends(get_gateway)
    ) -> Dict[str, Any]:
        """Run one blocking completion and return the full reply."""
        try:
            request, descriptor, credentials = build_call(body, stream=False)
            result = gw.complete(request, descriptor, credentials)
        except GatewayError as exc:
            raise http_error(exc) from exc
        return {"ok": True, "text": result.text}

    @application.post("/api/chat/stream")
    def post_chat_stream(
        body: ChatBodyDTO, gw: CompletionGateway = Depends(get_gateway)
    ) -> StreamingResponse:
        """Stream the reply as NDJSON events.

        Setup errors answer with an HTTP error status; failures after the
        first byte become a terminal ``error`` event.
        """
        try:
            request, descriptor, credentials = build_call(body, stream=True)
            chunks = gw.stream(request, descriptor, credentials)
        except GatewayError as exc:
            raise http_error(exc) from exc
        return StreamingResponse(iter_ndjson(chunks), media_type="application/x-ndjson")

    return application


__all__ = ["create_app"]
