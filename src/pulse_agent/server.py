"""FastAPI application exposing the scripted responder."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .config import configure_logging, load_config, registry_from
from .session import EmptyMessageError, SessionClosedError, SessionRegistry


# -----------------------------
# Pydantic request/response
# -----------------------------
class ChatRequest(BaseModel):
    identity: str = Field(default="default", description="Conversation namespace/key.")
    message: str = Field(..., min_length=1)


class ContextModel(BaseModel):
    goals: List[str] = Field(default_factory=list)
    channels: List[str] = Field(default_factory=list)
    brand_traits: List[str] = Field(default_factory=list)
    pain_points: List[str] = Field(default_factory=list)
    budget: Optional[str] = None
    timeline: Optional[str] = None
    contact: Optional[str] = None


class ChatResponse(BaseModel):
    reply: str
    tags: List[str]
    intent: str
    context: ContextModel
    insights: List[str]
    delay_ms: int


class MessageModel(BaseModel):
    id: str
    sender: str
    text: str
    timestamp: int
    tags: List[str] = Field(default_factory=list)


class SessionResponse(BaseModel):
    identity: str
    messages: List[MessageModel]
    context: ContextModel
    insights: List[str]


# -----------------------------
# App factory
# -----------------------------
def create_app(
    config_path: Optional[str] = None,
    sessions: Optional[SessionRegistry] = None,
) -> FastAPI:
    cfg = load_config(config_path)
    configure_logging(cfg)

    # CORS
    cors_origins = cfg.get("server", {}).get("cors_origins", ["*"])

    sessions = sessions if sessions is not None else registry_from(cfg)
    agent_name = cfg.get("agent", {}).get("name", "PulsePilot")

    app = FastAPI(title=f"{agent_name} Responder", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"ok": True, "sessions": len(sessions)}

    @app.get("/config")
    def get_config() -> JSONResponse:
        return JSONResponse(dict(cfg))

    @app.post("/chat", response_model=ChatResponse)
    def chat(req: ChatRequest):
        convo = sessions.get_or_create(req.identity)
        try:
            pending = convo.submit(req.message)
        except EmptyMessageError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except SessionClosedError as e:
            raise HTTPException(status_code=409, detail=str(e))

        # The client animates the typing delay; the reply is recorded right away.
        pending.deliver()
        return ChatResponse(
            reply=pending.reply,
            tags=pending.tags,
            intent=pending.intent,
            context=ContextModel(**convo.context.to_dict()),
            insights=convo.insights,
            delay_ms=pending.delay_ms,
        )

    @app.get("/sessions/{identity}", response_model=SessionResponse)
    def get_session(identity: str):
        convo = sessions.get(identity)
        if convo is None:
            raise HTTPException(status_code=404, detail=f"No conversation for {identity!r}.")
        return SessionResponse(
            identity=identity,
            messages=[MessageModel(**m.to_dict()) for m in convo.history],
            context=ContextModel(**convo.context.to_dict()),
            insights=convo.insights,
        )

    @app.delete("/sessions/{identity}")
    def drop_session(identity: str) -> Dict[str, Any]:
        return {"dropped": sessions.drop(identity)}

    return app
