"""
FastAPI HTTP Interface
======================
Exposes the support routing workflow over HTTP.

Endpoints:
  POST /session             → create a new thread, returns thread_id
  POST /chat                → send a message, returns the reply and the route taken
  GET  /history/{thread_id} → conversation history for a thread
  GET  /health              → liveness check

Run:
    uvicorn api:app --reload --port 8000

Example cURL flow:

    curl -X POST http://localhost:8000/session

    curl -X POST http://localhost:8000/chat \\
         -H "Content-Type: application/json" \\
         -d '{"thread_id": "<id>", "message": "완구는 어떤 KC인증을 받아야해?"}'
"""
import uuid
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from certagent import SupportSession

_session: SupportSession | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the graph on startup and close the checkpointer on shutdown.
    Checkpoints are kept in SQLite at CHECKPOINT_DB_PATH.
    """
    global _session
    load_dotenv()
    _session = SupportSession(in_memory=False)
    await _session.start()
    yield
    await _session.stop()
    _session = None


app = FastAPI(
    title="KC Certification Support",
    description="Routes certification questions to a specialist prompt.",
    lifespan=lifespan,
)


# ── Request / Response models ──────────────────────────────────────────────────

class ChatRequest(BaseModel):
    thread_id: str
    message: str


class ChatResponse(BaseModel):
    thread_id: str
    content: str
    next_representative: str
    route: str


class SessionResponse(BaseModel):
    thread_id: str


class HistoryMessage(BaseModel):
    role: str    # "user" | "assistant"
    content: str


class HistoryResponse(BaseModel):
    thread_id: str
    messages: list[HistoryMessage]


def _require_session() -> SupportSession:
    if not _session:
        raise HTTPException(status_code=503, detail="Agent not initialized.")
    return _session


# ── Endpoints ──────────────────────────────────────────────────────────────────

@app.post("/session", response_model=SessionResponse)
async def create_session():
    return SessionResponse(thread_id=str(uuid.uuid4()))


@app.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest):
    """
    Run one user turn.

      route = "certification"  → content is the certification specialist's answer
      route = "conversational" → content is the initial support reply
    """
    result = await _require_session().chat(request.thread_id, request.message)
    return ChatResponse(thread_id=request.thread_id, **result)


@app.get("/history/{thread_id}", response_model=HistoryResponse)
async def get_history(thread_id: str):
    history = await _require_session().get_history(thread_id)
    return HistoryResponse(
        thread_id=thread_id,
        messages=[HistoryMessage(**m) for m in history],
    )


@app.get("/health")
async def health():
    return {"status": "ok", "agent_ready": _session is not None}
