# debatecoach/main.py
# uvicorn debatecoach.main:app --host 0.0.0.0 --port 3000 --reload

import logging
import os
from contextlib import asynccontextmanager, contextmanager
from typing import Optional

from fastapi import Depends, FastAPI, File, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from debatecoach import coach
from debatecoach.config import Settings, configure_logging
from debatecoach.errors import (
    DebateCoachError,
    RequestValidationFailed,
    ServiceNotConfigured,
    TranscriptionFailed,
    UpstreamError,
)
from debatecoach.llm import LLMClient, UnconfiguredLLM
from debatecoach.middleware import JSONBodyLimitMiddleware
from debatecoach.schemas import (
    AskRequest,
    FeedbackMeta,
    FeedbackOut,
    FeedbackRequest,
    PrepRequest,
    ReplyOut,
    TopicsOut,
    TranscriptOut,
)
from debatecoach.uploads import receive_and_transcribe, save_upload

logger = logging.getLogger(__name__)


# ---------- Dependencies ----------
def get_llm(request: Request):
    return request.app.state.llm


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


@contextmanager
def completion_failures(label: str, tag: str):
    """Any completion failure surfaces as a route-specific 500 with the cause as details."""
    try:
        yield
    except (RequestValidationFailed, ServiceNotConfigured):
        raise
    except Exception as exc:
        logger.exception("[%s] %s", tag, exc)
        if isinstance(exc, DebateCoachError):
            details = exc.details or exc.message
        else:
            details = str(exc) or exc.__class__.__name__
        raise UpstreamError(label, details=details) from exc


# ---------- App factory ----------
def create_app(settings: Optional[Settings] = None, llm=None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    if llm is None:
        if settings.openai_api_key:
            llm = LLMClient(
                api_key=settings.openai_api_key,
                chat_model=settings.chat_model,
                transcribe_model=settings.transcribe_model,
            )
        else:
            logger.error("Missing OPENAI_API_KEY in environment/.env")
            llm = UnconfiguredLLM()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        os.makedirs(settings.tmp_dir, exist_ok=True)
        logger.info("DebateCoach backend ready on http://%s:%s", settings.host, settings.port)
        yield

    app = FastAPI(
        title="DebateCoach",
        description="Debate practice coach: topics, prep, live rebuttal, session feedback and STT",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.llm = llm

    app.add_middleware(JSONBodyLimitMiddleware, max_bytes=settings.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DebateCoachError)
    async def coach_error_handler(request: Request, exc: DebateCoachError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report body errors in the same {error, details} envelope as everything else."""
        errors = exc.errors()
        details = None
        if errors:
            first = errors[0]
            field_path = ".".join(str(loc) for loc in first["loc"] if loc != "body")
            details = f"{field_path}: {first['msg']}" if field_path else first["msg"]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request body", "details": details},
        )

    # ---------- Routes ----------
    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/topics", response_model=TopicsOut)
    def topics(llm=Depends(get_llm)):
        with completion_failures("Failed to generate topics", "topics"):
            return TopicsOut(topics=coach.generate_topics(llm))

    @app.post("/prep", response_model=ReplyOut)
    def prep(body: Optional[PrepRequest] = None, llm=Depends(get_llm)):
        with completion_failures("Prep failed", "prep"):
            return ReplyOut(reply=coach.prep_reply(llm, body or PrepRequest()))

    @app.post("/ask", response_model=ReplyOut)
    def ask(body: Optional[AskRequest] = None, llm=Depends(get_llm)):
        with completion_failures("Ask failed", "ask"):
            return ReplyOut(reply=coach.ask_reply(llm, body or AskRequest()))

    @app.post("/feedback", response_model=FeedbackOut)
    def feedback(body: Optional[FeedbackRequest] = None, llm=Depends(get_llm)):
        body = body or FeedbackRequest()
        with completion_failures("Feedback failed", "feedback"):
            reply, summary = coach.session_feedback(llm, body)

        return FeedbackOut(
            reply=reply,
            meta=FeedbackMeta(
                totalWpm=summary.total_wpm,
                totalWords=summary.total_words,
                totalMs=summary.total_ms,
                turns=summary.turn_count,
                mode=body.mode,
            ),
        )

    @app.post("/stt", response_model=TranscriptOut)
    def stt(
        audio: Optional[UploadFile] = File(None),
        llm=Depends(get_llm),
        settings: Settings = Depends(get_settings),
    ):
        stored = None
        try:
            if audio is not None:
                try:
                    stored = save_upload(audio.file, settings.tmp_dir, audio.filename, audio.content_type)
                except OSError as exc:
                    raise TranscriptionFailed(str(exc) or exc.__class__.__name__) from exc
            text = receive_and_transcribe(stored, llm, language="en")
        except TranscriptionFailed as exc:
            logger.exception("[stt] %s", exc.details)
            raise
        return TranscriptOut(text=text)

    # ---------- Static frontend (SPA fallback, registered last) ----------
    @app.get("/{full_path:path}", include_in_schema=False)
    def frontend(full_path: str):
        public = os.path.realpath(settings.public_dir)
        candidate = os.path.realpath(os.path.join(public, full_path))
        if full_path and candidate.startswith(public + os.sep) and os.path.isfile(candidate):
            return FileResponse(candidate)
        index = os.path.join(public, "index.html")
        if os.path.isfile(index):
            return FileResponse(index)
        raise DebateCoachError("Not found", status_code=404)

    return app


app = create_app()
