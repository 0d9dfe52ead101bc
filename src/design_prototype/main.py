"""
Design Prototype Service - HTTP entry point
Exposes one editing session: wireframe edits, generation and live preview.
"""

import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from injector import Injector
from pydantic import BaseModel, Field

from design_prototype.agents.graph import NodeNotFoundError
from design_prototype.agents.models import CodeTab, ComponentKind, Mode, Position, Size
from design_prototype.core import (
    ParseError,
    ValidationError,
    configure_logging,
    create_container,
    get_logger,
    get_settings,
)
from design_prototype.handlers import GenerationInProgressError, Session
from design_prototype.models.loader import GenerationError, ModelLoader
from design_prototype.monitoring import metrics_collector


logger = get_logger(__name__)


# Request Models
class ModeRequest(BaseModel):
    mode: Mode


class TextRequest(BaseModel):
    text: str


class AddComponentRequest(BaseModel):
    kind: ComponentKind
    x: float = 0.0
    y: float = 0.0
    text: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)
    size: Size | None = None


class UpdateComponentRequest(BaseModel):
    text: str | None = None
    size: Size | None = None
    position: Position | None = None
    properties: dict[str, Any] | None = None


class MoveRequest(BaseModel):
    dx: float
    dy: float


class ConnectRequest(BaseModel):
    source: str
    target: str


class ArtifactRequest(BaseModel):
    text: str


class GenerateRequest(BaseModel):
    mode: Mode | None = None
    text: str | None = None


def create_app(container: Injector | None = None) -> FastAPI:
    """Build the FastAPI app around one session resolved from the container."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = get_settings()
        configure_logging(settings.log_level, settings.json_logs)
        injector = container or create_container(settings)
        app.state.session = injector.get(Session)
        logger.info("service_ready", model=app.state.session.settings.gemini_model)
        yield
        ModelLoader.unload()
        logger.info("shutdown_complete")

    app = FastAPI(
        title="Design Prototype Service",
        description="Text or wireframe to html/css/javascript with live preview",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def session_of(request: Request) -> Session:
        return request.app.state.session

    # ------------------------------------------------------------------
    # Error mapping
    # ------------------------------------------------------------------

    @app.exception_handler(GenerationInProgressError)
    async def in_progress_handler(request: Request, exc: GenerationInProgressError):
        return JSONResponse(status_code=409, content={"error": str(exc)})

    @app.exception_handler(GenerationError)
    async def generation_error_handler(request: Request, exc: GenerationError):
        return JSONResponse(status_code=502, content={"error": str(exc)})

    @app.exception_handler(ParseError)
    async def parse_error_handler(request: Request, exc: ParseError):
        return JSONResponse(
            status_code=422,
            content={"error": str(exc), "hint": "Please try again."},
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=422,
            content={"error": str(exc), "hint": "Please try again."},
        )

    @app.exception_handler(NodeNotFoundError)
    async def not_found_handler(request: Request, exc: NodeNotFoundError):
        return JSONResponse(status_code=404, content={"error": f"Unknown component: {exc.args[0]}"})

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    @app.get("/health")
    async def health(request: Request):
        session = session_of(request)
        return {
            "status": "healthy",
            "model": session.settings.gemini_model,
            "generation": session.state.status.value,
            "timestamp": time.time(),
        }

    @app.get("/state")
    async def state(request: Request):
        return session_of(request).snapshot()

    @app.put("/mode")
    async def set_mode(body: ModeRequest, request: Request):
        session_of(request).set_mode(body.mode)
        return {"mode": body.mode.value}

    @app.put("/text")
    async def set_text(body: TextRequest, request: Request):
        session_of(request).set_text(body.text)
        return {"length": len(body.text)}

    @app.post("/components", status_code=201)
    async def add_component(body: AddComponentRequest, request: Request):
        component = session_of(request).add_component(
            body.kind, body.x, body.y,
            text=body.text, properties=body.properties, size=body.size,
        )
        return component.model_dump(mode="json")

    @app.patch("/components/{component_id}")
    async def update_component(component_id: str, body: UpdateComponentRequest, request: Request):
        component = session_of(request).update_component(
            component_id,
            text=body.text, size=body.size, position=body.position, properties=body.properties,
        )
        return component.model_dump(mode="json")

    @app.post("/components/{component_id}/move")
    async def move_component(component_id: str, body: MoveRequest, request: Request):
        component = session_of(request).move_component(component_id, body.dx, body.dy)
        return component.model_dump(mode="json")

    @app.post("/components/{component_id}/select")
    async def select_component(component_id: str, request: Request):
        session_of(request).select_component(component_id)
        return {"selected_id": component_id}

    @app.delete("/components/{component_id}", status_code=204)
    async def delete_component(component_id: str, request: Request):
        session_of(request).delete_component(component_id)
        return Response(status_code=204)

    @app.post("/edges", status_code=201)
    async def connect(body: ConnectRequest, request: Request):
        edge = session_of(request).connect(body.source, body.target)
        return edge.model_dump(mode="json")

    @app.delete("/edges/{edge_id}", status_code=204)
    async def disconnect(edge_id: str, request: Request):
        session_of(request).disconnect(edge_id)
        return Response(status_code=204)

    @app.put("/artifacts/{tab}")
    async def edit_artifact(tab: CodeTab, body: ArtifactRequest, request: Request):
        session_of(request).edit_artifact(tab, body.text)
        return {"tab": tab.value, "length": len(body.text)}

    @app.post("/generate")
    async def generate(body: GenerateRequest, request: Request):
        artifacts = await session_of(request).generate(body.mode, body.text)
        return artifacts.model_dump(mode="json")

    @app.get("/preview", response_class=HTMLResponse)
    async def preview(request: Request):
        return HTMLResponse(session_of(request).preview_document)

    @app.get("/metrics")
    async def metrics():
        return Response(metrics_collector.get_metrics(), media_type="text/plain; version=0.0.4")

    return app


def serve() -> None:
    """Entry point - run the HTTP server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(), host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    serve()
