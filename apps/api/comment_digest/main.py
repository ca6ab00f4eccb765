from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from comment_digest.core.config import GEMINI_MODEL, Settings, get_settings
from comment_digest.core.errors import register_exception_handlers
from comment_digest.core.logging import setup_logging
from comment_digest.services.llm.gemini_client import GeminiClient
from comment_digest.utils.ids import new_request_id

from comment_digest.api.v1.health import router as health_router
from comment_digest.api.v1.summarize import router as summarize_router

logger = setup_logging(get_settings().LOG_LEVEL)

def create_app(settings: Optional[Settings] = None, llm: Optional[GeminiClient] = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.APP_NAME)
    app.state.settings = settings
    app.state.llm = llm or GeminiClient(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def _body_limit(request: Request, call_next):
        declared = request.headers.get("content-length")
        if declared is not None:
            try:
                size = int(declared)
            except ValueError:
                return JSONResponse(status_code=400, content={"error": "Invalid Content-Length header"})
        elif request.method in ("POST", "PUT", "PATCH"):
            size = len(await request.body())
        else:
            size = 0

        if size > settings.MAX_BODY_BYTES:
            logger.info(f"Rejected {size} byte body on {request.url.path}")
            return JSONResponse(
                status_code=413,
                content={"error": f"Payload too large: maximum {settings.MAX_BODY_BYTES} bytes allowed per request"},
            )
        return await call_next(request)

    # outermost, so 413s from _body_limit carry the header too
    @app.middleware("http")
    async def _request_id(request: Request, call_next):
        request.state.request_id = new_request_id()
        response = await call_next(request)
        response.headers["X-Request-ID"] = request.state.request_id
        return response

    @app.on_event("startup")
    async def _startup():
        logger.info(f"Using Gemini model: {GEMINI_MODEL}")
        logger.info(f"Health check available at: http://localhost:{settings.PORT}/health")
        if not settings.GEMINI_API_KEY:
            logger.warning("GEMINI_API_KEY is not set; /summarize will fail until it is configured")

    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(summarize_router)

    return app

app = create_app()

def run():
    settings = get_settings()
    logger.info(f"Server running on port {settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)

if __name__ == "__main__":
    run()
