"""FastAPI application for the markview local JSON API."""

import secrets
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from .. import __version__
from ..core.errors import MarkviewError
from ..core.tokens import classify_token
from ..export.serialize import document_to_dict


class ParseRequest(BaseModel):
    source: str
    offset: int = 0


def create_app(runtime: Any, token: str | None = None, enable_cors: bool = False) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance with parser and builder
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Markview API",
        description="Local JSON API for parsing Markdown into rich-text documents",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            """Verify bearer token."""
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")
    else:

        async def verify_token() -> None:
            """No-op when auth is disabled."""
            return None

    @app.get("/health")
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.post("/parse")
    async def parse(
        request: ParseRequest, auth: None = Depends(verify_token)
    ) -> dict[str, Any]:
        """Parse Markdown source into a serialized document."""
        try:
            doc = runtime.parse(request.source, offset=request.offset)
        except MarkviewError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
        return document_to_dict(doc)

    @app.get("/classify")
    async def classify(
        token: str = Query(..., description="Code token to classify"),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Classify a code token as URL, file reference or plain text."""
        return classify_token(token, runtime.config.links.workspace_id)

    return app


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)
