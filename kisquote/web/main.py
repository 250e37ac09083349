"""
Web service entry point.
"""

import os

import uvicorn


def kisquote_serve() -> None:
    """Run the FastAPI service under uvicorn."""

    host = os.getenv("KISQUOTE_HOST", "0.0.0.0")
    port = int(os.getenv("KISQUOTE_PORT", "8000"))
    reload = os.getenv("KISQUOTE_RELOAD", "false").lower() == "true"

    uvicorn.run(
        "kisquote.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


if __name__ == "__main__":
    kisquote_serve()
