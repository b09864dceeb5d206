"""
Runnable example application.

    uvicorn bitcrud.example.main:app
"""

from ..app import create_app
from .controllers import UserController, UserMixController

app = create_app(
    {
        "user": UserController(),
        "user-mix": UserMixController(),
    }
)


if __name__ == "__main__":
    import uvicorn

    from ..core.config import settings

    uvicorn.run(
        "bitcrud.example.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.api.debug,
        log_level="info",
        server_header=False,
    )
