"""Main entry point for the ByteCourses API server."""

import uvicorn

from bytecourses.core.config import settings


def main() -> None:
    """Run the API server."""
    uvicorn.run(
        "bytecourses.main:app",
        host="0.0.0.0",
        port=settings.BACKEND_PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
