import uvicorn

from .config import settings


def main():
    # To run without this entry point: uvicorn cookbook.app:app --reload
    uvicorn.run(
        "cookbook.app:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
