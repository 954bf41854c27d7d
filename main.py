import uvicorn
from dotenv import load_dotenv

from app.core.config import get_settings
from app.core.request_logging import configure_logging

load_dotenv()


def main():
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
