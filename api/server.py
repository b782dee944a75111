import uvicorn

from visit_planner.config.logger import get_logger
from visit_planner.config.settings import settings

logger = get_logger(__name__)


def main() -> None:
    logger.info("Server running on http://localhost:%s", settings.PORT)
    uvicorn.run("api.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
