import uvicorn
import constants
from logging_config import setup_logging

# Configure logging before uvicorn installs its own handlers
setup_logging(log_level=constants.LOG_LEVEL, log_file=constants.LOG_FILE)

from logging_config import get_logger

logger = get_logger(__name__)


def main():
    logger.info(f"Starting signaling relay on {constants.HOST}:{constants.PORT}")
    uvicorn.run("app:app", host=constants.HOST, port=constants.PORT, reload=constants.RELOAD, log_config=None)


if __name__ == "__main__":
    main()
