import logging
from pathlib import Path

from chore_tracker.app import create_app
from chore_tracker.constants import LOG_DIR, LOG_FILE, DEFAULT_LOG_DIRECTORY_DEV


def setup_logging() -> Path:
    """Log to a file in LOG_DIR and to the console; returns the log file path"""
    log_dir = LOG_DIR
    # Create log directory if it doesn't exist (for development)
    try:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        log_path = Path(log_dir) / LOG_FILE
        log_path.touch(exist_ok=True)
    except PermissionError:
        # Fallback to local directory if no permissions for /var/log
        log_dir = DEFAULT_LOG_DIRECTORY_DEV
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        log_path = Path(log_dir) / LOG_FILE

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_path),
            logging.StreamHandler()  # Also log to console
        ]
    )
    return log_path


log_path = setup_logging()
logging.getLogger("chore_tracker").info(f"Logging to: {log_path}")

app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("chore_tracker.main:app", host="0.0.0.0", port=8000, reload=False)
