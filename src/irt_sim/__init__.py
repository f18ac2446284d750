import logging
import sys

# Console handler used by every logger that has no handler of its own.
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.DEBUG)
formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
console_handler.setFormatter(formatter)

# Application loggers (using __name__) inherit from the root logger.
root_logger = logging.getLogger()
root_logger.setLevel(logging.INFO)
root_logger.addHandler(console_handler)

# Quiet chatty library loggers
logging.getLogger("numexpr").setLevel(logging.WARNING)
