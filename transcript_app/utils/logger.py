import os
import sys
import logging

logging_str = "[%(asctime)s] {%(pathname)s:%(lineno)d} %(levelname)s - %(message)s"
logging_dir = os.getenv(
    "LOG_DIR",
    os.path.join(os.path.dirname("/".join(os.path.abspath(__file__).split('/')[:-2])), "logs")
)
logging_path = os.path.join(logging_dir, "transcriptapp.log")
os.makedirs(logging_dir, exist_ok=True)

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format=logging_str,
    handlers=[
        logging.FileHandler(logging_path),
        logging.StreamHandler(sys.stdout)
    ]
)

# Third-party clients log every request at INFO
for noisy in ("httpx", "urllib3"):
    logging.getLogger(noisy).setLevel(logging.WARNING)

logging = logging.getLogger('transcriptapp')
