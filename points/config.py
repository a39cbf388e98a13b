import logging
import os

import yaml

ROOT_PATH = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CONFIG_FILE_PATH = os.getenv("POINTS_CONFIG_FILE", os.path.join(ROOT_PATH, "env.yaml"))

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def as_id_list(value) -> list[str]:
    """Accept a single identity or a YAML list of identities."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


class ApplicationConfig:
    CONTROLLER_IDS = as_id_list(data.get("CONTROLLER_IDS"))
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_PORT = int(data.get("API_PORT", 8000))
    API_ROOT_PATH = data.get("API_ROOT_PATH", "")
    CORS_ORIGINS = data.get("CORS_ORIGINS", ["*"])
    # Header carrying the caller identity already verified by the transport
    CALLER_HEADER = data.get("CALLER_HEADER", "X-Caller-Id")


def configure_logging(level: str = ApplicationConfig.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
