import logging
import os
import sys
from dotenv import load_dotenv

load_dotenv(override=True)

from gateway.config import load_config
from gateway.logger import GatewayLogger

def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    path = argv[0] if argv else os.getenv("GATEWAY_CONFIG", "gateway.json")
    level = os.getenv("GATEWAY_LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"
    logger = GatewayLogger(os.getenv("GATEWAY_LOG_PATH") or None, level=level)

    config = load_config(path)
    logger.listeners(config)
    for i, entry in enumerate(config.acls):
        logger.acl_entry(i, entry)
    return 0

if __name__ == "__main__":
    sys.exit(main())
