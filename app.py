import logging
import os
import socket

from de_browser.logging_config import configure_logging
from de_browser.ui.dash_app import create_dash_app

configure_logging()
logger = logging.getLogger("de_browser.app")

CONFIG_ROOT = os.getenv("DE_BROWSER_CONFIG_ROOT", "config")

app = create_dash_app(CONFIG_ROOT)
server = app.server


def find_free_port(start_port: int, attempts: int = 100) -> int:
    """First port in [start_port, start_port + attempts) nobody listens on."""
    for port in range(start_port, start_port + attempts):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            if s.connect_ex(("localhost", port)) != 0:
                return port
    return start_port


def main() -> None:
    preferred_port = int(os.getenv("PORT", "8051"))
    port = find_free_port(preferred_port)
    debug = os.getenv("DEBUG", "0") == "1"

    if port != preferred_port:
        logger.warning(
            "Preferred port taken",
            extra={"preferred_port": preferred_port, "port": port},
        )
    logger.info("Starting DE browser", extra={"port": port, "config_root": CONFIG_ROOT, "debug": debug})

    # ExplorerState is not thread-safe
    app.run(host="0.0.0.0", port=port, debug=debug, threaded=False)


if __name__ == "__main__":
    main()
