"""Entry point for NetPulse application."""

import logging
import sys
from functools import partial

from PySide6.QtWidgets import QApplication

from netpulse.collector import default_prober
from netpulse.config import Settings, resolve_nodes
from netpulse.logging_config import configure_logging
from netpulse.session import SessionController
from netpulse.timefmt import format_clock, load_zone
from netpulse.ui.main_window import MainWindow

# Configure logging early
configure_logging()
logger = logging.getLogger(__name__)


def main():
    """Main entry point for the NetPulse application."""
    settings = Settings.from_env()

    try:
        nodes = resolve_nodes(settings)
    except (OSError, ValueError) as e:
        logger.error("Cannot load node configuration: %s", e)
        sys.exit(2)

    if settings.seed is not None:
        logger.info("Probe simulator seeded: seed=%d", settings.seed)

    tz = load_zone(settings.timezone)
    controller = SessionController(
        nodes,
        prober=default_prober(settings.seed),
        live_window_ms=settings.live_window_s * 1000,
        formatter=partial(format_clock, tz=tz),
    )

    app = QApplication(sys.argv)
    window = MainWindow(controller, interval_ms=settings.interval_ms, tz=tz)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
