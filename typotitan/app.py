"""Application entry point and setup for the TypoTitan typing trainer."""

import logging
import sys

from PySide6.QtWidgets import QApplication

from typotitan.core.store import LocalStore
from typotitan.core.texts import CorpusTextProvider
from typotitan.ui.main_window import MainWindow


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def load_text_provider():
    """Return the corpus provider, or None if the bundled texts cannot be read."""
    try:
        return CorpusTextProvider()
    except (FileNotFoundError, ValueError) as e:
        logging.warning("Practice texts unavailable: %s", e)
        return None


def run() -> None:
    """Initialize the application, load resources, and start the main window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("TypoTitan")
    app.setApplicationDisplayName("TypoTitan")

    store = LocalStore()
    window = MainWindow(store=store, provider=load_text_provider())
    window.resize(1000, 640)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
