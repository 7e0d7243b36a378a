"""Application entry point and setup for Story Typer."""

import logging
import sys

from PySide6.QtGui import QFont
from PySide6.QtWidgets import QApplication

from storytyper.core.config import EngineConfig
from storytyper.core.profile import ProfileStore
from storytyper.core.sentences import SentenceBank
from storytyper.ui.main_window import MainWindow


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def load_sentences(config: EngineConfig) -> SentenceBank:
    """Load the bundled corpus, falling back to its default when the configured language is missing."""
    sentences = SentenceBank()
    if config.default_language == sentences.default_language:
        return sentences
    if not sentences.has_language(config.default_language):
        logging.warning(
            "No sentences for configured language %r, using %r",
            config.default_language,
            sentences.default_language,
        )
        return sentences
    return SentenceBank(default_language=config.default_language)


def run() -> None:
    """Load the sentence corpus and profile, then start the main window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("Story Typer")
    app.setApplicationDisplayName("Story Typer")

    app_font = QFont()
    app_font.setPointSize(11)
    app.setFont(app_font)

    config = EngineConfig.from_env()
    sentences = load_sentences(config)
    profile_store = ProfileStore()
    logging.info(
        "Loaded %d language(s); profile at %s",
        len(sentences.all()),
        profile_store.file_path,
    )

    window = MainWindow(sentences=sentences, profile_store=profile_store, config=config)
    window.show()

    sys.exit(app.exec())
