"""Application class with startup/shutdown lifecycle."""

from cowrite.config.settings import Settings, get_settings
from cowrite.notes.accumulator import NotesAccumulator, NotesGenerator
from cowrite.store import BaseStore, create_store
from cowrite.utils.logging import get_logger, configure_logging


logger = get_logger(__name__)


class Application:
    """
    Owns the long-lived collaborators of the API process.

    Handles:
    - Opening and closing the key-value store
    - Building the shared notes accumulator
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.store: BaseStore | None = None
        self.notes_accumulator: NotesAccumulator | None = None

    def _build_notes_generator(self) -> NotesGenerator | None:
        if not self.settings.anthropic_api_key:
            logger.warning("No Anthropic API key, note taking is disabled")
            return None

        from cowrite.agents.note_taker import LLMNotesGenerator

        return LLMNotesGenerator()

    async def startup(self) -> None:
        """Initialize resources on startup."""
        configure_logging(self.settings.log_level, self.settings.log_json)
        logger.info("Starting application...", store_backend=self.settings.store_backend)

        self.store = create_store(self.settings)
        await self.store.initialize()

        self.notes_accumulator = NotesAccumulator(
            self.store,
            self._build_notes_generator(),
        )
        logger.info("Application started")

    async def shutdown(self) -> None:
        """Release the store."""
        logger.info("Shutdown initiated...")
        if self.store is not None:
            await self.store.close()
        logger.info("Shutdown complete")
