"""
Ingestion service: one refresh cycle from the sheet to the store.

retrieve -> unwrap envelope -> project rows -> build products -> replace

Any cycle error leaves the previous snapshot in place and is recorded on
the store. Nothing retries automatically; refresh is manual.
"""

from typing import Optional
import structlog

from config.feed import FeedConfig
from integrations.sheet_relays import FeedRetriever
from models.product import Product
from parsers.gviz_parser import unwrap_envelope, project_rows
from services.inventory_builder import build_inventory
from services.inventory_service import InventoryStore, get_inventory_store
from exceptions import AppError, ExternalServiceError

logger = structlog.get_logger(__name__)


class IngestionService:
    """
    Runs ingestion cycles against one configured sheet tab.

    Callers must not start overlapping cycles; the last replace wins.
    """

    def __init__(
        self,
        config: FeedConfig,
        store: InventoryStore,
        retriever: Optional[FeedRetriever] = None,
    ):
        self.config = config
        self.store = store
        self.retriever = retriever or FeedRetriever(config)

    async def refresh(self) -> list[Product]:
        """
        Fetch the sheet and replace the snapshot.

        Returns:
            The new products

        Raises:
            RetrievalError: No strategy could reach the sheet
            EnvelopeFormatError: Sheet reachable but response shape unexpected
            EmptyResultError: Response parsed but no product rows
            ExternalServiceError: Any other failure inside the cycle
        """
        logger.info(
            "ingestion_started",
            sheet_id=self.config.sheet_id,
            sheet_gid=self.config.sheet_gid
        )
        self.store.mark_loading()

        try:
            raw_text = await self.retriever.retrieve(self.config.feed_url)
            self.store.set_preview(self.retriever.preview)

            decoded = unwrap_envelope(raw_text)
            records = project_rows(decoded, self.config.header_caption)
            products = build_inventory(records, self.config.max_units_per_size)

            self.store.replace(products, rows_seen=len(records))

        except AppError as e:
            self.store.mark_error(e)
            logger.error("ingestion_failed", code=e.code, error=e.message)
            raise
        except Exception as e:
            error = ExternalServiceError(
                "google_sheets",
                f"Unexpected error while loading the sheet: {e}",
                code="INGESTION_FAILED",
                status_code=500,
                details={"type": type(e).__name__}
            )
            self.store.mark_error(error)
            logger.exception("ingestion_crashed", error=str(e), type=type(e).__name__)
            raise error from e

        logger.info("ingestion_completed", products=len(products))
        return products


# Singleton instance for convenience
_ingestion_service: Optional[IngestionService] = None

def get_ingestion_service() -> IngestionService:
    """Get or create IngestionService instance."""
    global _ingestion_service
    if _ingestion_service is None:
        _ingestion_service = IngestionService(
            config=FeedConfig.from_settings(),
            store=get_inventory_store(),
        )
    return _ingestion_service
