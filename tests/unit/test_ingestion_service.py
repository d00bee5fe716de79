"""
Unit tests for IngestionService.

The retriever is replaced with a stub so cycles run without network.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from services.ingestion_service import IngestionService
from models.inventory import IngestionState
from exceptions import EmptyResultError, EnvelopeFormatError, ExternalServiceError, RetrievalError
from tests.factories import GvizFactory, HEADER_ROW


class StubRetriever:
    """Returns canned text (or raises) and records the URLs asked for."""

    def __init__(self, text: str = "", error: Exception = None, preview: str = "preview..."):
        self.text = text
        self.error = error
        self.preview = None
        self._preview_value = preview
        self.urls = []

    async def retrieve(self, feed_url=None):
        self.urls.append(feed_url)
        if self.error is not None:
            raise self.error
        self.preview = self._preview_value
        return self.text


def run_refresh(service: IngestionService):
    return asyncio.run(service.refresh())


class TestRefreshSuccess:
    """Successful cycles"""

    def test_refresh_replaces_snapshot(self, feed_config, store, sample_gviz_text):
        retriever = StubRetriever(text=sample_gviz_text)
        service = IngestionService(feed_config, store, retriever=retriever)

        products = run_refresh(service)

        assert [p.name for p in products] == ["Vestido Flores", "Camisa Lino"]
        assert [p.name for p in store.get_products()] == ["Vestido Flores", "Camisa Lino"]
        assert store.get_status().state == IngestionState.IDLE

    def test_refresh_builds_sizes_and_units(self, feed_config, store, sample_gviz_text):
        service = IngestionService(feed_config, store, retriever=StubRetriever(text=sample_gviz_text))

        run_refresh(service)

        vestido, camisa = store.get_products()
        assert vestido.id == "p1"
        assert vestido.audience == "niña"
        assert [(b.size, b.total) for b in vestido.sizes] == [("2", 3), ("4", 3), ("6", 3)]
        assert camisa.id
        assert [(b.size, b.total) for b in camisa.sizes] == [("S", 1)]

    def test_refresh_uses_configured_url(self, feed_config, store, sample_gviz_text):
        retriever = StubRetriever(text=sample_gviz_text)
        service = IngestionService(feed_config, store, retriever=retriever)

        run_refresh(service)

        assert retriever.urls == [
            "https://docs.google.com/spreadsheets/d/test-sheet-id/gviz/tq?tqx=out:json&gid=123"
        ]

    def test_refresh_stores_preview(self, feed_config, store, sample_gviz_text):
        service = IngestionService(feed_config, store, retriever=StubRetriever(text=sample_gviz_text))

        run_refresh(service)

        assert store.preview == "preview..."

    def test_refresh_discards_local_toggles(self, feed_config, loaded_store, sample_gviz_text):
        loaded_store.toggle_unit_status("nina-1", 0, "nina-1-0-0")
        service = IngestionService(feed_config, loaded_store, retriever=StubRetriever(text=sample_gviz_text))

        run_refresh(service)

        assert loaded_store.get_status().local_changes == 0


class TestRefreshFailures:
    """Failed cycles leave the previous snapshot in place"""

    def test_retrieval_error_keeps_snapshot(self, feed_config, loaded_store):
        before = loaded_store.snapshot
        service = IngestionService(feed_config, loaded_store, retriever=StubRetriever(error=RetrievalError()))

        with pytest.raises(RetrievalError):
            run_refresh(service)

        assert loaded_store.snapshot == before
        status = loaded_store.get_status()
        assert status.state == IngestionState.ERROR
        assert status.error_code == "FEED_UNREACHABLE"

    def test_envelope_error(self, feed_config, loaded_store):
        before = loaded_store.snapshot
        service = IngestionService(
            feed_config, loaded_store, retriever=StubRetriever(text='{"table": {"rows": []}}')
        )

        with pytest.raises(EnvelopeFormatError):
            run_refresh(service)

        assert loaded_store.snapshot == before
        assert loaded_store.get_status().error_code == "FEED_FORMAT_ERROR"

    def test_header_only_sheet_is_empty_result(self, feed_config, loaded_store):
        before = loaded_store.snapshot
        text = GvizFactory.response([HEADER_ROW, [None] * 7])
        service = IngestionService(feed_config, loaded_store, retriever=StubRetriever(text=text))

        with pytest.raises(EmptyResultError):
            run_refresh(service)

        assert loaded_store.snapshot == before
        assert loaded_store.get_status().error_code == "FEED_EMPTY"

    def test_failure_keeps_local_toggles(self, feed_config, loaded_store):
        """Only a successful refresh drops overrides."""
        loaded_store.toggle_unit_status("nina-1", 0, "nina-1-0-0")
        service = IngestionService(feed_config, loaded_store, retriever=StubRetriever(error=RetrievalError()))

        with pytest.raises(RetrievalError):
            run_refresh(service)

        assert loaded_store.get_status().local_changes == 1

    def test_recovers_after_error(self, feed_config, store, sample_gviz_text):
        retriever = StubRetriever(error=RetrievalError())
        service = IngestionService(feed_config, store, retriever=retriever)
        with pytest.raises(RetrievalError):
            run_refresh(service)

        retriever.error = None
        retriever.text = sample_gviz_text
        run_refresh(service)

        status = store.get_status()
        assert status.state == IngestionState.IDLE
        assert status.error_code is None
        assert status.product_count == 2


def test_default_retriever_built_from_config(feed_config, store):
    service = IngestionService(feed_config, store)

    assert [s.name for s in service.retriever.strategies] == ["allorigins", "corsproxy"]


class TestUnexpectedFailure:
    """Errors outside the feed error model still end the cycle"""

    def test_unexpected_error_marks_store_error(self, feed_config, loaded_store):
        before = loaded_store.snapshot
        service = IngestionService(
            feed_config, loaded_store, retriever=StubRetriever(error=RuntimeError("boom"))
        )

        with pytest.raises(ExternalServiceError) as exc_info:
            run_refresh(service)

        assert exc_info.value.code == "INGESTION_FAILED"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert loaded_store.snapshot == before
        status = loaded_store.get_status()
        assert status.state == IngestionState.ERROR
        assert status.error_code == "INGESTION_FAILED"

    def test_startup_survives_unexpected_error(self):
        from fastapi.testclient import TestClient
        import main

        service = AsyncMock()
        service.refresh.side_effect = RuntimeError("boom")

        with patch.object(main.settings, "refresh_on_startup", True), \
                patch("services.ingestion_service.get_ingestion_service", return_value=service):
            with TestClient(main.app) as client:
                response = client.get("/")

        assert response.status_code == 200
        service.refresh.assert_awaited_once()
