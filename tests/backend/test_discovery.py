"""
Tests for autostart collection discovery.

These tests cover:
- Extension filtering and locator prefixing
- Storage order of the listing
- Bootstrap of a missing collection
- Permission failures
- Lock release
"""

import logging

import pytest
from unittest.mock import AsyncMock, patch

AUTOSTART = "/db/system/autostart"


class TestScriptListing:
    """Tests for listing scripts in /db/system/autostart."""

    @pytest.mark.asyncio
    async def test_only_xquery_extensions_are_returned(self, broker, store_script):
        """a.xq and c.xquery are scripts, b.txt is not."""
        from autostart.services.discovery import get_scripts_in_startup_collection

        await store_script(AUTOSTART, "a.xq")
        await store_script(AUTOSTART, "b.txt", "plain text")
        await store_script(AUTOSTART, "c.xquery")

        paths = await get_scripts_in_startup_collection(broker)

        assert paths == [
            "xmldb:exist:///db/system/autostart/a.xq",
            "xmldb:exist:///db/system/autostart/c.xquery",
        ]

    @pytest.mark.asyncio
    async def test_xqy_extension_is_accepted(self, broker, store_script):
        from autostart.services.discovery import get_scripts_in_startup_collection

        await store_script(AUTOSTART, "module.xqy")

        paths = await get_scripts_in_startup_collection(broker)

        assert paths == ["xmldb:exist:///db/system/autostart/module.xqy"]

    @pytest.mark.asyncio
    async def test_extension_match_is_case_sensitive(self, broker, store_script):
        from autostart.services.discovery import get_scripts_in_startup_collection

        await store_script(AUTOSTART, "UPPER.XQ")
        await store_script(AUTOSTART, "init.xq.bak")

        assert await get_scripts_in_startup_collection(broker) == []

    @pytest.mark.asyncio
    async def test_listing_keeps_storage_order(self, broker, store_script):
        """Scripts are not re-sorted."""
        from autostart.services.discovery import get_scripts_in_startup_collection

        for name in ["zeta.xq", "alpha.xq", "mid.xqy"]:
            await store_script(AUTOSTART, name)

        paths = await get_scripts_in_startup_collection(broker)

        assert [p.rsplit("/", 1)[1] for p in paths] == ["zeta.xq", "alpha.xq", "mid.xqy"]

    @pytest.mark.asyncio
    async def test_subcollections_are_not_scanned(self, broker, store_script):
        from autostart.services.discovery import get_scripts_in_startup_collection

        await store_script(AUTOSTART, "top.xq")
        await store_script(AUTOSTART + "/lib", "helper.xq")

        paths = await get_scripts_in_startup_collection(broker)

        assert paths == ["xmldb:exist:///db/system/autostart/top.xq"]

    @pytest.mark.asyncio
    async def test_skipped_documents_are_logged_at_debug(self, broker, store_script, caplog):
        from autostart.services.discovery import get_scripts_in_startup_collection

        await store_script(AUTOSTART, "notes.txt", "text")

        with caplog.at_level(logging.DEBUG, logger="autostart.services.discovery"):
            await get_scripts_in_startup_collection(broker)

        skipped = [r for r in caplog.records if "not an xquery script" in r.getMessage()]
        assert len(skipped) == 1
        assert skipped[0].levelno == logging.DEBUG

    @pytest.mark.asyncio
    async def test_read_lock_released_after_listing(self, broker, store_script):
        from autostart.services.discovery import get_scripts_in_startup_collection

        await store_script(AUTOSTART, "a.xq")

        await get_scripts_in_startup_collection(broker)

        assert not broker.locks.is_locked(AUTOSTART)


class TestMissingCollection:
    """Tests for the bootstrap path."""

    @pytest.mark.asyncio
    async def test_missing_collection_is_created_and_no_scripts_returned(self, broker, collection_doc):
        from autostart.services.discovery import get_scripts_in_startup_collection

        paths = await get_scripts_in_startup_collection(broker)

        assert paths == []
        doc = await collection_doc(AUTOSTART)
        assert doc is not None
        assert doc["owner"] == "SYSTEM"
        assert doc["group"] == "dba"

    @pytest.mark.asyncio
    async def test_existing_collection_does_not_bootstrap(self, broker, store_script):
        from autostart.services.discovery import get_scripts_in_startup_collection

        await store_script(AUTOSTART, "a.xq")

        with patch(
            "autostart.services.discovery.create_autostart_collection", new_callable=AsyncMock
        ) as mock_create:
            await get_scripts_in_startup_collection(broker)

        mock_create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_existing_collection_returns_nothing(self, broker, collection_doc):
        from autostart.services.bootstrap import create_autostart_collection
        from autostart.services.discovery import get_scripts_in_startup_collection

        await create_autostart_collection(broker)

        with patch(
            "autostart.services.discovery.create_autostart_collection", new_callable=AsyncMock
        ) as mock_create:
            assert await get_scripts_in_startup_collection(broker) == []

        mock_create.assert_not_awaited()


class TestPermissionDenied:
    """Tests for unreadable autostart collections."""

    @pytest.mark.asyncio
    async def test_permission_denied_is_logged_and_returns_empty(self, broker, store_script, caplog):
        from autostart.services.discovery import get_scripts_in_startup_collection

        await store_script(AUTOSTART, "a.xq")
        await broker.collections.update_one({"_id": AUTOSTART}, {"$set": {"mode": 0o700}})
        broker.subject = broker.security_manager.get_guest_subject()

        with caplog.at_level(logging.ERROR):
            paths = await get_scripts_in_startup_collection(broker)

        assert paths == []
        assert any("no read access" in r.getMessage() for r in caplog.records)
        assert not broker.locks.is_locked(AUTOSTART)
