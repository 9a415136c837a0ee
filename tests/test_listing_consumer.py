"""Tests for ListingConsumer against a scripted transport.

The transport serves a fixed in-memory feed so paging, reconciliation
and bulk-delete partitioning can be checked call by call.
"""

import asyncio
import json
import math

import httpx
import pytest

from docfolio_client import ApiError, DocfolioClient, ItemKind, ListingConsumer
from docfolio_client.listing import merge_items, parse_selection_key, selection_key


def _doc(i, day):
    return {"id": i, "name": f"doc-{i}.pdf", "file_size": "1 KB", "document_user_id": 1,
            "folder_document_id": None, "created_at": f"2024-01-{day:02d}T00:00:00"}


def _folder(i, day):
    return {"id": i, "name": f"folder-{i}", "folders_user_id": 1,
            "created_at": f"2024-01-{day:02d}T00:00:00Z"}


class FakeServer:
    """Serves the combined feed from two lists and records every request."""

    def __init__(self, documents, folders):
        self.documents = list(documents)
        self.folders = list(folders)
        self.calls = []
        self.fail_with = None
        self.failing = set()

    def _feed(self, request):
        page = int(request.url.params.get("page", 1))
        limit = int(request.url.params.get("limit", 10))
        term = request.url.params.get("search", "").strip().lower()
        docs = [d for d in self.documents if term in d["name"].lower()]
        folders = [f for f in self.folders if term in f["name"].lower()]
        rows = merge_items(docs, folders)
        window = rows[(page - 1) * limit:page * limit]
        total = len(docs) + len(folders)
        return {
            "success": True,
            "message": "ok",
            "documents": [r.data for r in window if r.kind is ItemKind.DOCUMENT],
            "folders": [r.data for r in window if r.kind is ItemKind.FOLDER],
            "documentsTotal": len(docs),
            "foldersTotal": len(folders),
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": math.ceil(total / limit) if total else 1,
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.calls.append((request.method, request.url.path, dict(request.url.params), body))
        if self.fail_with or (request.method, request.url.path) in self.failing:
            message = self.fail_with or "Failed to delete folders"
            return httpx.Response(500, json={"success": False, "message": message})

        path = request.url.path
        if path.endswith("/documents-folders") or path.endswith("/search"):
            return httpx.Response(200, json=self._feed(request))
        if request.method == "DELETE" and path == "/api/documents":
            self.documents = [d for d in self.documents if d["id"] not in body["ids"]]
            return httpx.Response(200, json={"success": True, "message": "ok",
                                             "data": {"deletedCount": len(body["ids"])}})
        if request.method == "DELETE" and path == "/api/folders":
            self.folders = [f for f in self.folders if f["id"] not in body["ids"]]
            return httpx.Response(200, json={"success": True, "message": "ok",
                                             "data": {"deletedCount": len(body["ids"])}})
        if request.method == "DELETE" and path.startswith("/api/documents/"):
            doc_id = int(path.rsplit("/", 1)[1])
            self.documents = [d for d in self.documents if d["id"] != doc_id]
            return httpx.Response(200, json={"success": True, "message": "ok"})
        return httpx.Response(404, json={"success": False, "message": "Not found"})

    def calls_to(self, method, path):
        return [c for c in self.calls if c[0] == method and c[1] == path]


@pytest.fixture()
def server():
    # Folders 1..3 and documents 1..4; ids collide across kinds on purpose.
    return FakeServer(
        documents=[_doc(i, i) for i in range(1, 5)],
        folders=[_folder(i, i) for i in range(1, 4)],
    )


@pytest.fixture()
def consumer(server):
    client = DocfolioClient(base_url="http://test", transport=httpx.MockTransport(server.handler))
    return ListingConsumer(client, user_id=1, rows_per_page=3, debounce_seconds=0.5)


def run(coro):
    return asyncio.run(coro)


class TestRefresh:

    def test_rows_are_tagged_and_ordered(self, consumer):
        run(consumer.refresh())
        assert [(i.kind, i.id) for i in consumer.items] == [
            (ItemKind.FOLDER, 3), (ItemKind.FOLDER, 2), (ItemKind.FOLDER, 1),
        ]
        assert consumer.total_pages == 3
        assert consumer.error is None

    def test_plain_listing_is_used_without_search(self, consumer, server):
        run(consumer.refresh())
        assert server.calls[-1][1] == "/api/users/1/documents-folders"

    def test_failure_is_reported_and_state_reset(self, consumer, server):
        run(consumer.refresh())
        server.fail_with = "database unavailable"
        run(consumer.refresh())
        assert consumer.error == "database unavailable"
        assert consumer.items == []
        assert consumer.total_pages == 1
        assert consumer.loading is False


class TestReconciliation:

    def test_empty_page_returns_to_page_one(self, consumer, server):
        server.documents = []
        server.folders = server.folders[:1]
        run(consumer.set_page(3))
        assert consumer.page == 1
        assert [i.id for i in consumer.items] == [1]

    def test_set_rows_per_page_resets_page(self, consumer):
        run(consumer.set_page(2))
        run(consumer.set_rows_per_page(5))
        assert consumer.page == 1
        assert len(consumer.items) == 5

    def test_shrinking_page_count_clamps_to_last_page(self, consumer, server):
        run(consumer.set_page(3))
        assert [i.id for i in consumer.items] == [1]
        run(consumer.delete_item(ItemKind.DOCUMENT, 1))
        assert consumer.page == 2
        assert consumer.total_pages == 2
        assert [(i.kind, i.id) for i in consumer.items] == [
            (ItemKind.DOCUMENT, 4), (ItemKind.DOCUMENT, 3), (ItemKind.DOCUMENT, 2),
        ]


class TestSelection:

    def test_keys_disambiguate_kinds(self, consumer):
        consumer.toggle(ItemKind.DOCUMENT, 1)
        consumer.toggle(ItemKind.FOLDER, 1)
        assert consumer.selected == {"document-1", "folder-1"}
        consumer.toggle(ItemKind.DOCUMENT, 1)
        assert consumer.selected == {"folder-1"}

    def test_select_all_and_clear(self, consumer):
        run(consumer.refresh())
        consumer.select_all()
        assert consumer.selected == {"folder-3", "folder-2", "folder-1"}
        assert consumer.all_selected
        consumer.clear_selection()
        assert consumer.selected == set()

    def test_key_round_trip(self):
        assert parse_selection_key(selection_key(ItemKind.FOLDER, 12)) == (ItemKind.FOLDER, 12)


class TestBulkDelete:

    def test_mixed_selection_makes_one_call_per_kind(self, consumer, server):
        consumer.toggle(ItemKind.DOCUMENT, 2)
        consumer.toggle(ItemKind.DOCUMENT, 4)
        consumer.toggle(ItemKind.FOLDER, 1)

        assert run(consumer.delete_selected()) is True

        doc_calls = server.calls_to("DELETE", "/api/documents")
        folder_calls = server.calls_to("DELETE", "/api/folders")
        assert len(doc_calls) == 1 and sorted(doc_calls[0][3]["ids"]) == [2, 4]
        assert len(folder_calls) == 1 and folder_calls[0][3]["ids"] == [1]
        assert consumer.selected == set()
        # Refreshed after both deletes completed.
        assert server.calls[-1][1] == "/api/users/1/documents-folders"

    def test_documents_only_selection_skips_folder_call(self, consumer, server):
        consumer.toggle(ItemKind.DOCUMENT, 3)
        run(consumer.delete_selected())
        assert server.calls_to("DELETE", "/api/folders") == []

    def test_nothing_selected_is_a_no_op(self, consumer, server):
        assert run(consumer.delete_selected()) is False
        assert server.calls == []

    def test_failure_keeps_selection(self, consumer, server):
        consumer.toggle(ItemKind.FOLDER, 2)
        server.fail_with = "boom"
        assert run(consumer.delete_selected()) is False
        assert consumer.error == "boom"
        assert consumer.selected == {"folder-2"}

    def test_partial_failure_still_refreshes(self, consumer, server):
        server.failing.add(("DELETE", "/api/folders"))
        consumer.toggle(ItemKind.DOCUMENT, 1)
        consumer.toggle(ItemKind.FOLDER, 2)
        run(consumer.set_page(3))

        assert run(consumer.delete_selected()) is False

        assert [d["id"] for d in server.documents] == [2, 3, 4]
        assert consumer.error == "Failed to delete folders"
        assert consumer.selected == {"folder-2"}
        assert (ItemKind.DOCUMENT, 1) not in [(i.kind, i.id) for i in consumer.items]
        assert server.calls[-1][1] == "/api/users/1/documents-folders"


class TestSearch:

    def test_nothing_committed_inside_the_window(self, consumer, server):
        consumer.type_search("doc", now=10.0)
        assert run(consumer.commit_search(now=10.3)) is False
        assert server.calls == []

    def test_commit_after_quiescence_resets_page(self, consumer, server):
        run(consumer.set_page(2))
        consumer.type_search("d", now=10.0)
        consumer.type_search("doc-1", now=10.2)
        assert run(consumer.commit_search(now=10.6)) is False
        assert run(consumer.commit_search(now=10.8)) is True

        assert consumer.page == 1
        assert consumer.search_query == "doc-1"
        method, path, params, _ = server.calls[-1]
        assert path == "/api/users/1/search"
        assert params["search"] == "doc-1"
        assert [i.name for i in consumer.items] == ["doc-1.pdf"]

    def test_unchanged_query_does_not_refetch(self, consumer, server):
        consumer.type_search("doc", now=0.0)
        run(consumer.commit_search(now=1.0))
        calls = len(server.calls)
        consumer.type_search(" doc ", now=2.0)
        assert run(consumer.commit_search(now=3.0)) is False
        assert len(server.calls) == calls

    def test_blank_query_uses_plain_listing(self, consumer, server):
        consumer.type_search("doc", now=0.0)
        run(consumer.commit_search(now=1.0))
        consumer.type_search("   ", now=2.0)
        run(consumer.commit_search(now=3.0))
        assert server.calls[-1][1] == "/api/users/1/documents-folders"

    def test_settle_search_waits_then_commits(self, server):
        client = DocfolioClient(base_url="http://test", transport=httpx.MockTransport(server.handler))
        consumer = ListingConsumer(client, user_id=1, debounce_seconds=0.01)
        consumer.type_search("folder")
        assert run(consumer.settle_search()) is True
        assert consumer.search_query == "folder"


class TestClientErrors:

    def test_server_message_is_surfaced(self, server):
        client = DocfolioClient(base_url="http://test", transport=httpx.MockTransport(server.handler))
        with pytest.raises(ApiError) as excinfo:
            run(client.get_folder(1))
        assert excinfo.value.message == "Not found"
        assert excinfo.value.status_code == 404
