"""Tests for the document CRUD endpoints."""

from tests.conftest import make_document


class TestCreate:

    def test_create_returns_201(self, client, make):
        user = make.user()
        resp = client.post("/api/documents", json=make_document("a.pdf", user.id))
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Document created successfully"
        assert body["data"]["name"] == "a.pdf"
        assert body["data"]["folder_document_id"] is None

    def test_duplicate_name_returns_409_with_name(self, client, make):
        user = make.user()
        client.post("/api/documents", json=make_document("a.pdf", user.id))
        resp = client.post("/api/documents", json=make_document("a.pdf", user.id))
        assert resp.status_code == 409
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "DUPLICATE_NAME"
        assert body["message"] == 'A document with the name "a.pdf" already exists for this user.'

    def test_same_name_for_different_users_is_allowed(self, client, make):
        first, second = make.user(), make.user()
        assert client.post("/api/documents", json=make_document("a.pdf", first.id)).status_code == 201
        assert client.post("/api/documents", json=make_document("a.pdf", second.id)).status_code == 201

    def test_unknown_owner_returns_404(self, client):
        resp = client.post("/api/documents", json=make_document("a.pdf", 999))
        assert resp.status_code == 404

    def test_folder_of_another_user_is_rejected(self, client, make):
        owner, other = make.user(), make.user()
        folder = make.folder(other, "Theirs")
        resp = client.post(
            "/api/documents",
            json=make_document("a.pdf", owner.id, folder_document_id=folder.id),
        )
        assert resp.status_code == 400

    def test_blank_name_is_rejected(self, client, make):
        user = make.user()
        resp = client.post("/api/documents", json=make_document("   ", user.id))
        assert resp.status_code == 422
        assert resp.json()["error"] == "VALIDATION_ERROR"


class TestRead:

    def test_get_by_id_expands_owner_and_folder(self, client, make):
        user = make.user()
        folder = make.folder(user, "Reports")
        doc = make.document(user, "q4.pdf", folder=folder)

        resp = client.get(f"/api/documents/{doc.id}")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["created_by"]["id"] == user.id
        assert data["belong_to_folder"]["name"] == "Reports"

    def test_missing_document_returns_404(self, client):
        resp = client.get("/api/documents/999")
        assert resp.status_code == 404
        assert resp.json()["error"] == "DOCUMENT_NOT_FOUND"

    def test_invalid_id_returns_400(self, client):
        resp = client.get("/api/documents/0")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid document ID"

    def test_list_user_documents(self, client, make):
        user, other = make.user(), make.user()
        make.document(user, "a.pdf")
        make.document(other, "b.pdf")
        body = client.get(f"/api/documents/user/{user.id}").json()
        assert [d["name"] for d in body["data"]] == ["a.pdf"]
        assert body["total"] == 1

    def test_empty_collection_reports_zero_pages(self, client):
        body = client.get("/api/documents").json()
        assert body["total"] == 0
        assert body["totalPages"] == 0

    def test_unfiled_documents(self, client, make):
        user = make.user()
        folder = make.folder(user, "Reports")
        make.document(user, "filed.pdf", folder=folder)
        make.document(user, "loose.pdf")
        body = client.get(f"/api/documents/user/{user.id}/without-folder").json()
        assert [d["name"] for d in body["data"]] == ["loose.pdf"]

    def test_documents_in_folder(self, client, make):
        user = make.user()
        folder = make.folder(user, "Reports")
        make.document(user, "filed.pdf", folder=folder)
        make.document(user, "loose.pdf")
        body = client.get(f"/api/documents/folder/{folder.id}").json()
        assert [d["name"] for d in body["data"]] == ["filed.pdf"]


class TestCheckNames:

    def test_reports_existing_names(self, client, make):
        user = make.user()
        make.document(user, "a.pdf")
        resp = client.post(
            f"/api/documents/user/{user.id}/check-names",
            json={"names": ["a.pdf", "b.pdf"]},
        )
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["existingNames"] == ["a.pdf"]
        assert data["totalChecked"] == 2
        assert data["duplicatesFound"] == 1

    def test_empty_names_is_rejected(self, client, make):
        user = make.user()
        resp = client.post(f"/api/documents/user/{user.id}/check-names", json={"names": []})
        assert resp.status_code == 422


class TestUpdate:

    def test_rename(self, client, make):
        user = make.user()
        doc = make.document(user, "a.pdf")
        resp = client.put(f"/api/documents/{doc.id}", json={"name": "b.pdf"})
        assert resp.status_code == 200
        assert resp.json()["data"]["name"] == "b.pdf"

    def test_rename_onto_existing_name_returns_409(self, client, make):
        user = make.user()
        make.document(user, "a.pdf")
        doc = make.document(user, "b.pdf")
        resp = client.put(f"/api/documents/{doc.id}", json={"name": "a.pdf"})
        assert resp.status_code == 409

    def test_explicit_null_folder_unfiles(self, client, make):
        user = make.user()
        folder = make.folder(user, "Reports")
        doc = make.document(user, "a.pdf", folder=folder)
        resp = client.put(f"/api/documents/{doc.id}", json={"folder_document_id": None})
        assert resp.json()["data"]["folder_document_id"] is None

    def test_omitted_fields_are_untouched(self, client, make):
        user = make.user()
        folder = make.folder(user, "Reports")
        doc = make.document(user, "a.pdf", folder=folder)
        resp = client.put(f"/api/documents/{doc.id}", json={"file_size": "2 MB"})
        data = resp.json()["data"]
        assert data["file_size"] == "2 MB"
        assert data["folder_document_id"] == folder.id

    def test_assign_folder(self, client, make):
        user = make.user()
        folder = make.folder(user, "Reports")
        a = make.document(user, "a.pdf")
        b = make.document(user, "b.pdf")
        resp = client.put(
            "/api/documents/assign-folder",
            json={"documentIds": [a.id, b.id], "folderId": folder.id},
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["updatedCount"] == 2
        body = client.get(f"/api/documents/folder/{folder.id}").json()
        assert body["total"] == 2


class TestDelete:

    def test_delete_one(self, client, make):
        user = make.user()
        doc_id = make.document(user, "a.pdf").id
        resp = client.delete(f"/api/documents/{doc_id}")
        assert resp.status_code == 200
        assert client.get(f"/api/documents/{doc_id}").status_code == 404

    def test_bulk_delete(self, client, make):
        user = make.user()
        ids = [make.document(user, f"{i}.pdf").id for i in range(3)]
        resp = client.request("DELETE", "/api/documents", json={"ids": ids[:2]})
        assert resp.status_code == 200
        body = resp.json()
        assert body["data"]["deletedCount"] == 2
        assert body["message"] == "2 document(s) deleted successfully"
        assert client.get(f"/api/documents/{ids[2]}").status_code == 200

    def test_bulk_delete_requires_ids(self, client):
        resp = client.request("DELETE", "/api/documents", json={"ids": []})
        assert resp.status_code == 422
