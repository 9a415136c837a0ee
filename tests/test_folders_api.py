"""Tests for the folder endpoints, including detach-then-delete."""


class TestCreate:

    def test_create_folder(self, client, make):
        user = make.user()
        resp = client.post("/api/folders", json={"name": "Reports", "folders_user_id": user.id})
        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["name"] == "Reports"
        assert data["documents"] == []

    def test_create_files_unfiled_documents(self, client, make):
        user = make.user()
        a = make.document(user, "a.pdf")
        b = make.document(user, "b.pdf")
        resp = client.post(
            "/api/folders",
            json={"name": "Reports", "folders_user_id": user.id, "document_ids": [a.id, b.id]},
        )
        assert resp.status_code == 201
        assert {d["name"] for d in resp.json()["data"]["documents"]} == {"a.pdf", "b.pdf"}

    def test_create_leaves_filed_and_foreign_documents_alone(self, client, make):
        user, other = make.user(), make.user()
        existing = make.folder(user, "Old")
        filed = make.document(user, "filed.pdf", folder=existing)
        foreign = make.document(other, "theirs.pdf")
        resp = client.post(
            "/api/folders",
            json={"name": "New", "folders_user_id": user.id, "document_ids": [filed.id, foreign.id]},
        )
        assert resp.json()["data"]["documents"] == []
        assert client.get(f"/api/documents/{filed.id}").json()["data"]["folder_document_id"] == existing.id

    def test_duplicate_name_returns_409(self, client, make):
        user = make.user()
        client.post("/api/folders", json={"name": "Reports", "folders_user_id": user.id})
        resp = client.post("/api/folders", json={"name": "Reports", "folders_user_id": user.id})
        assert resp.status_code == 409
        assert resp.json()["message"] == 'A folder with the name "Reports" already exists for this user.'

    def test_duplicate_name_does_not_file_documents(self, client, make):
        user = make.user()
        make.folder(user, "Reports")
        doc = make.document(user, "a.pdf")
        client.post(
            "/api/folders",
            json={"name": "Reports", "folders_user_id": user.id, "document_ids": [doc.id]},
        )
        assert client.get(f"/api/documents/{doc.id}").json()["data"]["folder_document_id"] is None


class TestRead:

    def test_get_folder_embeds_documents(self, client, make):
        user = make.user()
        folder = make.folder(user, "Reports")
        make.document(user, "a.pdf", folder=folder)
        resp = client.get(f"/api/folders/{folder.id}")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["type"] == "folder"
        assert [d["name"] for d in data["documents"]] == ["a.pdf"]

    def test_missing_folder_returns_404(self, client):
        resp = client.get("/api/folders/999")
        assert resp.status_code == 404
        assert resp.json()["error"] == "FOLDER_NOT_FOUND"

    def test_list_user_folders(self, client, make):
        user, other = make.user(), make.user()
        make.folder(user, "Mine")
        make.folder(other, "Theirs")
        body = client.get(f"/api/folders/user/{user.id}").json()
        assert [f["name"] for f in body["data"]] == ["Mine"]

    def test_check_names(self, client, make):
        user = make.user()
        make.folder(user, "Reports")
        body = client.post(
            f"/api/folders/user/{user.id}/check-names", json={"names": ["Reports", "Other"]}
        ).json()
        assert body["data"]["existingNames"] == ["Reports"]


class TestRename:

    def test_rename(self, client, make):
        user = make.user()
        folder = make.folder(user, "Old")
        resp = client.put(f"/api/folders/{folder.id}", json={"name": "New"})
        assert resp.status_code == 200
        assert resp.json()["data"]["name"] == "New"

    def test_rename_onto_existing_returns_409(self, client, make):
        user = make.user()
        make.folder(user, "Taken")
        folder = make.folder(user, "Old")
        resp = client.put(f"/api/folders/{folder.id}", json={"name": "Taken"})
        assert resp.status_code == 409


class TestDelete:

    def test_delete_detaches_documents(self, client, make):
        user = make.user()
        folder = make.folder(user, "Reports")
        d1 = make.document(user, "d1.pdf", folder=folder)
        d2 = make.document(user, "d2.pdf", folder=folder)
        folder_id, doc_ids = folder.id, [d1.id, d2.id]

        resp = client.delete(f"/api/folders/{folder_id}")
        assert resp.status_code == 200

        assert client.get(f"/api/folders/{folder_id}").status_code == 404
        for doc_id in doc_ids:
            got = client.get(f"/api/documents/{doc_id}")
            assert got.status_code == 200
            assert got.json()["data"]["folder_document_id"] is None

    def test_bulk_delete_detaches_documents(self, client, make):
        user = make.user()
        f1 = make.folder(user, "One")
        f2 = make.folder(user, "Two")
        keep = make.folder(user, "Keep")
        d1 = make.document(user, "d1.pdf", folder=f1)
        d2 = make.document(user, "d2.pdf", folder=keep)

        resp = client.request("DELETE", "/api/folders", json={"ids": [f1.id, f2.id]})
        assert resp.status_code == 200
        assert resp.json()["data"]["deletedCount"] == 2

        assert client.get(f"/api/documents/{d1.id}").json()["data"]["folder_document_id"] is None
        assert client.get(f"/api/documents/{d2.id}").json()["data"]["folder_document_id"] == keep.id
        assert client.get(f"/api/folders/{keep.id}").status_code == 200

    def test_delete_missing_folder_returns_404(self, client):
        assert client.delete("/api/folders/999").status_code == 404
