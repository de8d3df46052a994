"""上传登记、目录列举与节点状态变更的集成测试。"""

from fastapi.testclient import TestClient

from app.packages.droply.crud.nodes import node_crud


def _upload(client: TestClient, account, imagekit, parent_id=None, user_id=None):
    body = {"userId": user_id or account.user_id, "imagekit": imagekit}
    if parent_id is not None:
        body["parentId"] = parent_id
    return client.post("/api/upload", json=body, headers=account.headers)


def _folder(client: TestClient, account, name, parent_id=None):
    return client.post(
        "/api/folders/create",
        json={"name": name, "userId": account.user_id, "parentId": parent_id},
        headers=account.headers,
    ).json()["folder"]


def _list(client: TestClient, account, **params):
    return client.get("/api/files", params={"userId": account.user_id, **params}, headers=account.headers)


def test_record_upload_with_full_metadata(client: TestClient, make_account):
    account = make_account()
    response = _upload(
        client,
        account,
        {
            "url": "https://cdn/x.jpg",
            "name": "x.jpg",
            "filePath": "/droply/x.jpg",
            "size": 1024,
            "fileType": "image/jpeg",
            "thumbnailUrl": "https://cdn/tr:n-thumb/x.jpg",
        },
    )

    assert response.status_code == 200
    node = response.json()
    assert node["isFolder"] is False
    assert node["size"] == 1024
    assert node["type"] == "image/jpeg"
    assert node["fileUrl"] == "https://cdn/x.jpg"
    assert node["thumbnailUrl"] == "https://cdn/tr:n-thumb/x.jpg"
    assert node["path"] == "/droply/x.jpg"
    assert node["parentId"] is None
    assert node["userId"] == account.user_id
    assert node["isStarred"] is False
    assert node["isTrash"] is False


def test_record_upload_defaults(client: TestClient, make_account):
    account = make_account()
    node = _upload(client, account, {"url": "https://cdn/blob"}).json()

    assert node["name"] == "Untitled"
    assert node["size"] == 0
    assert node["type"] == "image"
    assert node["thumbnailUrl"] is None
    assert node["path"] == f"/droply/{account.user_id}/Untitled"


def test_record_upload_requires_storage_url(client: TestClient, make_account):
    account = make_account()

    no_url = _upload(client, account, {"name": "x.jpg"})
    assert no_url.status_code == 400
    assert no_url.json()["msg"] == "Invalid file upload data"

    no_payload = client.post("/api/upload", json={"userId": account.user_id}, headers=account.headers)
    assert no_payload.status_code == 400


def test_record_upload_rejects_malformed_metadata(client: TestClient, make_account):
    account = make_account()

    for imagekit in (
        "garbage",
        ["https://cdn/x.jpg"],
        {"url": 123},
        {"url": ""},
        {"url": "https://cdn/x.jpg", "size": -1},
        {"url": "https://cdn/x.jpg", "size": "big"},
        {"url": "https://cdn/x.jpg", "name": {"nested": True}},
    ):
        response = _upload(client, account, imagekit)
        assert response.status_code == 400, imagekit
        assert response.json()["msg"] == "Invalid file upload data"

    assert _list(client, account).json() == []


def test_user_id_is_checked_before_metadata(client: TestClient, make_account):
    caller = make_account()
    other = make_account()

    mismatched = _upload(client, caller, {"url": "https://cdn/x", "size": -1}, user_id=other.user_id)
    assert mismatched.status_code == 401

    non_string = client.post(
        "/api/upload",
        json={"userId": 12345, "imagekit": "garbage"},
        headers=caller.headers,
    )
    assert non_string.status_code == 401


def test_record_upload_for_another_existing_user_is_rejected(client: TestClient, make_account):
    caller = make_account()
    victim = make_account()

    response = _upload(client, caller, {"url": "https://cdn/x.jpg"}, user_id=victim.user_id)
    assert response.status_code == 401
    assert _list(client, victim).json() == []


def test_record_upload_into_folder(client: TestClient, make_account):
    account = make_account()
    folder = _folder(client, account, "Album")

    node = _upload(client, account, {"url": "https://cdn/a.png"}, parent_id=folder["id"]).json()
    assert node["parentId"] == folder["id"]

    listed = _list(client, account, parentId=folder["id"]).json()
    assert [item["id"] for item in listed] == [node["id"]]


def test_record_upload_into_foreign_folder_is_not_found(client: TestClient, make_account):
    owner = make_account()
    caller = make_account()
    folder = _folder(client, owner, "Album")

    response = _upload(client, caller, {"url": "https://cdn/a.png"}, parent_id=folder["id"])
    assert response.status_code == 404


def test_example_scenario(client: TestClient, make_account):
    account = make_account()
    folder = _folder(client, account, "Vacation")
    assert folder["isFolder"] is True
    assert folder["parentId"] is None

    file_node = _upload(client, account, {"url": "https://cdn/x.jpg", "name": "x.jpg", "size": 1024}).json()
    assert file_node["size"] == 1024
    assert file_node["isFolder"] is False
    assert file_node["parentId"] is None

    root = _list(client, account)
    assert root.status_code == 200
    assert {item["id"] for item in root.json()} == {folder["id"], file_node["id"]}

    inside = _list(client, account, parentId=folder["id"])
    assert inside.json() == []


def test_root_listing_never_includes_nested_nodes(client: TestClient, make_account):
    account = make_account()
    folder = _folder(client, account, "Outer")
    nested = _folder(client, account, "Inner", parent_id=folder["id"])

    root_ids = {item["id"] for item in _list(client, account).json()}
    assert folder["id"] in root_ids
    assert nested["id"] not in root_ids

    empty_param_ids = {item["id"] for item in _list(client, account, parentId="").json()}
    assert empty_param_ids == root_ids


def test_listing_is_partitioned_by_owner(client: TestClient, make_account, db_session_fixture):
    owner = make_account()
    folder = _folder(client, owner, "Shared name")
    mine = _upload(client, owner, {"url": "https://cdn/mine.jpg"}, parent_id=folder["id"]).json()

    # 其他用户名下挂在同一 parent_id 上的脏数据不得出现在列表里
    for index in range(3):
        node_crud.create(
            db_session_fixture,
            {
                "name": f"stray-{index}",
                "path": f"/stray/{index}",
                "type": "image",
                "file_url": "https://cdn/stray.jpg",
                "user_id": f"user_other_{index}",
                "parent_id": folder["id"],
            },
        )

    listed = _list(client, owner, parentId=folder["id"]).json()
    assert [item["id"] for item in listed] == [mine["id"]]


def test_listing_requires_matching_user_id(client: TestClient, make_account):
    account = make_account()
    other = make_account()

    missing = client.get("/api/files", headers=account.headers)
    assert missing.status_code == 401

    mismatched = client.get("/api/files", params={"userId": other.user_id}, headers=account.headers)
    assert mismatched.status_code == 401

    anonymous = client.get("/api/files", params={"userId": account.user_id})
    assert anonymous.status_code == 401


def test_star_and_trash_toggles_with_views(client: TestClient, make_account):
    account = make_account()
    folder = _folder(client, account, "Deep")
    nested = _upload(client, account, {"url": "https://cdn/n.jpg"}, parent_id=folder["id"]).json()

    starred = client.patch(f"/api/files/{nested['id']}/star", headers=account.headers)
    assert starred.status_code == 200
    assert starred.json()["isStarred"] is True

    starred_view = _list(client, account, view="starred").json()
    assert [item["id"] for item in starred_view] == [nested["id"]]

    trashed = client.patch(f"/api/files/{folder['id']}/trash", headers=account.headers).json()
    assert trashed["isTrash"] is True
    assert [item["id"] for item in _list(client, account, view="trash").json()] == [folder["id"]]

    restored = client.patch(f"/api/files/{folder['id']}/trash", headers=account.headers).json()
    assert restored["isTrash"] is False
    unstarred = client.patch(f"/api/files/{nested['id']}/star", headers=account.headers).json()
    assert unstarred["isStarred"] is False


def test_rename(client: TestClient, make_account):
    account = make_account()
    node = _upload(client, account, {"url": "https://cdn/r.jpg", "name": "r.jpg"}).json()

    renamed = client.patch(f"/api/files/{node['id']}/rename", json={"name": " holiday.jpg "}, headers=account.headers)
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "holiday.jpg"

    blank = client.patch(f"/api/files/{node['id']}/rename", json={"name": "  "}, headers=account.headers)
    assert blank.status_code == 400


def test_mutations_on_foreign_nodes_are_not_found(client: TestClient, make_account):
    owner = make_account()
    intruder = make_account()
    node = _upload(client, owner, {"url": "https://cdn/secret.jpg"}).json()

    for method, suffix in (("PATCH", "/star"), ("PATCH", "/trash"), ("DELETE", "")):
        response = client.request(method, f"/api/files/{node['id']}{suffix}", headers=intruder.headers)
        assert response.status_code == 404, (method, suffix)

    assert [item["id"] for item in _list(client, owner).json()] == [node["id"]]


def test_delete_folder_removes_subtree(client: TestClient, make_account):
    account = make_account()
    top = _folder(client, account, "Top")
    middle = _folder(client, account, "Middle", parent_id=top["id"])
    leaf = _upload(client, account, {"url": "https://cdn/leaf.jpg"}, parent_id=middle["id"]).json()
    keep = _upload(client, account, {"url": "https://cdn/keep.jpg"}).json()

    response = client.delete(f"/api/files/{top['id']}", headers=account.headers)
    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert set(payload["deletedIds"]) == {top["id"], middle["id"], leaf["id"]}

    assert [item["id"] for item in _list(client, account).json()] == [keep["id"]]
    assert _list(client, account, parentId=middle["id"]).json() == []


def test_empty_trash(client: TestClient, make_account):
    account = make_account()
    folder = _folder(client, account, "Old")
    inner = _upload(client, account, {"url": "https://cdn/old.jpg"}, parent_id=folder["id"]).json()
    loose = _upload(client, account, {"url": "https://cdn/loose.jpg"}).json()
    survivor = _upload(client, account, {"url": "https://cdn/survivor.jpg"}).json()

    client.patch(f"/api/files/{folder['id']}/trash", headers=account.headers)
    client.patch(f"/api/files/{loose['id']}/trash", headers=account.headers)

    response = client.delete("/api/files/trash/empty", headers=account.headers)
    assert response.status_code == 200
    assert set(response.json()["deletedIds"]) == {folder["id"], inner["id"], loose["id"]}

    assert [item["id"] for item in _list(client, account).json()] == [survivor["id"]]
    assert _list(client, account, view="trash").json() == []


def test_whitespace_parent_id_is_not_root(client: TestClient, make_account):
    account = make_account()
    _folder(client, account, "Visible")

    assert _list(client, account, parentId=" ").json() == []
    upload = _upload(client, account, {"url": "https://cdn/a.png"}, parent_id=" ")
    assert upload.status_code == 404


def test_listing_failure_is_opaque_server_error(client: TestClient, make_account, monkeypatch):
    account = make_account()

    def boom(*args, **kwargs):
        raise RuntimeError("relation files does not exist at 10.0.0.5")

    monkeypatch.setattr(node_crud, "list_children", boom)
    response = _list(client, account)

    assert response.status_code == 500
    assert response.json()["msg"] == "Failed to fetch files"
    assert "10.0.0.5" not in response.text


def test_upload_failure_is_opaque_server_error(client: TestClient, make_account, monkeypatch):
    account = make_account()

    def boom(*args, **kwargs):
        raise RuntimeError("disk quota at 10.0.0.5")

    monkeypatch.setattr(node_crud, "create", boom)
    response = _upload(client, account, {"url": "https://cdn/a.png"})

    assert response.status_code == 500
    assert response.json()["msg"] == "Failed to save file information"
    assert "10.0.0.5" not in response.text
