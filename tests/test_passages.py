"""Passage CRUD for users and guests"""
from fastapi import status

from tests.conftest import register


class TestPassages:
    def test_guest_passage_end_to_end(self, client, guest_headers):
        content = "This is a test passage to verify that the cloud storage is working correctly."
        response = client.post(
            "/api/guest/passages", json={"title": "Test Passage", "content": content}, headers=guest_headers
        )
        assert response.status_code == status.HTTP_201_CREATED
        passage = response.json()["passage"]
        assert passage["title"] == "Test Passage"
        assert passage["word_count"] == len(content.split())

        listed = client.get("/api/guest/passages", headers=guest_headers).json()["passages"]
        assert [p["id"] for p in listed] == [passage["id"]]
        assert listed[0]["content"] == content

    def test_user_passage_default_title(self, client, auth_headers):
        response = client.post("/api/user/passages", json={"content": "untitled words here"}, headers=auth_headers)
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["passage"]["title"] == "Untitled Passage"

    def test_content_required(self, client, auth_headers):
        response = client.post("/api/user/passages", json={"title": "Empty"}, headers=auth_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Content is required"}

    def test_update_recomputes_word_count(self, client, auth_headers):
        passage_id = client.post(
            "/api/user/passages", json={"title": "Draft", "content": "one two"}, headers=auth_headers
        ).json()["passage"]["id"]

        response = client.put(
            f"/api/user/passages/{passage_id}", json={"content": "one two three four"}, headers=auth_headers
        )
        assert response.status_code == status.HTTP_200_OK
        updated = response.json()["passage"]
        assert updated["title"] == "Draft"
        assert updated["word_count"] == 4

        fetched = client.get(f"/api/user/passages/{passage_id}", headers=auth_headers).json()
        assert fetched["content"] == "one two three four"

    def test_delete(self, client, auth_headers):
        passage_id = client.post(
            "/api/user/passages", json={"content": "short lived"}, headers=auth_headers
        ).json()["passage"]["id"]
        response = client.delete(f"/api/user/passages/{passage_id}", headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK
        assert client.get(f"/api/user/passages/{passage_id}", headers=auth_headers).status_code == 404
        assert client.delete(f"/api/user/passages/{passage_id}", headers=auth_headers).status_code == 404

    def test_other_owner_gets_404(self, client, auth_headers, guest_headers):
        passage_id = client.post(
            "/api/user/passages", json={"content": "private words"}, headers=auth_headers
        ).json()["passage"]["id"]

        other = {"Authorization": f"Bearer {register(client, 'second', 'second@example.com').json()['token']}"}
        for headers, prefix in ((other, "/api/user"), (guest_headers, "/api/guest")):
            assert client.get(f"{prefix}/passages/{passage_id}", headers=headers).status_code == 404
            assert (
                client.put(f"{prefix}/passages/{passage_id}", json={"title": "mine"}, headers=headers).status_code
                == 404
            )
            assert client.delete(f"{prefix}/passages/{passage_id}", headers=headers).status_code == 404

        response = client.get(f"/api/user/passages/{passage_id}", headers=auth_headers)
        assert response.json()["content"] == "private words"

    def test_non_numeric_id_is_a_parameter_error(self, client, auth_headers):
        for method in ("get", "delete"):
            response = getattr(client, method)("/api/user/passages/abc", headers=auth_headers)
            assert response.status_code == status.HTTP_400_BAD_REQUEST
            assert response.json() == {"error": "Invalid request parameters"}

    def test_malformed_json_is_a_body_error(self, client, auth_headers):
        response = client.post(
            "/api/user/passages",
            content=b"{not json",
            headers={**auth_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Invalid request body"}
