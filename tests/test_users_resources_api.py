import unittest

from tests.base import ApiTestBase
from kb.domain.records import ResourceRecord


class UsersApiTests(ApiTestBase):
    def test_create_and_list_users(self):
        response = self.client.post("/api/users", json={"name": "Ada", "email": "ada@example.com"})
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["id"], 1)
        self.assertEqual(body["role"], "Viewer")

        admin = self.client.post(
            "/api/users",
            json={"name": "Root", "email": "root@example.com", "role": "Admin"},
        )
        self.assertEqual(admin.status_code, 201)
        self.assertEqual(admin.json()["id"], 2)

        listed = self.client.get("/api/users").json()
        self.assertEqual([u["email"] for u in listed], ["ada@example.com", "root@example.com"])

    def test_duplicate_email_is_conflict(self):
        self.client.post("/api/users", json={"name": "Ada", "email": "ada@example.com"})
        response = self.client.post("/api/users", json={"name": "Other", "email": "ada@example.com"})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["detail"], "Email already exists")

    def test_create_validation(self):
        missing = self.client.post("/api/users", json={"name": "Ada"})
        self.assertEqual(missing.status_code, 400)
        self.assertEqual(missing.json()["detail"], "Name and email are required")

        bad_email = self.client.post("/api/users", json={"name": "Ada", "email": "not-an-email"})
        self.assertEqual(bad_email.status_code, 400)
        self.assertEqual(bad_email.json()["detail"], "Invalid email format")

        bad_role = self.client.post("/api/users", json={"name": "Ada", "email": "a@b.c", "role": "Owner"})
        self.assertEqual(bad_role.status_code, 400)

    def test_update_user(self):
        self.client.post("/api/users", json={"name": "Ada", "email": "ada@example.com"})
        self.client.post("/api/users", json={"name": "Bob", "email": "bob@example.com"})

        response = self.client.put("/api/users/1", json={"role": "Editor"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["role"], "Editor")
        self.assertEqual(response.json()["email"], "ada@example.com")

        taken = self.client.put("/api/users/1", json={"email": "bob@example.com"})
        self.assertEqual(taken.status_code, 409)

        same = self.client.put("/api/users/1", json={"email": "ada@example.com"})
        self.assertEqual(same.status_code, 200)

    def test_update_and_delete_missing_user(self):
        self.assertEqual(self.client.put("/api/users/5", json={"name": "x"}).status_code, 404)
        response = self.client.delete("/api/users/5")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "User not found")
        self.assertEqual(self.client.delete("/api/users/nope").status_code, 400)

    def test_delete_user(self):
        self.client.post("/api/users", json={"name": "Ada", "email": "ada@example.com"})
        self.assertEqual(self.client.delete("/api/users/1").status_code, 204)
        self.assertEqual(self.client.get("/api/users").json(), [])


class ResourcesApiTests(ApiTestBase):
    def test_create_and_list_resources(self):
        self.client.post("/api/topics", json={"name": "Law", "content": "Body"})
        response = self.client.post(
            "/api/resources",
            json={"title": "Guide", "url": "https://example.com/guide.pdf", "type": "pdf", "topic_id": 1},
        )
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["id"], 1)
        self.assertEqual(body["topic_id"], 1)
        self.assertEqual(body["description"], "")

        listed = self.client.get("/api/resources").json()
        self.assertEqual([r["title"] for r in listed], ["Guide"])

    def test_create_requires_title_url_and_type(self):
        response = self.client.post("/api/resources", json={"title": "Guide", "url": "https://example.com"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Title, URL, and type are required")

    def test_stored_resource_without_title_is_listed_as_untitled(self):
        snapshot = self.store.load()
        snapshot.resources.append(ResourceRecord(id=1, url="https://example.com/v", type="video"))
        self.store.save(snapshot)

        listed = self.client.get("/api/resources").json()
        self.assertEqual(listed[0]["title"], "Untitled Resource")

    def test_update_resource(self):
        self.client.post(
            "/api/resources",
            json={"title": "Guide", "url": "https://example.com/a", "type": "article"},
        )
        response = self.client.put("/api/resources/1", json={"url": "https://example.com/b"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["url"], "https://example.com/b")
        self.assertEqual(response.json()["title"], "Guide")

        blank = self.client.put("/api/resources/1", json={"title": "  "})
        self.assertEqual(blank.status_code, 400)
        self.assertEqual(blank.json()["detail"], "Title cannot be empty")

    def test_missing_and_invalid_resource(self):
        response = self.client.delete("/api/resources/3")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "Resource not found")
        invalid = self.client.put("/api/resources/x", json={"title": "t"})
        self.assertEqual(invalid.status_code, 400)
        self.assertEqual(invalid.json()["detail"], "Invalid resource ID")

    def test_delete_resource(self):
        self.client.post("/api/resources", json={"title": "Guide", "url": "https://e.com", "type": "pdf"})
        self.assertEqual(self.client.delete("/api/resources/1").status_code, 204)
        self.assertEqual(self.client.get("/api/resources").json(), [])


if __name__ == "__main__":
    unittest.main()
