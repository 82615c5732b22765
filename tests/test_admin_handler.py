from flask import Blueprint, Flask

from pathagar.errors import NotFoundError
from pathagar.web.admin_handler import AdminHandler, BookFilters, register_routes


class FakeAdminService:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def _record(self, name, *args):
        self.calls.append((name, args))
        if self.error is not None:
            raise self.error

    def get_pending_requests(self, limit, offset):
        self._record("get_pending_requests", limit, offset)
        return []

    def approve_book_request(self, request_id, due_date):
        self._record("approve_book_request", request_id, due_date)

    def reject_book_request(self, request_id, reason):
        self._record("reject_book_request", request_id, reason)

    def get_requests_by_book(self, book_id):
        self._record("get_requests_by_book", book_id)
        return []

    def get_all_users(self, limit, offset):
        self._record("get_all_users", limit, offset)
        return []

    def adjust_success_score(self, user_id, amount, reason):
        self._record("adjust_success_score", user_id, amount, reason)

    def update_user_role(self, user_id, role):
        self._record("update_user_role", user_id, role)

    def get_system_stats(self):
        self._record("get_system_stats")
        return {"total_users": 3}

    def get_audit_logs(self, limit, offset):
        self._record("get_audit_logs", limit, offset)
        return []

    def get_all_books(self, limit, offset, filters):
        self._record("get_all_books", limit, offset, filters)
        return []

    def update_book_status(self, book_id, status):
        self._record("update_book_status", book_id, status)


def make_client(service):
    app = Flask(__name__)
    blueprint = Blueprint("api", __name__)
    register_routes(blueprint, AdminHandler(service))
    app.register_blueprint(blueprint, url_prefix="/api")
    return app.test_client()


def test_stats_returned():
    response = make_client(FakeAdminService()).get("/api/admin/stats")
    assert response.status_code == 200
    assert response.get_json() == {"success": True, "data": {"total_users": 3}}


def test_listings_use_page_of_100():
    service = FakeAdminService()
    client = make_client(service)
    client.get("/api/admin/requests/pending")
    client.get("/api/admin/users")
    client.get("/api/admin/audit-logs")
    assert service.calls == [
        ("get_pending_requests", (100, 0)),
        ("get_all_users", (100, 0)),
        ("get_audit_logs", (100, 0)),
    ]


def test_approve_requires_due_date():
    service = FakeAdminService()
    response = make_client(service).post("/api/admin/requests/r1/approve", json={})
    assert response.status_code == 400
    assert service.calls == []


def test_approve_passes_due_date():
    service = FakeAdminService()
    response = make_client(service).post(
        "/api/admin/requests/r1/approve", json={"due_date": "2024-05-01"}
    )
    assert response.get_json()["data"] == {"message": "request approved"}
    assert service.calls == [("approve_book_request", ("r1", "2024-05-01"))]


def test_reject_needs_json_body_but_not_reason():
    service = FakeAdminService()
    client = make_client(service)
    assert client.post("/api/admin/requests/r1/reject", data="").status_code == 400
    response = client.post("/api/admin/requests/r1/reject", json={})
    assert response.get_json()["data"] == {"message": "request rejected"}
    assert service.calls == [("reject_book_request", ("r1", ""))]


def test_adjust_score_rejects_zero_and_missing_reason():
    service = FakeAdminService()
    client = make_client(service)
    assert client.post("/api/admin/users/u1/score", json={"amount": 0, "reason": "x"}).status_code == 400
    assert client.post("/api/admin/users/u1/score", json={"amount": 5}).status_code == 400
    assert service.calls == []


def test_adjust_score_negative():
    service = FakeAdminService()
    response = make_client(service).post(
        "/api/admin/users/u1/score", json={"amount": -5, "reason": "late"}
    )
    assert response.status_code == 200
    assert service.calls == [("adjust_success_score", ("u1", -5, "late"))]


def test_update_role_and_book_status():
    service = FakeAdminService()
    client = make_client(service)
    client.put("/api/admin/users/u1/role", json={"role": "admin"})
    client.put("/api/admin/books/b1/status", json={"status": "available"})
    assert service.calls == [
        ("update_user_role", ("u1", "admin")),
        ("update_book_status", ("b1", "available")),
    ]


def test_all_books_filters_from_query():
    service = FakeAdminService()
    make_client(service).get("/api/admin/books?search=tag&status=reading")
    assert service.calls == [
        ("get_all_books", (100, 0, BookFilters(search="tag", category="", status="reading")))
    ]


def test_service_error_mapped():
    service = FakeAdminService(error=NotFoundError())
    response = make_client(service).get("/api/admin/books/b1/requests")
    assert response.status_code == 404
    assert response.get_json()["success"] is False