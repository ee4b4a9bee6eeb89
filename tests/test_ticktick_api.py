"""Tests for the TickTick API adapter."""

import time
from unittest.mock import MagicMock, patch

import pytest

from ticktick_cli.adapters.ticktick_api import (
    API_BASE,
    AuthenticationError,
    TickTickAdapter,
    TickTickAPIError,
    authorization_url,
    exchange_code,
    require_credentials,
)
from ticktick_cli.config import Config, Tokens
from ticktick_cli.core.projects import Project
from ticktick_cli.core.tasks import Task


def make_response(status_code=200, payload=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.text = text
    resp.content = b"{}" if payload is not None else b""
    resp.json.return_value = payload
    return resp


@pytest.fixture
def config():
    return Config(ticktick_client_id="cid", ticktick_client_secret="secret")


@pytest.fixture
def adapter(config):
    tokens = Tokens(access_token="tok", refresh_token="ref", expires_at=int(time.time()) + 3600)
    adapter = TickTickAdapter(config=config, tokens=tokens)
    adapter._session = MagicMock()
    return adapter


class TestTickTickAdapter:
    def test_requires_access_token(self, config):
        adapter = TickTickAdapter(config=config, tokens=Tokens())
        with pytest.raises(AuthenticationError, match="tt auth login"):
            adapter.get_projects()

    def test_get_projects(self, adapter):
        adapter._session.request.return_value = make_response(
            payload=[{"id": "p1", "name": "Work"}, {"id": "p2", "name": "Inbox", "kind": "INBOX"}]
        )
        projects = adapter.get_projects()

        assert [p.name for p in projects] == ["Work", "Inbox"]
        method, url = adapter._session.request.call_args[0]
        assert method == "GET"
        assert url == f"{API_BASE}/project"
        headers = adapter._session.request.call_args[1]["headers"]
        assert headers["Authorization"] == "Bearer tok"

    def test_projects_cached(self, adapter):
        adapter._session.request.return_value = make_response(payload=[{"id": "p1", "name": "W"}])
        adapter.get_projects()
        adapter.get_projects()
        assert adapter._session.request.call_count == 1

    def test_get_project_tasks(self, adapter):
        adapter._session.request.return_value = make_response(
            payload={"project": {"id": "p1"}, "tasks": [{"id": "t1", "title": "A", "dueDate": "2026-02-20"}]}
        )
        tasks = adapter.get_project_tasks("p1")
        assert tasks == [Task(title="A", id="t1", due_date="2026-02-20")]
        assert adapter._session.request.call_args[0][1] == f"{API_BASE}/project/p1/data"

    def test_project_without_tasks(self, adapter):
        adapter._session.request.return_value = make_response(payload={"project": {"id": "p1"}})
        assert adapter.get_project_tasks("p1") == []

    def test_create_task_sends_camel_case(self, adapter):
        adapter._session.request.return_value = make_response(
            payload={"id": "new", "title": "A", "projectId": "p1"}
        )
        created = adapter.create_task(Task(title="A", project_id="p1", is_all_day=True))

        assert created.id == "new"
        method, url = adapter._session.request.call_args[0]
        assert (method, url) == ("POST", f"{API_BASE}/task")
        assert adapter._session.request.call_args[1]["json"] == {
            "title": "A",
            "projectId": "p1",
            "isAllDay": True,
        }

    def test_complete_task_empty_body(self, adapter):
        adapter._session.request.return_value = make_response()
        assert adapter.complete_task("p1", "t1") is None
        assert adapter._session.request.call_args[0][1] == f"{API_BASE}/project/p1/task/t1/complete"

    def test_delete_task(self, adapter):
        adapter._session.request.return_value = make_response()
        adapter.delete_task("p1", "t1")
        assert adapter._session.request.call_args[0][0] == "DELETE"

    def test_error_status(self, adapter):
        adapter._session.request.return_value = make_response(500, text="boom")
        with pytest.raises(TickTickAPIError, match="Request failed: 500 - boom"):
            adapter.get_projects()

    def test_unauthorized(self, adapter):
        adapter._session.request.return_value = make_response(401, text="nope")
        with pytest.raises(AuthenticationError):
            adapter.get_projects()

    @patch("ticktick_cli.adapters.ticktick_api.Tokens.save")
    def test_refreshes_expiring_token(self, mock_save, adapter):
        adapter.tokens.expires_at = int(time.time()) + 60
        adapter._session.post.return_value = make_response(
            payload={"access_token": "fresh", "expires_in": 7200}
        )
        adapter._session.request.return_value = make_response(payload=[])

        adapter.get_projects()

        assert adapter.tokens.access_token == "fresh"
        assert adapter.tokens.refresh_token == "ref"
        mock_save.assert_called_once()
        headers = adapter._session.request.call_args[1]["headers"]
        assert headers["Authorization"] == "Bearer fresh"

    def test_refresh_failure(self, adapter):
        adapter.tokens.expires_at = int(time.time()) - 10
        adapter._session.post.return_value = make_response(400, text="invalid_grant")
        with pytest.raises(AuthenticationError, match="Token refresh failed"):
            adapter.get_projects()


class TestProjectEndpoints:
    def test_get_project(self, adapter):
        adapter._session.request.return_value = make_response(payload={"id": "p1", "name": "Work"})
        assert adapter.get_project("p1") == Project(name="Work", id="p1")
        assert adapter._session.request.call_args[0] == ("GET", f"{API_BASE}/project/p1")

    def test_get_project_data(self, adapter):
        adapter._session.request.return_value = make_response(
            payload={
                "project": {"id": "p1", "name": "Work"},
                "tasks": [{"id": "t1", "title": "A"}],
                "columns": [{"id": "c1", "name": "Doing"}],
            }
        )
        data = adapter.get_project_data("p1")
        assert data.project.name == "Work"
        assert [t.id for t in data.tasks] == ["t1"]
        assert data.columns == [{"id": "c1", "name": "Doing"}]

    def test_create_project(self, adapter):
        adapter._session.request.return_value = make_response(payload={"id": "p9", "name": "Errands"})
        created = adapter.create_project(Project(name="Errands", color="#F18181"))

        assert created.id == "p9"
        assert adapter._session.request.call_args[0] == ("POST", f"{API_BASE}/project")
        assert adapter._session.request.call_args[1]["json"] == {"name": "Errands", "color": "#F18181"}

    def test_update_project(self, adapter):
        adapter._session.request.return_value = make_response(payload={"id": "p1", "name": "Renamed"})
        updated = adapter.update_project("p1", Project(name="Renamed", id="p1"))

        assert updated.name == "Renamed"
        assert adapter._session.request.call_args[0] == ("POST", f"{API_BASE}/project/p1")

    def test_delete_project(self, adapter):
        adapter._session.request.return_value = make_response()
        adapter.delete_project("p1")
        assert adapter._session.request.call_args[0] == ("DELETE", f"{API_BASE}/project/p1")

    def test_changes_reset_project_cache(self, adapter):
        adapter._session.request.side_effect = [
            make_response(payload=[{"id": "p1", "name": "Work"}]),
            make_response(),
            make_response(payload=[]),
        ]
        assert len(adapter.get_projects()) == 1
        adapter.delete_project("p1")
        assert adapter.get_projects() == []


class TestOAuth:
    def test_authorization_url(self, config):
        url = authorization_url(config, state="abc")
        assert url.startswith("https://ticktick.com/oauth/authorize?")
        assert "client_id=cid" in url
        assert "state=abc" in url
        assert "scope=tasks%3Aread+tasks%3Awrite" in url

    @patch("ticktick_cli.adapters.ticktick_api.requests.post")
    def test_exchange_code(self, mock_post, config):
        mock_post.return_value = make_response(
            payload={"access_token": "a", "refresh_token": "r", "expires_in": 100}
        )
        tokens = exchange_code(config, "code123")
        assert tokens.access_token == "a"
        assert tokens.refresh_token == "r"
        assert tokens.expires_at > time.time()
        assert mock_post.call_args[1]["data"]["code"] == "code123"

    @patch("ticktick_cli.adapters.ticktick_api.requests.post")
    def test_exchange_code_failure(self, mock_post, config):
        mock_post.return_value = make_response(400, text="bad code")
        with pytest.raises(AuthenticationError, match="Token exchange failed"):
            exchange_code(config, "code123")

    def test_require_credentials(self):
        with pytest.raises(AuthenticationError, match="Missing TickTick credentials"):
            require_credentials(Config(ticktick_client_id="cid"))
        require_credentials(Config(ticktick_client_id="cid", ticktick_client_secret="s"))
