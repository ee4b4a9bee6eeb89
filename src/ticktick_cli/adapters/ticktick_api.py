"""TickTick API adapter - HTTP client for lists and tasks."""

import logging
import time
from urllib.parse import urlencode

import requests

from ticktick_cli.config import Config, Tokens, load_config
from ticktick_cli.core.projects import Project, ProjectData
from ticktick_cli.core.tasks import Task

logger = logging.getLogger(__name__)

API_BASE = "https://api.ticktick.com/open/v1"
OAUTH_AUTHORIZE_URL = "https://ticktick.com/oauth/authorize"
OAUTH_TOKEN_URL = "https://ticktick.com/oauth/token"
OAUTH_SCOPES = "tasks:read tasks:write"
USER_AGENT = "ticktick-cli"


class AuthenticationError(Exception):
    """Raised when authentication fails."""

    pass


class TickTickAPIError(Exception):
    """Raised when the API answers with a non-success status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Request failed: {status_code} - {body}")


class TickTickAdapter:
    """
    TickTick API adapter.

    Implements TaskRepository protocol. Handles authentication, token refresh,
    and API calls. No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, tokens: Tokens | None = None):
        self.config = config or load_config()
        self.tokens = tokens or Tokens.load()
        self._session = requests.Session()
        self._session.headers["User-Agent"] = USER_AGENT
        self._projects: list[Project] | None = None

    def _ensure_valid_token(self) -> None:
        """Refresh token if expired or expiring soon."""
        if not self.tokens.access_token:
            raise AuthenticationError("Not authenticated. Run 'tt auth login' first.")

        # Refresh if expiring within 5 minutes
        if self.tokens.expires_at and time.time() >= self.tokens.expires_at - 300:
            self._refresh_token()

    def _refresh_token(self) -> None:
        """Refresh the access token."""
        if not self.tokens.refresh_token:
            raise AuthenticationError("Session expired. Run 'tt auth login' again.")

        logger.debug("Refreshing TickTick access token")
        resp = self._session.post(
            OAUTH_TOKEN_URL,
            data={
                "client_id": self.config.ticktick_client_id,
                "client_secret": self.config.ticktick_client_secret,
                "refresh_token": self.tokens.refresh_token,
                "grant_type": "refresh_token",
            },
        )

        if resp.status_code != 200:
            raise AuthenticationError(f"Token refresh failed: {resp.text}")

        data = resp.json()
        self.tokens.access_token = data["access_token"]
        if "refresh_token" in data:
            self.tokens.refresh_token = data["refresh_token"]
        self.tokens.expires_at = int(time.time()) + data.get("expires_in", 3600)
        self.tokens.save()

    def _api_request(self, method: str, endpoint: str, body: dict | None = None):
        """Make authenticated API request. Returns parsed JSON or None."""
        self._ensure_valid_token()
        logger.debug(f"{method} {endpoint}")
        resp = self._session.request(
            method,
            f"{API_BASE}{endpoint}",
            headers={"Authorization": f"Bearer {self.tokens.access_token}"},
            json=body,
        )
        if resp.status_code == 401:
            raise AuthenticationError("Access token rejected. Run 'tt auth login' again.")
        if not resp.ok:
            raise TickTickAPIError(resp.status_code, resp.text)
        if not resp.content:
            return None
        return resp.json()

    # ============== Lists ==============

    def get_projects(self) -> list[Project]:
        """Get all lists (cached until a list is changed)."""
        if self._projects is None:
            data = self._api_request("GET", "/project") or []
            self._projects = [Project.from_api(p) for p in data]
        return self._projects

    def get_project(self, project_id: str) -> Project:
        return Project.from_api(self._api_request("GET", f"/project/{project_id}"))

    def get_project_data(self, project_id: str) -> ProjectData:
        data = self._api_request("GET", f"/project/{project_id}/data") or {}
        return ProjectData.from_api(data)

    def get_project_tasks(self, project_id: str) -> list[Task]:
        """Get tasks for a list."""
        return self.get_project_data(project_id).tasks or []

    def create_project(self, project: Project) -> Project:
        self._projects = None
        return Project.from_api(self._api_request("POST", "/project", project.to_api()))

    def update_project(self, project_id: str, project: Project) -> Project:
        self._projects = None
        return Project.from_api(self._api_request("POST", f"/project/{project_id}", project.to_api()))

    def delete_project(self, project_id: str) -> None:
        self._projects = None
        self._api_request("DELETE", f"/project/{project_id}")

    # ============== Tasks ==============

    def get_task(self, project_id: str, task_id: str) -> Task:
        return Task.from_api(self._api_request("GET", f"/project/{project_id}/task/{task_id}"))

    def create_task(self, task: Task) -> Task:
        return Task.from_api(self._api_request("POST", "/task", task.to_api()))

    def update_task(self, task_id: str, task: Task) -> Task:
        return Task.from_api(self._api_request("POST", f"/task/{task_id}", task.to_api()))

    def complete_task(self, project_id: str, task_id: str) -> None:
        self._api_request("POST", f"/project/{project_id}/task/{task_id}/complete")

    def delete_task(self, project_id: str, task_id: str) -> None:
        self._api_request("DELETE", f"/project/{project_id}/task/{task_id}")


def require_credentials(config: Config) -> None:
    if not config.ticktick_client_id or not config.ticktick_client_secret:
        raise AuthenticationError(
            "Missing TickTick credentials. Set TICKTICK_CLIENT_ID and "
            "TICKTICK_CLIENT_SECRET or add them to tt.conf"
        )


def authorization_url(config: Config, state: str) -> str:
    """Build the browser URL for the OAuth consent screen."""
    query = urlencode(
        {
            "client_id": config.ticktick_client_id,
            "scope": OAUTH_SCOPES,
            "state": state,
            "redirect_uri": config.redirect_uri,
            "response_type": "code",
        }
    )
    return f"{OAUTH_AUTHORIZE_URL}?{query}"


def exchange_code(config: Config, code: str) -> Tokens:
    """Trade an authorization code for tokens."""
    resp = requests.post(
        OAUTH_TOKEN_URL,
        data={
            "client_id": config.ticktick_client_id,
            "client_secret": config.ticktick_client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "scope": OAUTH_SCOPES,
            "redirect_uri": config.redirect_uri,
        },
    )

    if resp.status_code != 200:
        raise AuthenticationError(f"Token exchange failed: {resp.text}")

    data = resp.json()
    return Tokens(
        access_token=data["access_token"],
        refresh_token=data.get("refresh_token", ""),
        expires_at=int(time.time()) + data.get("expires_in", 3600),
    )
