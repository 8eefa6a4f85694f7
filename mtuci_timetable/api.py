"""API client for the MTUCI timetable."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any
from urllib.parse import unquote

import requests

from .errors import AuthError, TransportError

BASE_URL = "https://apimtuci.ru"
WEB_ENDPOINT = "/web"
VALIDATE_ENDPOINT = "/api/web/token/validate"
DATA_ENDPOINT = "/api/web/get"

XSRF_COOKIE = "XSRF-TOKEN"
SESSION_COOKIE = "mtusi_tech_session"
TOKEN_COOKIE = "token"


def extract_cookie(resp: requests.Response, name: str) -> str:
    value = resp.cookies.get(name)
    if not value:
        raise AuthError(f"Handshake did not set the {name} cookie")
    return unquote(value)


class APIClient:
    def __init__(
        self,
        api_key: str = "",
        *,
        dump_json: bool = False,
        offline: bool = False,
        attempts: int = 1,
        json_dir: Path = Path("out/json"),
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.dump_json = dump_json
        self.offline = offline
        self.attempts = max(1, attempts)
        self.json_dir = json_dir
        self.session = session if session is not None else requests.Session()

    def _json_path(self, endpoint: str) -> Path:
        name = endpoint.strip("/").replace("/", "_") + ".json"
        return self.json_dir / name

    def request(self, method: str, endpoint: str, **kwargs: Any) -> requests.Response:
        url = BASE_URL + endpoint
        for attempt in range(self.attempts):
            last = attempt == self.attempts - 1
            try:
                resp = self.session.request(method, url, timeout=30, **kwargs)
            except requests.RequestException as exc:
                logging.warning("Request error: %s", exc)
                if last:
                    raise TransportError(f"Failed to reach {endpoint}: {exc}") from exc
                time.sleep(2**attempt)
                continue
            logging.debug("%s %s -> %s", method, endpoint, resp.status_code)
            if resp.status_code >= 500 and not last:
                time.sleep(2**attempt)
                continue
            if resp.status_code >= 400:
                raise TransportError(f"{method} {endpoint} returned {resp.status_code}")
            return resp
        raise TransportError(f"Failed to fetch {endpoint}")

    def login(self) -> None:
        """Run the cookie handshake; every step needs the previous step's cookies."""

        if not self.api_key:
            raise AuthError("No API key configured")
        resp = self.request("GET", WEB_ENDPOINT)
        xsrf = extract_cookie(resp, XSRF_COOKIE)
        extract_cookie(resp, SESSION_COOKIE)
        self.session.headers["X-XSRF-TOKEN"] = xsrf

        resp = self.request("POST", VALIDATE_ENDPOINT, params={"token": self.api_key})
        extract_cookie(resp, TOKEN_COOKIE)
        logging.info("Token accepted")

    def fetch(self) -> Any:
        """Return the raw timetable payload."""

        if self.offline:
            path = self._json_path(DATA_ENDPOINT)
            try:
                with path.open("r", encoding="utf-8") as f:
                    return json.load(f)
            except (OSError, ValueError) as exc:
                raise TransportError(f"Cannot read saved payload {path}: {exc}") from exc

        self.login()
        resp = self.request("GET", DATA_ENDPOINT)
        try:
            data = resp.json()
        except ValueError as exc:
            raise TransportError(f"{DATA_ENDPOINT} did not return JSON") from exc
        if self.dump_json:
            self.json_dir.mkdir(parents=True, exist_ok=True)
            with self._json_path(DATA_ENDPOINT).open("w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
        return data
