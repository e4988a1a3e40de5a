#!/usr/bin/env python3
"""
Splitwise API Client

Thin wrapper over the Splitwise v3.0 REST API covering the four calls this
tool needs. Authentication is a bearer token issued outside this tool.
"""

import logging
from datetime import datetime
from typing import Any

import requests

from .models import ExpenseRequest, Group, LedgerEntry, User

logger = logging.getLogger(__name__)


class SplitwiseAPIError(Exception):
    """Raised when a Splitwise call fails, including 200 responses that carry errors."""

    def __init__(self, status: int, message: str, body: str | None = None):
        super().__init__(f"Splitwise HTTP {status}: {message}")
        self.status = status
        self.body = body


def _flatten_errors(errors: Any) -> str:
    """Render Splitwise's ``errors`` object ({"base": [...], "cost": [...]}) as one line."""
    if isinstance(errors, dict):
        parts = []
        for key, messages in errors.items():
            if isinstance(messages, list):
                messages = ", ".join(str(m) for m in messages)
            parts.append(f"{key}: {messages}")
        return "; ".join(parts)
    if isinstance(errors, list):
        return ", ".join(str(e) for e in errors)
    return str(errors)


class SplitwiseClient:
    """Client for users, groups and expenses. Every request carries a timeout."""

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://secure.splitwise.com/api/v3.0",
        timeout: int = 30,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {access_token}"})

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        data: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.request(method, url, params=params, data=data, timeout=self.timeout)
        except requests.RequestException as e:
            raise SplitwiseAPIError(0, str(e)) from e

        if not response.ok:
            raise SplitwiseAPIError(response.status_code, response.reason or "request failed", response.text)

        try:
            payload: dict[str, Any] = response.json()
        except ValueError as e:
            raise SplitwiseAPIError(response.status_code, "response was not JSON", response.text) from e

        errors = payload.get("errors")
        if errors:
            raise SplitwiseAPIError(response.status_code, _flatten_errors(errors), response.text)
        return payload

    def get_current_user(self) -> User:
        payload = self._request("GET", "get_current_user")
        return User.from_dict(payload["user"])

    def get_groups(self) -> list[Group]:
        payload = self._request("GET", "get_groups")
        return [Group.from_dict(g) for g in payload.get("groups", [])]

    def get_expenses(self, dated_after: datetime, limit: int = 0, group_id: int | None = None) -> list[LedgerEntry]:
        """
        List expenses dated after the given time.

        Args:
            dated_after: Lower bound on the expense date
            limit: Maximum number of expenses; 0 asks Splitwise for all of them
            group_id: Restrict to one group; None lists every group and
                non-group expenses

        Returns:
            Ledger entries in API order
        """
        params: dict[str, Any] = {"dated_after": dated_after.isoformat(), "limit": limit}
        if group_id is not None:
            params["group_id"] = group_id

        payload = self._request("GET", "get_expenses", params=params)
        return [LedgerEntry.from_dict(e) for e in payload.get("expenses", [])]

    def create_expense(self, request: ExpenseRequest) -> LedgerEntry:
        """
        Create an expense.

        Returns:
            The ledger entry Splitwise created

        Raises:
            SplitwiseAPIError: On transport failure, non-2xx status, a
                response carrying validation errors, or an unparseable expense
        """
        form = request.to_form()
        logger.debug("create_expense form: %s", form)
        payload = self._request("POST", "create_expense", data=form)

        expenses = payload.get("expenses") or []
        if not expenses:
            raise SplitwiseAPIError(200, "create_expense returned no expense")
        try:
            return LedgerEntry.from_dict(expenses[0])
        except (KeyError, TypeError, ValueError) as e:
            raise SplitwiseAPIError(200, f"create_expense returned a malformed expense: {e!r}", str(expenses[0])) from e
