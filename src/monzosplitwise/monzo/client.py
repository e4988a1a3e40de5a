#!/usr/bin/env python3
"""
Monzo API Client

Thin read-only wrapper over the Monzo REST API. Authentication is a bearer
access token that has already been issued; obtaining or refreshing it is
handled outside this tool.
"""

import logging
from datetime import datetime
from typing import Any

import requests

from .models import RETAIL_ACCOUNT_TYPE, Account, Transaction

logger = logging.getLogger(__name__)


class MonzoAPIError(Exception):
    """Raised when a Monzo API call fails or returns a non-2xx response."""

    def __init__(self, status: int, message: str, body: str | None = None):
        super().__init__(f"Monzo HTTP {status}: {message}")
        self.status = status
        self.body = body


class MonzoClient:
    """
    Client for the Monzo accounts and transactions endpoints.

    Every request carries a timeout; no retries are attempted.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://api.monzo.com",
        timeout: int = 30,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {access_token}"})

    def _get(self, path: str, params: dict[str, Any] | list[tuple[str, Any]] | None = None) -> dict[str, Any]:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise MonzoAPIError(0, str(e)) from e

        if response.status_code == 401:
            raise MonzoAPIError(401, "access token is missing, invalid or expired", response.text)
        if not response.ok:
            raise MonzoAPIError(response.status_code, response.reason or "request failed", response.text)

        try:
            payload: dict[str, Any] = response.json()
        except ValueError as e:
            raise MonzoAPIError(response.status_code, "response was not JSON", response.text) from e
        return payload

    def accounts(self) -> list[Account]:
        """List the accounts visible to the access token."""
        payload = self._get("accounts")
        return [Account.from_dict(a) for a in payload.get("accounts", [])]

    def select_account(self, account_id: str | None = None) -> Account:
        """
        Pick the account to reconcile.

        An explicit account id wins; otherwise an open current account is
        preferred over any other account type.

        Raises:
            MonzoAPIError: If no matching account is visible
        """
        accounts = self.accounts()
        if account_id:
            for account in accounts:
                if account.id == account_id:
                    return account
            raise MonzoAPIError(404, f"account {account_id} not found")

        open_accounts = [a for a in accounts if not a.closed] or accounts
        if not open_accounts:
            raise MonzoAPIError(404, "no accounts available")

        for account in open_accounts:
            if account.type == RETAIL_ACCOUNT_TYPE:
                return account
        return open_accounts[0]

    def transactions(
        self,
        account_id: str,
        since: datetime,
        before: datetime | None = None,
        limit: int = 100,
    ) -> list[Transaction]:
        """
        List transactions for one account with merchants expanded.

        Args:
            account_id: Monzo account id
            since: Inclusive lower bound of the window
            before: Exclusive upper bound of the window (open-ended if None)
            limit: Page size cap; pagination beyond it is not followed

        Returns:
            Transactions in the order the API returned them
        """
        params: list[tuple[str, Any]] = [
            ("account_id", account_id),
            ("expand[]", "merchant"),
            ("limit", limit),
            ("since", since.isoformat()),
        ]
        if before is not None:
            params.append(("before", before.isoformat()))

        payload = self._get("transactions", params)
        transactions = [Transaction.from_dict(t) for t in payload.get("transactions", [])]
        logger.debug("Monzo returned %d transactions for %s", len(transactions), account_id)
        return transactions
