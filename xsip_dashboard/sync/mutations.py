"""
Administrative commands against the carrier backend.

Each command is followed by a re-fetch of the resources it affects, so the
change shows up through the normal snapshot path rather than by editing
the rendered tables directly.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Callable, Mapping
from typing import Any

from xsip_dashboard.api.models import (
    BalanceAdjustment,
    Resource,
    SubscriberCreate,
    SubscriberLevel,
)
from xsip_dashboard.backend.client import balance_path, subscriber_path
from xsip_dashboard.core.config import DEFAULT_TENANT
from xsip_dashboard.core.exceptions import BackendError, SubscriberValidationError
from xsip_dashboard.core.logging import EventType, get_logger, log_event
from xsip_dashboard.core.protocols import BackendTransport
from xsip_dashboard.sync.fetcher import SnapshotFetcher
from xsip_dashboard.view.activity import ActivityLog
from xsip_dashboard.view.dom import Document
from xsip_dashboard.view.modals import ADD_SUBSCRIBER, EDIT_BALANCE, ModalController

logger = get_logger(__name__)

ADD_SUBSCRIBER_FORM = "form-add-sub"

# Create-dialog inputs kept across a failed attempt. The password is not
# written back into served markup.
ADD_SUBSCRIBER_RETAINED_INPUTS = {"id": "f-id", "username": "f-name", "balance": "f-bal"}

ConfirmCallback = Callable[[str], bool]


def parse_balance(value: Any) -> float:
    """Initial balance from form input; anything unparsable is 0."""
    try:
        balance = float(value)
    except (TypeError, ValueError):
        return 0.0
    return balance if math.isfinite(balance) else 0.0


def parse_amount(value: Any) -> float:
    """Balance adjustment amount. Any finite number, either sign.

    Raises:
        SubscriberValidationError: ``value`` is not a finite number.
    """
    try:
        amount = float(value)
    except (TypeError, ValueError) as e:
        raise SubscriberValidationError("amount", value=value, reason="not a number") from e
    if not math.isfinite(amount):
        raise SubscriberValidationError("amount", value=value, reason="not a finite number")
    return amount


def _required_text(fields: Mapping[str, Any], name: str) -> str:
    value = fields.get(name)
    if value is None:
        raise SubscriberValidationError(name, reason="is required")
    return str(value).strip()


class MutationClient:
    """Create, delete and re-balance subscribers, then refresh the view."""

    def __init__(
        self,
        client: BackendTransport,
        fetcher: SnapshotFetcher,
        modals: ModalController,
        activity: ActivityLog,
        document: Document,
        *,
        default_tenant: str = DEFAULT_TENANT,
    ) -> None:
        self._client = client
        self._fetcher = fetcher
        self._modals = modals
        self._activity = activity
        self._document = document
        self._default_tenant = default_tenant

    async def _refresh(self, *resources: Resource) -> None:
        await asyncio.gather(*(self._fetcher.fetch(resource) for resource in resources))

    def build_subscriber(self, fields: Mapping[str, Any]) -> SubscriberCreate:
        """Turn create-dialog fields into a request body.

        Only ``id`` and ``username`` are checked, and only for presence;
        both are trimmed. Balance falls back to 0, tenant and level to
        their defaults.
        """
        return SubscriberCreate(
            id=_required_text(fields, "id"),
            username=_required_text(fields, "username"),
            password=str(fields.get("password") or ""),
            balance=parse_balance(fields.get("balance")),
            tenant_id=fields.get("tenant_id") or self._default_tenant,
            level=SubscriberLevel.from_value(fields.get("level", SubscriberLevel.USER.value)).value,
        )

    def _retain_create_input(self, fields: Mapping[str, Any]) -> None:
        for name, input_id in ADD_SUBSCRIBER_RETAINED_INPUTS.items():
            element = self._document.get(input_id)
            if element is not None:
                value = fields.get(name)
                element.attrs["value"] = "" if value is None else str(value)

    async def create_subscriber(self, fields: Mapping[str, Any]) -> bool:
        """Create a subscriber from dialog fields.

        On success the dialog closes, its form is cleared, subscribers and
        stats are re-fetched and the creation is logged. On failure the
        dialog stays open with the submitted values in place for another
        attempt.

        Raises:
            SubscriberValidationError: ``id`` or ``username`` is missing.
        """
        body = self.build_subscriber(fields)
        try:
            await asyncio.to_thread(self._client.post_json, "/users", body.model_dump())
        except BackendError as e:
            log_event(logger, logging.WARNING, EventType.MUTATION_FAILED, "subscribers", str(e), id=body.id)
            self._retain_create_input(fields)
            return False

        self._modals.close(ADD_SUBSCRIBER)
        form = self._document.get(ADD_SUBSCRIBER_FORM)
        if form is not None:
            form.reset()
        self._activity.append(f"Subscriber created: {body.username} ({body.id})")
        log_event(logger, logging.INFO, EventType.MUTATION_SUCCEEDED, "subscribers", "created", id=body.id)
        await self._refresh(Resource.SUBSCRIBERS, Resource.STATS)
        return True

    async def delete_subscriber(self, subscriber_id: str, confirm: ConfirmCallback) -> bool:
        """Delete a subscriber after ``confirm`` agrees.

        Subscribers and stats are re-fetched whether or not the backend
        accepted the delete; the removal is only logged when it did.
        Returns True only for a confirmed, accepted delete.
        """
        if not confirm(f"Delete subscriber {subscriber_id}?"):
            log_event(logger, logging.DEBUG, EventType.MUTATION_CANCELLED, "subscribers", "delete", id=subscriber_id)
            return False

        try:
            await asyncio.to_thread(self._client.delete, subscriber_path(subscriber_id))
            succeeded = True
        except BackendError as e:
            log_event(logger, logging.WARNING, EventType.MUTATION_FAILED, "subscribers", str(e), id=subscriber_id)
            succeeded = False

        if succeeded:
            self._activity.append(f"Subscriber removed: {subscriber_id}")
            log_event(logger, logging.INFO, EventType.MUTATION_SUCCEEDED, "subscribers", "deleted", id=subscriber_id)
        await self._refresh(Resource.SUBSCRIBERS, Resource.STATS)
        return succeeded

    def open_balance(self, subscriber_id: str, current: float | str | None) -> None:
        """Prefill the balance dialog for ``subscriber_id`` and open it."""
        id_input = self._document.get("eb-id")
        if id_input is not None:
            id_input.attrs["value"] = str(subscriber_id)
        amount_input = self._document.get("eb-amount")
        if amount_input is not None:
            amount_input.attrs["value"] = "" if current is None else str(current)
        self._modals.open(EDIT_BALANCE)

    async def adjust_balance(self, subscriber_id: str, amount: Any) -> bool:
        """Set a subscriber's balance to ``amount``.

        The dialog closes and subscribers are re-fetched whatever the
        outcome; the update is only logged when the backend accepted it.

        Raises:
            SubscriberValidationError: ``amount`` is not a number.
        """
        body = BalanceAdjustment(amount=parse_amount(amount))
        try:
            await asyncio.to_thread(self._client.post_json, balance_path(subscriber_id), body.model_dump())
            succeeded = True
        except BackendError as e:
            log_event(logger, logging.WARNING, EventType.MUTATION_FAILED, "balance", str(e), id=subscriber_id)
            succeeded = False

        self._modals.close(EDIT_BALANCE)
        if succeeded:
            self._activity.append(f"Balance updated for {subscriber_id}: ${body.amount:.2f}")
            log_event(logger, logging.INFO, EventType.MUTATION_SUCCEEDED, "balance", "updated", id=subscriber_id)
        await self._refresh(Resource.SUBSCRIBERS)
        return succeeded
