"""Change-notification feed.

Stores publish every write as ``(table, record_id, fields)``. Observers
subscribe to a table, optionally narrowed by field values (for example all
``bookings`` rows with a given ``speaker_id``). Delivery is at-least-once and
unordered across records; observers must tolerate repeats.
Database writes are published with ``publish_on_commit`` so observers only
ever see committed state.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable
from uuid import uuid4

from django.db import transaction
from django.dispatch import Signal

logger = logging.getLogger(__name__)

record_changed = Signal()


@dataclass(frozen=True)
class ChangeNotice:
    table: str
    record_id: str
    fields: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Subscription:
    table: str
    dispatch_uid: str
    filters: dict[str, str]


class ChangeFeed:
    """Publish/subscribe channel keyed by table and row filter."""

    def __init__(self, signal: Signal | None = None) -> None:
        self._signal = signal if signal is not None else record_changed

    def publish(self, table: str, record_id: Any, **fields: Any) -> None:
        notice = ChangeNotice(
            table=table,
            record_id=str(record_id),
            fields={key: str(value) for key, value in fields.items() if value is not None},
        )
        for receiver, response in self._signal.send_robust(sender=ChangeFeed, notice=notice):
            if isinstance(response, Exception):
                logger.warning(f"Change observer {receiver!r} failed on {table}/{record_id}: {response}")

    def publish_on_commit(self, table: str, record_id: Any, **fields: Any) -> None:
        """Publish once the current transaction commits; drop the notice on rollback.

        Outside a transaction the notice is published immediately.
        """
        transaction.on_commit(lambda: self.publish(table, record_id, **fields))

    def subscribe(
        self, table: str, callback: Callable[[ChangeNotice], None], **filters: Any
    ) -> Subscription:
        wanted = {key: str(value) for key, value in filters.items()}

        def receiver(sender: Any, notice: ChangeNotice, **kwargs: Any) -> None:
            if notice.table != table:
                return
            if any(notice.fields.get(key) != value for key, value in wanted.items()):
                return
            callback(notice)

        subscription = Subscription(table=table, dispatch_uid=f"{table}:{uuid4()}", filters=wanted)
        self._signal.connect(receiver, weak=False, dispatch_uid=subscription.dispatch_uid)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        self._signal.disconnect(dispatch_uid=subscription.dispatch_uid)


change_feed = ChangeFeed()
