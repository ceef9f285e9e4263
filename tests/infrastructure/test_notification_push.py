"""Tests for the websocket registry and the realtime publisher."""

from __future__ import annotations

import asyncio

from fastapi import WebSocketDisconnect

from jobchat.domain.entities import Notification, NotificationType, RecipientKind
from jobchat.infrastructure.notifications import (
    NotificationConnectionManager,
    NotificationPublisher,
)

KEY = (RecipientKind.USER, 1)


class FakeWebSocket:
    def __init__(self, closed: bool = False) -> None:
        self.closed = closed
        self.accepted = False
        self.sent: list[dict] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: dict) -> None:
        if self.closed:
            raise WebSocketDisconnect(code=1006)
        self.sent.append(message)


def _notification(recipient_id: int = 1) -> Notification:
    return Notification(
        id=7,
        recipient_id=recipient_id,
        recipient_kind=RecipientKind.USER,
        type=NotificationType.NEW_MESSAGE,
        title="New Message",
        message="You have a new message.",
    )


async def _drain() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


def test_send_reaches_every_socket_and_drops_closed_ones() -> None:
    manager = NotificationConnectionManager()
    open_socket, closed_socket = FakeWebSocket(), FakeWebSocket(closed=True)

    async def scenario() -> int:
        await manager.connect(KEY, open_socket)
        await manager.connect(KEY, closed_socket)
        return await manager.send(KEY, {"type": "pong"})

    delivered = asyncio.run(scenario())

    assert delivered == 1
    assert open_socket.accepted is True
    assert open_socket.sent == [{"type": "pong"}]
    assert manager.is_connected(KEY) is True

    manager.disconnect(KEY, open_socket)
    assert manager.is_connected(KEY) is False


def test_applicant_and_employer_with_same_id_are_separate() -> None:
    manager = NotificationConnectionManager()
    applicant_socket = FakeWebSocket()

    asyncio.run(manager.connect(KEY, applicant_socket))

    assert manager.is_connected((RecipientKind.EMPLOYER, 1)) is False
    assert asyncio.run(manager.send((RecipientKind.EMPLOYER, 1), {"type": "x"})) == 0
    assert applicant_socket.sent == []


def test_publish_from_event_loop_holds_task_until_delivered() -> None:
    manager = NotificationConnectionManager()
    publisher = NotificationPublisher(manager)
    websocket = FakeWebSocket()

    async def scenario() -> None:
        await manager.connect(KEY, websocket)
        publisher.dispatch(_notification())
        assert len(publisher._pending) == 1
        await _drain()

    asyncio.run(scenario())

    assert publisher._pending == set()
    assert websocket.sent[0]["type"] == "notification"
    assert websocket.sent[0]["data"]["id"] == 7


def test_publish_failure_is_collected(caplog) -> None:
    manager = NotificationConnectionManager()
    publisher = NotificationPublisher(manager)

    async def broken_send(key, message):
        raise ValueError("cannot encode")

    manager.send = broken_send

    async def scenario() -> None:
        await manager.connect(KEY, FakeWebSocket())
        publisher.dispatch(_notification())
        await _drain()

    asyncio.run(scenario())

    assert publisher._pending == set()
    assert "Realtime delivery failed" in caplog.text


def test_publish_is_a_no_op_without_listeners() -> None:
    publisher = NotificationPublisher(NotificationConnectionManager())

    publisher.dispatch(_notification(recipient_id=42))

    assert publisher._pending == set()
