# This project was developed with assistance from AI tools.
"""Functional tests: post-sale board listing and drag-and-drop moves."""

import pytest
from db.enums import BoardColumn, TaskStatus

from .data_factory import make_post_sale_task
from .mock_db import make_mock_session
from .personas import agent, customer_service

pytestmark = pytest.mark.functional


def test_board_groups_cards_by_column(make_client):
    cards = [
        make_post_sale_task(BoardColumn.PENDING, 0, "Send welcome kit"),
        make_post_sale_task(BoardColumn.PENDING, 1, "Confirm first payment"),
        make_post_sale_task(BoardColumn.ON_HOLD, 0, "Waiting on carrier"),
    ]
    client = make_client(customer_service(), make_mock_session(items=cards))

    resp = client.get("/api/tasks/post-sale")
    assert resp.status_code == 200
    columns = resp.json()["columns"]
    assert set(columns) == {c.value for c in BoardColumn}
    assert [t["title"] for t in columns["pending"]] == [
        "Send welcome kit",
        "Confirm first payment",
    ]
    assert len(columns["on_hold"]) == 1
    assert columns["completed"] == []


def test_agent_cannot_use_board(make_client):
    client = make_client(agent(), make_mock_session(items=[]))

    resp = client.get("/api/tasks/post-sale")
    assert resp.status_code == 403


def test_move_to_completed_renumbers_and_completes(make_client):
    first = make_post_sale_task(BoardColumn.PENDING, 0, "Send welcome kit")
    second = make_post_sale_task(BoardColumn.PENDING, 1, "Confirm first payment")
    done = make_post_sale_task(BoardColumn.COMPLETED, 0, "Archive application")
    session = make_mock_session(items=[first, second, done], get=first)
    client = make_client(customer_service(), session)

    resp = client.post(
        f"/api/tasks/post-sale/{first.id}/move",
        json={"dest_column": "completed", "dest_index": 0},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["board_column"] == "completed"
    assert body["status"] == "completed"
    assert body["completed_at"] is not None
    assert first.position == 0
    assert done.position == 1
    assert second.position == 0
    session.commit.assert_awaited_once()


def test_move_index_past_end_appends(make_client):
    card = make_post_sale_task(BoardColumn.PENDING, 0)
    other = make_post_sale_task(BoardColumn.IN_PROGRESS, 0, "Call customer")
    session = make_mock_session(items=[card, other], get=card)
    client = make_client(customer_service(), session)

    resp = client.post(
        f"/api/tasks/post-sale/{card.id}/move",
        json={"dest_column": "in_progress", "dest_index": 99},
    )
    assert resp.status_code == 200
    assert card.position == 1
    assert resp.json()["status"] == "in_progress"


def test_negative_index_is_422(make_client):
    card = make_post_sale_task()
    client = make_client(customer_service(), make_mock_session(get=card))

    resp = client.post(
        f"/api/tasks/post-sale/{card.id}/move",
        json={"dest_column": "completed", "dest_index": -1},
    )
    assert resp.status_code == 422


def test_patch_cannot_change_card_status(make_client):
    card = make_post_sale_task(BoardColumn.PENDING, 0)
    session = make_mock_session(get=card)
    client = make_client(customer_service(), session)

    resp = client.patch(f"/api/tasks/post-sale/{card.id}", json={"status": "completed"})
    assert resp.status_code == 422
    assert card.status == TaskStatus.PENDING
    assert card.board_column == "pending"
    session.commit.assert_not_awaited()


def test_patch_edits_details_in_place(make_client):
    card = make_post_sale_task(BoardColumn.IN_PROGRESS, 2)
    session = make_mock_session(get=card)
    client = make_client(customer_service(), session)

    resp = client.patch(
        f"/api/tasks/post-sale/{card.id}", json={"title": "Mail ID cards", "priority": "high"}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "Mail ID cards"
    assert body["board_column"] == "in_progress"
    assert body["position"] == 2
    session.commit.assert_awaited_once()
