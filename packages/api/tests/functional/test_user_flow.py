# This project was developed with assistance from AI tools.
"""Functional tests: staff user administration and manager team view."""

import uuid

import pytest
from db import ProcessorManagerAssignment, User
from db.enums import UserRole

from .data_factory import agent_alex, make_user, processor_paula
from .mock_db import added_objects, make_mock_session
from .personas import (
    MANAGER_USER_ID,
    OTHER_MANAGER_USER_ID,
    PROCESSOR_USER_ID,
    manager,
    super_admin,
)

pytestmark = pytest.mark.functional

_NEW_USER_ID = uuid.UUID("00000000-0000-4000-8000-0000000000c9")


def _marta():
    return make_user(MANAGER_USER_ID, "Marta", "Ruiz", UserRole.MANAGER)


class TestUserAdministration:
    def test_admin_lists_users(self, make_client):
        session = make_mock_session(items=[agent_alex(), processor_paula()])
        client = make_client(super_admin(), session)

        resp = client.get("/api/users/?role=agent")
        assert resp.status_code == 200
        body = resp.json()
        assert body["pagination"]["total"] == 2
        assert body["data"][0]["first_name"] == "Alex"

    def test_manager_cannot_list_users(self, make_client):
        client = make_client(manager(), make_mock_session(items=[]))

        resp = client.get("/api/users/")
        assert resp.status_code == 403

    def test_create_user(self, make_client):
        created = make_user(_NEW_USER_ID, "Nora", "Paz", UserRole.CALL_CENTER)
        session = make_mock_session(get=created)
        client = make_client(super_admin(), session)

        resp = client.post(
            "/api/users/",
            json={
                "id": str(_NEW_USER_ID),
                "email": "nora@policydesk.test",
                "first_name": "Nora",
                "last_name": "Paz",
                "role": "call_center",
            },
        )
        assert resp.status_code == 201
        assert resp.json()["role"] == "call_center"
        [user] = added_objects(session, User)
        assert user.email == "nora@policydesk.test"
        session.commit.assert_awaited_once()

    def test_create_user_under_non_manager_is_422(self, make_client):
        session = make_mock_session(get=agent_alex())
        client = make_client(super_admin(), session)

        resp = client.post(
            "/api/users/",
            json={
                "id": str(_NEW_USER_ID),
                "email": "nora@policydesk.test",
                "first_name": "Nora",
                "last_name": "Paz",
                "role": "agent",
                "manager_id": str(agent_alex().id),
            },
        )
        assert resp.status_code == 422
        session.commit.assert_not_awaited()

    def test_change_role_of_unknown_user_is_404(self, make_client):
        client = make_client(super_admin(), make_mock_session(get=None))

        resp = client.patch(f"/api/users/{uuid.uuid4()}/role", json={"role": "manager"})
        assert resp.status_code == 404

    def test_change_role(self, make_client):
        target = agent_alex()
        client = make_client(super_admin(), make_mock_session(get=target))

        resp = client.patch(f"/api/users/{target.id}/role", json={"role": "manager"})
        assert resp.status_code == 200
        assert target.role == UserRole.MANAGER


class TestProcessorAssignments:
    def test_replace_manager_set(self, make_client):
        session = make_mock_session(items=[MANAGER_USER_ID], get=processor_paula())
        client = make_client(super_admin(), session)

        resp = client.put(
            f"/api/users/processors/{PROCESSOR_USER_ID}/managers",
            json={"manager_ids": [str(MANAGER_USER_ID), str(MANAGER_USER_ID)]},
        )
        assert resp.status_code == 200
        assert resp.json() == [str(MANAGER_USER_ID)]
        [call] = session.add_all.call_args_list
        [assignment] = call.args[0]
        assert isinstance(assignment, ProcessorManagerAssignment)
        assert assignment.manager_id == MANAGER_USER_ID
        session.commit.assert_awaited_once()

    def test_unknown_manager_is_422(self, make_client):
        session = make_mock_session(items=[MANAGER_USER_ID], get=processor_paula())
        client = make_client(super_admin(), session)

        resp = client.put(
            f"/api/users/processors/{PROCESSOR_USER_ID}/managers",
            json={"manager_ids": [str(MANAGER_USER_ID), str(OTHER_MANAGER_USER_ID)]},
        )
        assert resp.status_code == 422
        session.commit.assert_not_awaited()

    def test_target_must_be_processor(self, make_client):
        client = make_client(super_admin(), make_mock_session(get=_marta()))

        resp = client.put(
            f"/api/users/processors/{MANAGER_USER_ID}/managers",
            json={"manager_ids": []},
        )
        assert resp.status_code == 422


class TestManagerTeam:
    def test_team_with_book_size(self, make_client):
        client = make_client(manager(), make_mock_session(rows=[(agent_alex(), 3, 5)]))

        resp = client.get("/api/users/team")
        assert resp.status_code == 200
        [member] = resp.json()
        assert member["name"] == "Alex Moreno"
        assert member["customer_count"] == 3
        assert member["policy_count"] == 5

    def test_team_is_manager_only(self, make_client):
        client = make_client(super_admin(), make_mock_session(rows=[]))

        resp = client.get("/api/users/team")
        assert resp.status_code == 403
