# backend/modules/maintenance/tests/test_request_routes.py

"""
API tests for the maintenance endpoints: status codes and error bodies.
"""

import pytest

from modules.maintenance.enums import RequestStage

API = "/api/maintenance"


@pytest.fixture
def created_request(client, auth_headers, employee, equipment):
    response = client.post(
        f"{API}/requests/",
        json={"subject": "Spindle vibrates", "equipment_id": equipment.id},
        headers=auth_headers(employee),
    )
    assert response.status_code == 201
    return response.json()


class TestAuthentication:
    def test_missing_token(self, client):
        response = client.get(f"{API}/requests/")

        assert response.status_code == 401
        assert response.json()["error_code"] == "AUTH_FAILED"

    def test_garbage_token(self, client):
        response = client.get(
            f"{API}/requests/", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401

    def test_token_for_deleted_user(self, client, db_session, auth_headers, employee):
        headers = auth_headers(employee)
        db_session.delete(employee)
        db_session.commit()

        response = client.get(f"{API}/requests/", headers=headers)
        assert response.status_code == 401


class TestRequestLifecycleRoutes:
    def test_create_request(self, created_request, employee):
        assert created_request["stage"] == "NEW"
        assert created_request["created_by"]["id"] == employee.id
        assert created_request["is_overdue"] is False
        assert created_request["notes"] == []

    def test_preventive_without_date(self, client, auth_headers, manager, equipment):
        response = client.post(
            f"{API}/requests/",
            json={
                "subject": "Inspection",
                "equipment_id": equipment.id,
                "request_type": "PREVENTIVE",
            },
            headers=auth_headers(manager),
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_full_repair_flow(self, client, auth_headers, created_request, alice, bob):
        url = f"{API}/requests/{created_request['id']}/transition"

        response = client.post(
            url, json={"target_stage": "IN_PROGRESS"}, headers=auth_headers(bob)
        )
        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "FORBIDDEN"
        assert body["path"] == f"{API}/requests/{created_request['id']}/transition"

        response = client.post(
            url, json={"target_stage": "IN_PROGRESS"}, headers=auth_headers(alice)
        )
        assert response.status_code == 200
        assert response.json()["assigned_technician"]["id"] == alice.id

        response = client.post(
            url, json={"target_stage": "REPAIRED"}, headers=auth_headers(alice)
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Duration is required before marking as repaired"

        response = client.post(
            url,
            json={"target_stage": "REPAIRED", "duration_hours": 2.5},
            headers=auth_headers(alice),
        )
        assert response.status_code == 200
        assert response.json()["stage"] == RequestStage.REPAIRED.value
        assert response.json()["duration_hours"] == 2.5

    def test_scrap_then_create(self, client, auth_headers, created_request, manager, employee, equipment):
        response = client.post(
            f"{API}/requests/{created_request['id']}/transition",
            json={"target_stage": "SCRAP"},
            headers=auth_headers(manager),
        )
        assert response.status_code == 200
        notes = response.json()["notes"]
        assert len(notes) == 1
        assert notes[0]["is_system"] is True

        response = client.post(
            f"{API}/requests/",
            json={"subject": "Still broken", "equipment_id": equipment.id},
            headers=auth_headers(employee),
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_STATE"

    def test_invalid_edge(self, client, auth_headers, created_request, alice):
        response = client.post(
            f"{API}/requests/{created_request['id']}/transition",
            json={"target_stage": "REPAIRED", "duration_hours": 1},
            headers=auth_headers(alice),
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_TRANSITION"

    def test_boolean_duration_rejected(self, client, auth_headers, created_request, alice):
        url = f"{API}/requests/{created_request['id']}/transition"
        client.post(url, json={"target_stage": "IN_PROGRESS"}, headers=auth_headers(alice))

        response = client.post(
            url,
            json={"target_stage": "REPAIRED", "duration_hours": True},
            headers=auth_headers(alice),
        )
        assert response.status_code == 422

        detail = client.get(
            f"{API}/requests/{created_request['id']}", headers=auth_headers(alice)
        ).json()
        assert detail["stage"] == "IN_PROGRESS"
        assert detail["duration_hours"] is None

    def test_unknown_stage_value(self, client, auth_headers, created_request, alice):
        response = client.post(
            f"{API}/requests/{created_request['id']}/transition",
            json={"target_stage": "DONE"},
            headers=auth_headers(alice),
        )
        assert response.status_code == 422

    def test_unknown_request(self, client, auth_headers, alice, team):
        response = client.post(
            f"{API}/requests/999/transition",
            json={"target_stage": "IN_PROGRESS"},
            headers=auth_headers(alice),
        )
        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    def test_available_transitions(self, client, auth_headers, created_request, alice):
        response = client.get(
            f"{API}/requests/{created_request['id']}/transitions",
            headers=auth_headers(alice),
        )
        assert response.status_code == 200
        assert response.json() == {
            "request_id": created_request["id"],
            "stage": "NEW",
            "available_transitions": ["IN_PROGRESS"],
        }

    def test_add_note(self, client, auth_headers, created_request, employee):
        url = f"{API}/requests/{created_request['id']}/notes"

        response = client.post(url, json={"content": "  Happens at startup "}, headers=auth_headers(employee))
        assert response.status_code == 201
        assert response.json()["content"] == "Happens at startup"
        assert response.json()["user"]["id"] == employee.id

        response = client.post(url, json={"content": "   "}, headers=auth_headers(employee))
        assert response.status_code == 400

    def test_delete_requires_manager(self, client, auth_headers, created_request, employee, manager):
        url = f"{API}/requests/{created_request['id']}"

        assert client.delete(url, headers=auth_headers(employee)).status_code == 403
        assert client.delete(url, headers=auth_headers(manager)).status_code == 204
        assert client.get(url, headers=auth_headers(manager)).status_code == 404


class TestAdministrationRoutes:
    def test_equipment_requires_manager(self, client, auth_headers, employee, manager, department, team):
        payload = {
            "name": "Server rack",
            "serial_number": "IT-42",
            "category": "IT",
            "location": "Basement",
            "purchase_date": "2023-02-01T00:00:00Z",
            "department_id": department.id,
            "maintenance_team_id": team.id,
        }

        response = client.post(f"{API}/equipment/", json=payload, headers=auth_headers(employee))
        assert response.status_code == 403

        response = client.post(f"{API}/equipment/", json=payload, headers=auth_headers(manager))
        assert response.status_code == 201
        assert response.json()["open_request_count"] == 0

        response = client.post(f"{API}/equipment/", json=payload, headers=auth_headers(manager))
        assert response.status_code == 409

    def test_equipment_list_counts_open_requests(self, client, auth_headers, created_request, employee, equipment):
        response = client.get(f"{API}/equipment/", headers=auth_headers(employee))

        assert response.status_code == 200
        assert [(item["id"], item["open_request_count"]) for item in response.json()] == [
            (equipment.id, 1)
        ]

    def test_team_roster_must_be_technicians(self, client, auth_headers, manager, employee):
        response = client.post(
            f"{API}/teams",
            json={"name": "Helpers", "technician_ids": [employee.id]},
            headers=auth_headers(manager),
        )
        assert response.status_code == 400

    def test_reports_overview(self, client, auth_headers, created_request, employee):
        response = client.get(f"{API}/reports/overview", headers=auth_headers(employee))

        assert response.status_code == 200
        assert response.json()["open_requests"] == 1


class TestRequestListingRoutes:
    """GET /requests/ filters"""

    @pytest.fixture
    def preventive_request(self, client, auth_headers, manager, equipment):
        response = client.post(
            f"{API}/requests/",
            json={
                "subject": "Quarterly inspection",
                "equipment_id": equipment.id,
                "request_type": "PREVENTIVE",
                "scheduled_date": "2024-07-01T00:00:00Z",
            },
            headers=auth_headers(manager),
        )
        assert response.status_code == 201
        return response.json()

    def _list(self, client, headers, **params):
        response = client.get(f"{API}/requests/", params=params, headers=headers)
        assert response.status_code == 200
        return [item["id"] for item in response.json()]

    def test_list_newest_first(
        self, client, auth_headers, preventive_request, created_request, employee
    ):
        assert self._list(client, auth_headers(employee)) == [
            created_request["id"],
            preventive_request["id"],
        ]

    def test_list_flags_overdue(self, client, auth_headers, preventive_request, created_request, employee):
        response = client.get(f"{API}/requests/", headers=auth_headers(employee))
        flags = {item["id"]: item["is_overdue"] for item in response.json()}

        assert flags == {preventive_request["id"]: True, created_request["id"]: False}

    def test_filter_by_type_and_stage(
        self, client, auth_headers, preventive_request, created_request, employee
    ):
        headers = auth_headers(employee)

        assert self._list(client, headers, request_type="CORRECTIVE") == [created_request["id"]]
        assert self._list(client, headers, request_type="PREVENTIVE") == [preventive_request["id"]]
        assert self._list(client, headers, stage="IN_PROGRESS") == []

    def test_filter_by_equipment_and_team(
        self, client, auth_headers, preventive_request, created_request, employee, equipment, team
    ):
        headers = auth_headers(employee)
        both = [created_request["id"], preventive_request["id"]]

        assert self._list(client, headers, equipment_id=equipment.id) == both
        assert self._list(client, headers, maintenance_team_id=team.id) == both
        assert self._list(client, headers, equipment_id=999) == []

    def test_scheduled_window_includes_upper_bound(
        self, client, auth_headers, preventive_request, created_request, employee
    ):
        headers = auth_headers(employee)

        assert self._list(
            client,
            headers,
            scheduled_from="2024-06-01T00:00:00",
            scheduled_to="2024-07-01T00:00:00",
        ) == [preventive_request["id"]]
        assert self._list(
            client,
            headers,
            scheduled_from="2024-06-01T00:00:00",
            scheduled_to="2024-06-30T23:59:59",
        ) == []

    def test_invalid_stage_filter(self, client, auth_headers, employee):
        response = client.get(
            f"{API}/requests/", params={"stage": "DONE"}, headers=auth_headers(employee)
        )
        assert response.status_code == 422
