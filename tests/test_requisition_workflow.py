"""
Requisition Workflow Tests
Draft editing, submission, approval steps, returns and the approval inbox
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from datetime import datetime, timedelta

from procurement.config.settings import settings
from tests.test_auth import (
    client,
    test_db,
    seeded_db,
    employee_headers,
    approver_headers,
    procurement_headers,
    finance_headers,
)


def requisition_payload(cost_center="OPS-110", unit_price=1_000_000, quantity=5, category="Logistics"):
    return {
        "department": "Operations",
        "cost_center": cost_center,
        "needed_by": (datetime.utcnow() + timedelta(days=14)).isoformat(),
        "notes": "Warehouse refresh",
        "items": [
            {
                "description": "Pallet jacks",
                "quantity": quantity,
                "uom": "unit",
                "unit_price": unit_price,
                "currency": "IDR",
                "category": category
            }
        ]
    }


def find_requisition(headers, req_no):
    response = client.get("/api/requisitions", headers=headers, params={"search": req_no})
    assert response.status_code == 200
    matches = [item for item in response.json()["requisitions"] if item["req_no"] == req_no]
    assert len(matches) == 1
    return matches[0]


def approve(headers, requisition_id, action="approved", comment=None):
    return client.post(
        "/api/approvals",
        headers=headers,
        json={"requisition_id": requisition_id, "action": action, "comment": comment}
    )


class TestRequisitionDrafts:
    """Test creating, listing and editing requisitions"""

    def test_create_requisition(self, employee_headers):
        response = client.post("/api/requisitions", headers=employee_headers, json=requisition_payload())
        assert response.status_code == 201

        data = response.json()
        assert data["req_no"] == f"PR-{settings.DOCUMENT_YEAR}-0006"
        assert data["status"] == "draft"
        assert data["total"] == 5_000_000
        assert data["approval_steps"] == []
        assert data["approval_trail"] == []

        me = client.get("/api/auth/me", headers=employee_headers).json()
        assert data["requester_id"] == me["id"]

    def test_create_requires_line_items(self, employee_headers):
        payload = requisition_payload()
        payload["items"] = []
        response = client.post("/api/requisitions", headers=employee_headers, json=payload)
        assert response.status_code == 422

    def test_create_requires_login(self, seeded_db):
        response = client.post("/api/requisitions", json=requisition_payload())
        assert response.status_code == 401

    def test_list_filters(self, employee_headers):
        response = client.get("/api/requisitions", headers=employee_headers, params={"status": "draft"})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["requisitions"][0]["req_no"] == "PR-2024-0003"

        response = client.get("/api/requisitions", headers=employee_headers, params={"search": "fac-202"})
        assert [item["req_no"] for item in response.json()["requisitions"]] == ["PR-2024-0002"]

    def test_list_unknown_status_rejected(self, employee_headers):
        response = client.get("/api/requisitions", headers=employee_headers, params={"status": "bogus"})
        assert response.status_code == 422
        assert response.json()["message"] == "Validation error"

    def test_list_sort_and_page(self, employee_headers):

        response = client.get(
            "/api/requisitions",
            headers=employee_headers,
            params={"sort_by": "total", "sort_dir": "asc", "page": 1, "page_size": 2}
        )
        data = response.json()
        assert data["total"] == 5
        assert data["page_size"] == 2
        assert [item["req_no"] for item in data["requisitions"]] == ["PR-2024-0004", "PR-2024-0003"]

    def test_get_unknown_requisition(self, employee_headers):
        response = client.get("/api/requisitions/9999", headers=employee_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Requisition not found"

    def test_edit_draft_keeps_item_and_recomputes_total(self, employee_headers):
        draft = find_requisition(employee_headers, "PR-2024-0003")
        payload = requisition_payload(unit_price=1_500_000, quantity=10)
        payload["items"][0]["id"] = draft["items"][0]["id"]

        response = client.put(f"/api/requisitions/{draft['id']}", headers=employee_headers, json=payload)
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 15_000_000
        assert data["items"][0]["id"] == draft["items"][0]["id"]

    def test_edit_submitted_requisition_conflicts(self, employee_headers):
        submitted = find_requisition(employee_headers, "PR-2024-0002")
        response = client.put(
            f"/api/requisitions/{submitted['id']}",
            headers=employee_headers,
            json=requisition_payload(cost_center="FAC-202")
        )
        assert response.status_code == 409

    def test_edit_by_other_user_forbidden(self, employee_headers, approver_headers):
        draft = find_requisition(employee_headers, "PR-2024-0003")
        response = client.put(f"/api/requisitions/{draft['id']}", headers=approver_headers, json=requisition_payload())
        assert response.status_code == 403

    def test_delete_requires_procurement_admin(self, employee_headers, procurement_headers):
        draft = find_requisition(employee_headers, "PR-2024-0003")

        response = client.delete(f"/api/requisitions/{draft['id']}", headers=employee_headers)
        assert response.status_code == 403

        response = client.delete(f"/api/requisitions/{draft['id']}", headers=procurement_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Requisition PR-2024-0003 deleted"

        response = client.get(f"/api/requisitions/{draft['id']}", headers=employee_headers)
        assert response.status_code == 404


class TestSubmission:
    """Test submitting requisitions"""

    def test_submit_assigns_steps_and_trail(self, employee_headers):
        draft = find_requisition(employee_headers, "PR-2024-0003")

        response = client.post(f"/api/requisitions/{draft['id']}/submit", headers=employee_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "submitted"
        assert data["approval_steps"] == [
            {"order": 1, "role": "approver"},
            {"order": 2, "role": "procurement_admin"},
        ]
        assert len(data["approval_trail"]) == 1
        entry = data["approval_trail"][0]
        assert entry["step"] == 0
        assert entry["role"] == "employee"
        assert entry["action"] == "submitted"
        assert entry["user_id"] == data["requester_id"]

    def test_submit_notifies_first_step_role(self, employee_headers, approver_headers):
        draft = find_requisition(employee_headers, "PR-2024-0003")
        client.post(f"/api/requisitions/{draft['id']}/submit", headers=employee_headers)

        response = client.get("/api/notifications", headers=approver_headers)
        titles = [item["title"] for item in response.json()["notifications"]]
        assert "Requisition PR-2024-0003 requires your approval" in titles

    def test_procurement_admin_can_submit_for_requester(self, employee_headers, procurement_headers):
        draft = find_requisition(employee_headers, "PR-2024-0003")
        response = client.post(f"/api/requisitions/{draft['id']}/submit", headers=procurement_headers)
        assert response.status_code == 200
        assert response.json()["approval_trail"][0]["role"] == "employee"

    def test_submit_by_other_user_forbidden(self, employee_headers, approver_headers):
        draft = find_requisition(employee_headers, "PR-2024-0003")
        response = client.post(f"/api/requisitions/{draft['id']}/submit", headers=approver_headers)
        assert response.status_code == 403

    def test_submit_non_draft_conflicts(self, employee_headers):
        approved = find_requisition(employee_headers, "PR-2024-0001")
        response = client.post(f"/api/requisitions/{approved['id']}/submit", headers=employee_headers)
        assert response.status_code == 409
        assert response.json()["message"] == "Only draft requisitions can be submitted"

    def test_submit_unknown_requisition(self, employee_headers):
        response = client.post("/api/requisitions/9999/submit", headers=employee_headers)
        assert response.status_code == 404

    def test_submit_over_budget_stays_draft(self, employee_headers):
        created = client.post(
            "/api/requisitions",
            headers=employee_headers,
            json=requisition_payload(unit_price=100_000_000, quantity=5)
        ).json()

        response = client.post(f"/api/requisitions/{created['id']}/submit", headers=employee_headers)
        assert response.status_code == 400
        assert response.json()["message"] == (
            "Budget Operations Improvements 2024 (OPS-110) exceeded. "
            "Remaining Rp 450,000,000, requested Rp 500,000,000."
        )

        data = client.get(f"/api/requisitions/{created['id']}", headers=employee_headers).json()
        assert data["status"] == "draft"
        assert data["approval_trail"] == []

    def test_high_value_it_requisition_uses_most_specific_rule(self, employee_headers):
        created = client.post(
            "/api/requisitions",
            headers=employee_headers,
            json=requisition_payload(cost_center="IT-OPS-001", unit_price=30_000_000, quantity=5, category="IT")
        ).json()

        response = client.post(f"/api/requisitions/{created['id']}/submit", headers=employee_headers)
        assert response.status_code == 200
        assert [step["role"] for step in response.json()["approval_steps"]] == ["approver", "finance"]

    def test_cost_center_whitespace_still_matches_rule(self, employee_headers):
        created = client.post(
            "/api/requisitions",
            headers=employee_headers,
            json=requisition_payload(cost_center="  IT-OPS-001 ", unit_price=30_000_000, quantity=5, category="IT")
        ).json()
        assert created["cost_center"] == "IT-OPS-001"

        response = client.post(f"/api/requisitions/{created['id']}/submit", headers=employee_headers)
        assert [step["role"] for step in response.json()["approval_steps"]] == ["approver", "finance"]


    def test_submit_without_budget_for_cost_center(self, employee_headers):
        created = client.post(
            "/api/requisitions",
            headers=employee_headers,
            json=requisition_payload(cost_center="RND-999", unit_price=10_000_000_000, quantity=1)
        ).json()

        response = client.post(f"/api/requisitions/{created['id']}/submit", headers=employee_headers)
        assert response.status_code == 200


class TestApprovalFlow:
    """Test approving and returning requisitions"""

    def submit_draft(self, employee_headers):
        draft = find_requisition(employee_headers, "PR-2024-0003")
        response = client.post(f"/api/requisitions/{draft['id']}/submit", headers=employee_headers)
        assert response.status_code == 200
        return response.json()

    def test_full_approval(self, employee_headers, approver_headers, procurement_headers):
        requisition = self.submit_draft(employee_headers)

        response = approve(approver_headers, requisition["id"], comment="Looks fine")
        assert response.status_code == 200
        assert response.json()["status"] == "submitted"

        response = approve(procurement_headers, requisition["id"])
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "approved"
        assert [(entry["step"], entry["role"], entry["action"]) for entry in data["approval_trail"]] == [
            (0, "employee", "submitted"),
            (1, "approver", "approved"),
            (2, "procurement_admin", "approved"),
        ]
        assert data["approval_trail"][1]["comment"] == "Looks fine"

        notifications = client.get("/api/notifications", headers=employee_headers).json()["notifications"]
        assert any(item["title"] == "Requisition Approved" for item in notifications)

    def test_wrong_role_forbidden(self, employee_headers, finance_headers, procurement_headers):
        requisition = self.submit_draft(employee_headers)

        for headers in (finance_headers, procurement_headers, employee_headers):
            response = approve(headers, requisition["id"])
            assert response.status_code == 403
            assert response.json()["message"] == "You are not authorized for this step"

    def test_return_sends_back_to_draft(self, employee_headers, approver_headers):
        requisition = self.submit_draft(employee_headers)

        response = approve(approver_headers, requisition["id"], action="returned", comment="Add a quote")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "draft"
        assert data["approval_trail"][-1]["action"] == "returned"
        assert data["approval_trail"][-1]["comment"] == "Add a quote"
        assert len(data["approval_steps"]) == 2

        notifications = client.get("/api/notifications", headers=employee_headers).json()["notifications"]
        returned = [item for item in notifications if item["title"] == "Requisition Returned"]
        assert returned and "Add a quote" in returned[0]["message"]

    def test_returned_requisition_cannot_be_processed(self, employee_headers, approver_headers):
        requisition = self.submit_draft(employee_headers)
        approve(approver_headers, requisition["id"], action="returned")

        response = approve(approver_headers, requisition["id"])
        assert response.status_code == 409
        assert response.json()["message"] == "Only submitted requisitions can be processed"


    def test_edit_after_return_clears_steps_and_trail(self, employee_headers, approver_headers):
        requisition = self.submit_draft(employee_headers)
        approve(approver_headers, requisition["id"], action="returned")

        response = client.put(
            f"/api/requisitions/{requisition['id']}",
            headers=employee_headers,
            json=requisition_payload()
        )
        assert response.status_code == 200
        assert response.json()["approval_steps"] == []
        assert response.json()["approval_trail"] == []

    def test_process_draft_conflicts(self, employee_headers, approver_headers):
        draft = find_requisition(employee_headers, "PR-2024-0003")
        response = approve(approver_headers, draft["id"])
        assert response.status_code == 409

    def test_process_unknown_requisition(self, approver_headers):
        assert approve(approver_headers, 9999).status_code == 404

    def test_unsupported_action_rejected(self, employee_headers, approver_headers):
        requisition = self.submit_draft(employee_headers)
        response = approve(approver_headers, requisition["id"], action="rejected")
        assert response.status_code == 422

    def test_approval_does_not_recheck_budget(self, employee_headers, procurement_headers):
        furniture = find_requisition(employee_headers, "PR-2024-0002")
        response = approve(procurement_headers, furniture["id"])
        assert response.status_code == 200
        assert response.json()["status"] == "approved"


class TestApprovalInbox:
    """Test GET /api/approvals"""

    def test_inbox_lists_pending_step_role_only(self, procurement_headers, approver_headers):
        response = client.get("/api/approvals", headers=procurement_headers)
        assert response.status_code == 200
        approvals = response.json()["approvals"]
        assert [item["requisition"]["req_no"] for item in approvals] == ["PR-2024-0002"]
        assert approvals[0]["current_step"] == {"order": 2, "role": "procurement_admin"}

        assert client.get("/api/approvals", headers=approver_headers).json()["approvals"] == []

    def test_inbox_follows_progress(self, employee_headers, approver_headers, procurement_headers):
        draft = find_requisition(employee_headers, "PR-2024-0003")
        client.post(f"/api/requisitions/{draft['id']}/submit", headers=employee_headers)

        approvals = client.get("/api/approvals", headers=approver_headers).json()["approvals"]
        assert [item["requisition_id"] for item in approvals] == [draft["id"]]

        approve(approver_headers, draft["id"])
        assert client.get("/api/approvals", headers=approver_headers).json()["approvals"] == []

        req_nos = [
            item["requisition"]["req_no"]
            for item in client.get("/api/approvals", headers=procurement_headers).json()["approvals"]
        ]
        assert sorted(req_nos) == ["PR-2024-0002", "PR-2024-0003"]


class TestNotifications:
    """Test notification listing and read state"""

    def test_mark_notification_read(self, employee_headers, approver_headers):
        draft = find_requisition(employee_headers, "PR-2024-0003")
        client.post(f"/api/requisitions/{draft['id']}/submit", headers=employee_headers)

        notification = client.get(
            "/api/notifications", headers=approver_headers, params={"unread_only": True}
        ).json()["notifications"][0]
        assert notification["is_read"] is False

        response = client.post(f"/api/notifications/{notification['id']}/read", headers=approver_headers)
        assert response.status_code == 200
        assert response.json()["is_read"] is True

        unread = client.get(
            "/api/notifications", headers=approver_headers, params={"unread_only": True}
        ).json()["notifications"]
        assert unread == []

    def test_cannot_read_someone_elses_notification(self, employee_headers, approver_headers):
        draft = find_requisition(employee_headers, "PR-2024-0003")
        client.post(f"/api/requisitions/{draft['id']}/submit", headers=employee_headers)
        notification = client.get("/api/notifications", headers=approver_headers).json()["notifications"][0]

        response = client.post(f"/api/notifications/{notification['id']}/read", headers=employee_headers)
        assert response.status_code == 404


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
