from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import (
    current_role,
    current_user_id,
    domain_error_response,
    payload,
    role_required,
    system_error_response,
)
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError
from .model import LeaveRequest


def leave_to_json(lv: LeaveRequest) -> dict:
    return {
        "id": lv.request_id,
        "requester_role": lv.requester_role.value,
        "requester_id": lv.requester_id,
        "requester_name": lv.requester_name,
        "class_id": lv.class_id,
        "type": lv.leave_type.value,
        "start_date": lv.start_date.isoformat(),
        "end_date": lv.end_date.isoformat(),
        "start_time": lv.start_time.strftime("%H:%M") if lv.start_time else None,
        "end_time": lv.end_time.strftime("%H:%M") if lv.end_time else None,
        "reason": lv.reason,
        "emergency_contact": lv.emergency_contact,
        "substitute_teacher_name": lv.substitute_teacher_name,
        "status": lv.status.value,
        "approver_role": lv.approver_role.value,
        "decided_by": lv.decided_by,
        "created_at": lv.created_at.isoformat(),
        "decided_at": lv.decided_at.isoformat() if lv.decided_at else None,
    }


def register(app: Flask, container: Container) -> None:
    leaves = container.leave_service

    @app.route("/leaves", methods=["POST"], endpoint="request_leave")
    @role_required(Role.STUDENT, Role.TEACHER)
    def request_leave():
        data = payload()
        try:
            leave = leaves.request_leave(
                requester_role=current_role(),
                requester_id=current_user_id(),
                leave_type=data.get("type", ""),
                start_date=data.get("start_date", ""),
                end_date=data.get("end_date", ""),
                start_time=data.get("start_time"),
                end_time=data.get("end_time"),
                reason=data.get("reason", ""),
                emergency_contact=data.get("emergency_contact"),
                substitute_teacher_name=data.get("substitute_teacher_name"),
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return system_error_response("submitting the leave request")
        return jsonify(message="Leave request submitted", leave=leave_to_json(leave)), 201

    @app.route("/leaves/mine", methods=["GET"], endpoint="my_leaves")
    @role_required(Role.STUDENT, Role.TEACHER)
    def my_leaves():
        history = leaves.get_leaves_for_requester(role=current_role(), requester_id=current_user_id())
        # Newest first for display.
        return jsonify(leaves=[leave_to_json(lv) for lv in reversed(history)])

    @app.route("/leaves/pending", methods=["GET"], endpoint="pending_leaves")
    @role_required(Role.ADMIN, Role.TEACHER)
    def pending_leaves():
        pending = leaves.get_leaves_pending_for_approver(
            approver_role=current_role(),
            approver_id=current_user_id(),
        )
        return jsonify(leaves=[leave_to_json(lv) for lv in pending])

    def _decide(request_id: str, approve: bool):
        try:
            leave = leaves.decide_leave(
                request_id=request_id,
                approve=approve,
                decider_id=current_user_id(),
                decider_role=current_role(),
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return system_error_response("deciding the leave request")
        message = "Leave approved" if approve else "Leave rejected"
        return jsonify(message=message, leave=leave_to_json(leave))

    @app.route("/leaves/<request_id>/approve", methods=["POST"], endpoint="approve_leave")
    @role_required(Role.ADMIN, Role.TEACHER)
    def approve_leave(request_id: str):
        return _decide(request_id, True)

    @app.route("/leaves/<request_id>/reject", methods=["POST"], endpoint="reject_leave")
    @role_required(Role.ADMIN, Role.TEACHER)
    def reject_leave(request_id: str):
        return _decide(request_id, False)
