from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify

from ..common.web import (
    current_user_id,
    domain_error_response,
    payload,
    role_required,
    system_error_response,
)
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError
from .model import ClassFeeConfig, FeeInstallment, FeeSummary, StudentFeeState


def _money(value) -> float:
    return float(value)


def installment_to_json(i: FeeInstallment) -> dict:
    return {
        "index": i.index,
        "amount": _money(i.amount),
        "due_date": i.due_date.isoformat() if i.due_date else None,
        "paid": i.paid,
        "paid_at": i.paid_at.isoformat() if i.paid_at else None,
    }


def config_to_json(c: ClassFeeConfig) -> dict:
    return {
        "class_id": c.class_id,
        "base_fee_amount": _money(c.base_fee_amount),
        "num_installments": c.num_installments,
        "installment_dates": [d.isoformat() if d else None for d in c.installment_dates],
        "updated_at": c.updated_at.isoformat(),
    }


def state_to_json(s: Optional[StudentFeeState]) -> Optional[dict]:
    if s is None:
        return None
    return {
        "student_id": s.student_id,
        "class_id": s.class_id,
        "installments": [installment_to_json(i) for i in s.installments],
        "extra_fees": {k: _money(v) for k, v in s.extra_fees.items()},
    }


def summary_to_json(s: FeeSummary) -> dict:
    return {
        "total": _money(s.total),
        "paid": _money(s.paid),
        "remaining": _money(s.remaining),
        "extras_total": _money(s.extras_total),
    }


def register(app: Flask, container: Container) -> None:
    fees = container.fee_service

    @app.route("/fees/status", methods=["GET"], endpoint="fee_status")
    @role_required(Role.STUDENT)
    def fee_status():
        try:
            status = fees.fee_status(current_user_id())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return system_error_response("loading fee status")

        if not status.configured:
            return jsonify(
                configured=False,
                message="No fee configuration has been set up for your class yet.",
            )
        return jsonify(
            configured=True,
            config=config_to_json(status.config),
            fees=state_to_json(status.state),
            summary=summary_to_json(status.summary),
        )

    @app.route("/admin/fees/classes/<class_id>", methods=["GET"], endpoint="class_fees")
    @role_required(Role.ADMIN)
    def class_fees(class_id: str):
        config = fees.get_class_fee_config(class_id)
        rows = fees.class_fee_overview(class_id)
        return jsonify(
            configured=config is not None,
            config=config_to_json(config) if config else None,
            students=[
                {
                    "student_id": student.student_id,
                    "name": student.name,
                    "fees": state_to_json(fee_state),
                    "summary": summary_to_json(summary),
                }
                for student, fee_state, summary in rows
            ],
        )

    @app.route("/admin/fees/classes/<class_id>", methods=["POST"], endpoint="save_class_fees")
    @role_required(Role.ADMIN)
    def save_class_fees(class_id: str):
        data = payload()
        try:
            config = fees.set_class_fee_config(
                class_id=class_id,
                base_fee_amount=data.get("base_fee_amount"),
                num_installments=data.get("num_installments"),
            )
            dates = data.get("installment_dates")
            if dates is not None:
                if not isinstance(dates, list):
                    raise ValidationError("installment_dates must be a list")
                config = fees.set_installment_dates(class_id=class_id, dates=dates)
            updated = fees.recompute_class(class_id)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return system_error_response("saving the fee configuration")
        return jsonify(message="Fee configuration saved", config=config_to_json(config), students_updated=updated)

    @app.route("/admin/fees/students/<student_id>/extras", methods=["POST"], endpoint="save_extra_fees")
    @role_required(Role.ADMIN)
    def save_extra_fees(student_id: str):
        data = payload()
        extra = data.get("extra_fees", data)
        try:
            if not isinstance(extra, dict):
                raise ValidationError("extra_fees must be an object")
            state = fees.upsert_student_extra_fees(student_id=student_id, extra=extra)
            if fees.get_class_fee_config(state.class_id):
                state = fees.recompute_student_installments(student_id)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return system_error_response("saving extra fees")
        return jsonify(message="Extra fees saved", fees=state_to_json(state), summary=summary_to_json(FeeSummary.of(state)))

    @app.route(
        "/admin/fees/students/<student_id>/installments/<int:index>",
        methods=["POST"],
        endpoint="mark_installment",
    )
    @role_required(Role.ADMIN)
    def mark_installment(student_id: str, index: int):
        data = payload()
        paid = str(data.get("paid", True)).lower() not in {"false", "0", "no", ""}
        try:
            state = fees.mark_installment_paid(student_id=student_id, index=index, paid=paid)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return system_error_response("recording the payment")
        return jsonify(
            message="Payment recorded" if paid else "Payment cleared",
            recorded_by=current_user_id(),
            fees=state_to_json(state),
            summary=summary_to_json(FeeSummary.of(state)),
        )
