from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import ValidationError
from ..web import api_view, current_role, roles_required
from .service import PAYROLL_ROLES


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("JSON body is required")
    return body


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service
    payroll_only = roles_required(PAYROLL_ROLES)

    @app.route("/api/monthly-salary/calculate", methods=["POST"], endpoint="calculate_salary")
    @payroll_only
    @api_view("calculating monthly salary")
    def calculate_salary():
        body = _json_body()
        view = service.compute_draft(
            current_role=current_role(),
            staff_id=body.get("staff_id"),
            month=body.get("month"),
            year=body.get("year"),
            commission=body.get("commission"),
        )
        return jsonify({"success": True, "data": view.to_dict()})

    @app.route("/api/monthly-salary", methods=["GET"], endpoint="list_salaries")
    @payroll_only
    @api_view("fetching monthly salaries")
    def list_salaries():
        views = service.list_salaries(
            current_role=current_role(),
            staff_id=request.args.get("staff_id"),
            month=request.args.get("month"),
            year=request.args.get("year"),
            status=request.args.get("status"),
        )
        return jsonify({"success": True, "count": len(views), "data": [v.to_dict() for v in views]})

    @app.route("/api/monthly-salary/staff/<int:staff_id>", methods=["GET"], endpoint="list_staff_salaries")
    @payroll_only
    @api_view("fetching monthly salaries")
    def list_staff_salaries(staff_id: int):
        views = service.list_salaries(current_role=current_role(), staff_id=staff_id, year=request.args.get("year"))
        return jsonify({"success": True, "count": len(views), "data": [v.to_dict() for v in views]})

    @app.route("/api/monthly-salary/<int:salary_id>", methods=["GET"], endpoint="get_salary")
    @payroll_only
    @api_view("fetching monthly salary")
    def get_salary(salary_id: int):
        view = service.get_salary(current_role=current_role(), salary_id=salary_id)
        return jsonify({"success": True, "data": view.to_dict()})

    @app.route("/api/monthly-salary/<int:salary_id>/commission", methods=["PUT"], endpoint="update_salary_commission")
    @payroll_only
    @api_view("updating monthly salary")
    def update_salary_commission(salary_id: int):
        body = _json_body()
        if "commission" not in body:
            raise ValidationError("Commission is required")
        view = service.update_commission(
            current_role=current_role(), salary_id=salary_id, commission=body["commission"]
        )
        return jsonify({"success": True, "data": view.to_dict()})

    @app.route("/api/monthly-salary/<int:salary_id>/finalize", methods=["POST"], endpoint="finalize_salary")
    @payroll_only
    @api_view("finalizing monthly salary")
    def finalize_salary(salary_id: int):
        view = service.finalize(current_role=current_role(), salary_id=salary_id)
        return jsonify({"success": True, "data": view.to_dict()})

    @app.route("/api/monthly-salary/<int:salary_id>/mark-paid", methods=["POST"], endpoint="mark_salary_paid")
    @payroll_only
    @api_view("marking monthly salary paid")
    def mark_salary_paid(salary_id: int):
        view = service.mark_paid(current_role=current_role(), salary_id=salary_id)
        return jsonify({"success": True, "data": view.to_dict()})

    @app.route("/api/monthly-salary/<int:salary_id>", methods=["DELETE"], endpoint="delete_salary_draft")
    @payroll_only
    @api_view("deleting monthly salary")
    def delete_salary_draft(salary_id: int):
        service.delete_draft(current_role=current_role(), salary_id=salary_id)
        return jsonify({"success": True, "message": "Salary draft deleted successfully"})

    @app.route("/api/monthly-salary/bulk", methods=["DELETE"], endpoint="bulk_delete_salary_drafts")
    @payroll_only
    @api_view("deleting salary records")
    def bulk_delete_salary_drafts():
        body = _json_body()
        result = service.bulk_delete_drafts(current_role=current_role(), salary_ids=body.get("ids"))
        return jsonify(
            {
                "success": True,
                "message": f"Successfully deleted {result.deleted_count} salary record(s)",
                "data": result.to_dict(),
            }
        )
