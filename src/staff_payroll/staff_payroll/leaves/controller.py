from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..web import api_view, current_role, login_required, roles_required

# request body field -> service field
_UPDATE_FIELDS = {
    "start_date": "start_date",
    "end_date": "end_date",
    "type": "kind",
    "kind": "kind",
    "reason": "reason",
    "status": "status",
}


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("JSON body is required")
    return body


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leaves", methods=["POST"], endpoint="create_leave")
    @login_required
    @api_view("creating leave request")
    def create_leave():
        body = _json_body()
        view = service.create_leave(
            staff_id=body.get("staff_id"),
            start_date=body.get("start_date"),
            end_date=body.get("end_date"),
            kind=body.get("type", body.get("kind")),
            reason=body.get("reason"),
        )
        return jsonify({"success": True, "data": view.to_dict()}), 201

    @app.route("/api/leaves", methods=["GET"], endpoint="list_leaves")
    @login_required
    @api_view("fetching leaves")
    def list_leaves():
        views = service.list_leaves(
            staff_id=request.args.get("staff_id"),
            kind=request.args.get("type"),
            year=request.args.get("year"),
            status=request.args.get("status"),
        )
        return jsonify({"success": True, "count": len(views), "data": [v.to_dict() for v in views]})

    @app.route("/api/leaves/staff/<int:staff_id>", methods=["GET"], endpoint="list_staff_leaves")
    @login_required
    @api_view("fetching leaves")
    def list_staff_leaves(staff_id: int):
        views = service.list_leaves_for_staff(
            staff_id=staff_id,
            year=request.args.get("year"),
            kind=request.args.get("type"),
        )
        return jsonify({"success": True, "count": len(views), "data": [v.to_dict() for v in views]})

    @app.route("/api/leaves/quota/<int:staff_id>", methods=["GET"], endpoint="leave_quota")
    @login_required
    @api_view("fetching leave quota")
    def leave_quota(staff_id: int):
        quota = service.get_quota(staff_id=staff_id, year=request.args.get("year"))
        return jsonify({"success": True, "data": quota.to_dict()})

    @app.route("/api/leaves/<int:leave_id>", methods=["GET"], endpoint="get_leave")
    @login_required
    @api_view("fetching leave")
    def get_leave(leave_id: int):
        return jsonify({"success": True, "data": service.get_leave(leave_id=leave_id).to_dict()})

    @app.route("/api/leaves/<int:leave_id>", methods=["PUT"], endpoint="update_leave")
    @roles_required({Role.MANAGER})
    @api_view("updating leave")
    def update_leave(leave_id: int):
        body = _json_body()
        changes = {_UPDATE_FIELDS[k]: v for k, v in body.items() if k in _UPDATE_FIELDS}
        view = service.update_leave(current_role=current_role(), leave_id=leave_id, changes=changes)
        return jsonify({"success": True, "data": view.to_dict()})

    @app.route("/api/leaves/<int:leave_id>", methods=["DELETE"], endpoint="delete_leave")
    @roles_required({Role.MANAGER})
    @api_view("deleting leave")
    def delete_leave(leave_id: int):
        service.delete_leave(current_role=current_role(), leave_id=leave_id)
        return jsonify({"success": True, "message": "Leave request deleted successfully"})
