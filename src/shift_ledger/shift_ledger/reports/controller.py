from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import format_duration_short, parse_iso_date
from ..common.http import employer_required, error_response, login_required, to_json
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.exceptions import ValidationError
from ..container import Container
from .service import report_to_csv


def _employee_id() -> str:
    return str(session["employee_id"])


def register(app: Flask, container: Container) -> None:
    def current_month() -> str:
        return request.args.get("month") or container.clock.now().strftime("%Y-%m")

    def organization_id() -> str:
        return container.directory.context_for(_employee_id()).employee.organization_id

    @app.route("/api/stats", methods=["GET"], endpoint="api_stats")
    @login_required
    def api_stats():
        try:
            month = current_month()
            stats = container.stats_service.month_stats(_employee_id(), month)
            rows = container.stats_service.month_matrix(_employee_id(), month)
            return jsonify(
                {
                    "success": True,
                    "month": month,
                    "stats": {**to_json(stats), "day_off": stats.day_off},
                    "matrix": [
                        {
                            "label": row.label,
                            "equipment_id": row.equipment_id,
                            "cells": [
                                {
                                    "date": c.work_date,
                                    "code": c.code,
                                    "minutes": c.minutes,
                                    "text": format_duration_short(c.minutes),
                                    "pending": c.pending,
                                    "corrected": c.corrected,
                                    "night": c.night,
                                }
                                for c in row.cells
                            ],
                        }
                        for row in rows
                    ],
                }
            )
        except Exception as e:
            return error_response(e)

    @app.route("/api/payroll/today", methods=["GET"], endpoint="api_payroll_today")
    @login_required
    def api_payroll_today():
        try:
            earnings = container.payroll_service.today_earnings(_employee_id())
            return jsonify({"success": True, "earnings": {**to_json(earnings), "total": earnings.total}})
        except Exception as e:
            return error_response(e)

    @app.route("/admin/overview", methods=["GET"], endpoint="admin_overview")
    @employer_required
    def admin_overview():
        try:
            overview = container.stats_service.organization_overview(organization_id(), current_month())
            return jsonify({"success": True, "overview": to_json(overview)})
        except Exception as e:
            return error_response(e)

    @app.route("/admin/payroll", methods=["GET"], endpoint="admin_payroll")
    @employer_required
    def admin_payroll():
        try:
            items = container.payroll_service.monthly_payroll(organization_id(), current_month())
            return jsonify(
                {
                    "success": True,
                    "payroll": [{**to_json(p), "worked_hours": p.worked_hours} for p in items],
                }
            )
        except Exception as e:
            return error_response(e)

    @app.route("/admin/report.csv", methods=["GET"], endpoint="admin_report_csv")
    @employer_required
    def admin_report_csv():
        try:
            today = container.clock.now().date()
            end = parse_iso_date(request.args["end"]) if request.args.get("end") else today
            start = (
                parse_iso_date(request.args["start"])
                if request.args.get("start")
                else end - timedelta(days=DEFAULT_REPORT_DAYS - 1)
            )
            if start > end:
                raise ValidationError("start must not be after end")

            data = container.report_service.build_timesheet_report(
                organization_id=organization_id(),
                start=start,
                end=end,
                employee_id=request.args.get("employee_id") or None,
            )
        except Exception as e:
            return error_response(e)

        filename = f"report_{start:%Y-%m-%d}_{end:%Y-%m-%d}.csv"
        return app.response_class(
            report_to_csv(data),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/admin/logs/<log_id>/force-finish", methods=["POST"], endpoint="admin_force_finish")
    @employer_required
    def admin_force_finish(log_id: str):
        try:
            entry = container.shift_service.force_finish(log_id, organization_id=organization_id())
            return jsonify({"success": True, "entry": to_json(entry)})
        except Exception as e:
            return error_response(e)

    @app.route("/admin/logs/<log_id>/correct", methods=["POST"], endpoint="admin_correct_log")
    @employer_required
    def admin_correct_log(log_id: str):
        data = request.get_json(silent=True) or {}
        try:
            try:
                minutes = int(data.get("duration_minutes"))
            except (TypeError, ValueError):
                raise ValidationError("duration_minutes must be an integer")
            entry = container.correction_service.correct_duration(
                log_id, organization_id=organization_id(), duration_minutes=minutes, note=str(data.get("note") or ""))
            return jsonify({"success": True, "entry": to_json(entry)})
        except Exception as e:
            return error_response(e)
