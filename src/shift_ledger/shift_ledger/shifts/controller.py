from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta

from flask import Flask, current_app, jsonify, request, session

from ..common.datetime_utils import minutes_since
from ..common.http import error_response, login_required, to_json
from ..core.enums import EntryType
from ..core.exceptions import ValidationError
from ..container import Container
from ..monitoring.overtime import Ticker
from .photo import ProvidedPhoto

logger = logging.getLogger(__name__)


def _employee_id() -> str:
    return str(session["employee_id"])


def _session_alerts() -> dict[int, bool]:
    return {int(k): bool(v) for k, v in (session.get("overtime_alerts") or {}).items()}


def _session_ticker() -> Ticker:
    last = session.get("overtime_last_tick")
    return Ticker(
        interval=timedelta(seconds=int(current_app.config.get("OVERTIME_TICK_SECONDS", 60))),
        last=datetime.fromisoformat(last) if last else None,
    )


def _store_overtime(alerts: dict[int, bool], ticker: Ticker) -> None:
    session["overtime_alerts"] = {str(k): v for k, v in alerts.items()}
    if ticker.last is not None:
        session["overtime_last_tick"] = ticker.last.isoformat()


def register(app: Flask, container: Container) -> None:
    def run_overtime(force: bool):
        ticker = _session_ticker()
        result = container.overtime_service.tick(_employee_id(), _session_alerts(), ticker=ticker, force=force)
        _store_overtime(result.alerts, ticker)
        return result

    def refresh_overtime() -> None:
        # Runs after a committed command; its failure is logged, not returned.
        try:
            run_overtime(force=True)
        except Exception:
            logger.exception("overtime refresh failed employee=%s", _employee_id())

    @app.route("/api/shifts", methods=["GET"], endpoint="api_shifts")
    @login_required
    def api_shifts():
        try:
            board = container.shift_service.board(_employee_id())
            now = container.clock.now()
            slots = []
            for slot in board.slots:
                entry = board.state.active(slot)
                slots.append(
                    {
                        "slot": slot,
                        "entry": to_json(entry) if entry else None,
                        "elapsed_minutes": minutes_since(entry.check_in if entry else None, now),
                    }
                )
            return jsonify(
                {
                    "success": True,
                    "slots": slots,
                    "night_mode": board.state.night_mode,
                    "night_mode_allowed": board.night_mode_allowed,
                    "night_mode_locked": board.night_mode_locked,
                    "absent_today": board.absent_today,
                    "blocked_by_other_shift": board.blocked_by_other_shift,
                }
            )
        except Exception as e:
            return error_response(e)

    @app.route("/api/shifts/<int:slot>/start", methods=["POST"], endpoint="api_shift_start")
    @login_required
    def api_shift_start(slot: int):
        data = request.get_json(silent=True) or {}
        try:
            entry = asyncio.run(
                container.shift_service.start_shift(
                    _employee_id(),
                    slot,
                    equipment_id=data.get("equipment_id") or None,
                    photo=ProvidedPhoto(data.get("photo")),
                )
            )
            refresh_overtime()
            return jsonify({"success": True, "entry": to_json(entry)})
        except Exception as e:
            return error_response(e)

    @app.route("/api/shifts/<int:slot>/stop", methods=["POST"], endpoint="api_shift_stop")
    @login_required
    def api_shift_stop(slot: int):
        data = request.get_json(silent=True) or {}
        try:
            entry = asyncio.run(
                container.shift_service.stop_shift(_employee_id(), slot, photo=ProvidedPhoto(data.get("photo")))
            )
            refresh_overtime()
            return jsonify({"success": True, "entry": to_json(entry)})
        except Exception as e:
            return error_response(e)

    @app.route("/api/shifts/night-mode", methods=["POST"], endpoint="api_night_mode")
    @login_required
    def api_night_mode():
        data = request.get_json(silent=True) or {}
        try:
            state = container.shift_service.set_night_mode(_employee_id(), bool(data.get("enabled")))
            return jsonify({"success": True, "night_mode": state.night_mode})
        except Exception as e:
            return error_response(e)

    @app.route("/api/equipment/candidates/<int:slot>", methods=["GET"], endpoint="api_equipment_candidates")
    @login_required
    def api_equipment_candidates(slot: int):
        # ?selection=2:eq-1,3:eq-2 carries the client's unsaved choices for other slots
        selection: dict[int, str] = {}
        raw = (request.args.get("selection") or "").strip()
        try:
            for part in filter(None, raw.split(",")):
                s, _, eid = part.partition(":")
                selection[int(s)] = eid
        except ValueError:
            return error_response(ValidationError("Invalid selection"))

        try:
            items = container.shift_service.candidates(_employee_id(), slot, selection=selection)
            return jsonify(
                {
                    "success": True,
                    "candidates": [
                        {
                            "equipment_id": c.equipment.equipment_id,
                            "name": c.equipment.name,
                            "availability": c.availability.value,
                            "selectable": c.selectable,
                        }
                        for c in items
                    ],
                }
            )
        except Exception as e:
            return error_response(e)

    @app.route("/api/absences", methods=["POST"], endpoint="api_absences")
    @login_required
    def api_absences():
        data = request.get_json(silent=True) or {}
        try:
            try:
                entry_type = EntryType(str(data.get("type", "")).upper())
            except ValueError:
                raise ValidationError("Unknown absence type")
            entry = container.absence_service.mark_absence(_employee_id(), entry_type)
            return jsonify({"success": True, "entry": to_json(entry)})
        except Exception as e:
            return error_response(e)

    @app.route("/api/overtime/tick", methods=["POST"], endpoint="api_overtime_tick")
    @login_required
    def api_overtime_tick():
        try:
            result = run_overtime(force=bool(request.args.get("force")))
            return jsonify(
                {
                    "success": True,
                    "alerts": {str(k): v for k, v in result.alerts.items()},
                    "fired": list(result.fired),
                    "cleared": list(result.cleared),
                }
            )
        except Exception as e:
            return error_response(e)
