"""JSON/HTTP surface over a :class:`FleetDashboard`.

Every response body uses the camelCase keys of the snapshot models.
Bad enum input is answered with ``400 {"error": ...}``; unknown alert ids
with ``404``.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from aiohttp import web

from evfleet._constants import FILTER_ALL
from evfleet.dashboard import FleetDashboard
from evfleet.models.telemetry import ChargingStatus
from evfleet.models.vehicle import VehicleStatus

_logger = logging.getLogger(__name__)


def _error(status: int, message: str) -> web.Response:
    return web.json_response({"error": message}, status=status)


async def _read_json(request: web.Request) -> dict[str, Any]:
    if not request.can_read_body:
        return {}
    try:
        body = await request.json()
    except json.JSONDecodeError as exc:
        raise web.HTTPBadRequest(
            text=json.dumps({"error": f"invalid JSON body: {exc.msg}"}),
            content_type="application/json",
        ) from exc
    if not isinstance(body, dict):
        raise web.HTTPBadRequest(
            text=json.dumps({"error": "JSON body must be an object"}),
            content_type="application/json",
        )
    return body


class DashboardServer:
    """aiohttp handlers bound to one dashboard instance."""

    def __init__(self, dashboard: FleetDashboard) -> None:
        self.dashboard = dashboard

    def create_app(self) -> web.Application:
        app = web.Application()

        app.router.add_get("/health", self.handle_health)
        app.router.add_get("/api/snapshot", self.handle_snapshot)
        app.router.add_get("/api/vehicles", self.handle_vehicles)

        # Simulation
        app.router.add_post("/api/simulation/start", self.handle_simulation_start)
        app.router.add_post("/api/simulation/stop", self.handle_simulation_stop)
        app.router.add_post("/api/simulation/toggle", self.handle_simulation_toggle)
        app.router.add_put("/api/simulation/interval", self.handle_simulation_interval)
        app.router.add_delete("/api/simulation/error", self.handle_simulation_clear_error)

        # Filters
        app.router.add_get("/api/filters", self.handle_filters)
        app.router.add_post("/api/filters/status", self.handle_filter_status)
        app.router.add_post("/api/filters/charging", self.handle_filter_charging)
        app.router.add_delete("/api/filters", self.handle_filters_clear)
        app.router.add_post("/api/filters/back", self.handle_filters_back)
        app.router.add_post("/api/filters/forward", self.handle_filters_forward)

        # Sorting
        app.router.add_put("/api/sort", self.handle_sort)
        app.router.add_post("/api/sort/toggle", self.handle_sort_toggle)

        # Alerts
        app.router.add_get("/api/alerts", self.handle_alerts)
        app.router.add_post("/api/alerts/read-all", self.handle_alerts_read_all)
        app.router.add_delete("/api/alerts/dismissed", self.handle_alerts_clear_dismissed)
        app.router.add_post("/api/alerts/{alert_id}/read", self.handle_alert_read)
        app.router.add_post("/api/alerts/{alert_id}/dismiss", self.handle_alert_dismiss)

        app.on_cleanup.append(self._on_cleanup)
        return app

    async def _on_cleanup(self, app: web.Application) -> None:
        self.dashboard.close()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def handle_health(self, request: web.Request) -> web.Response:
        return web.json_response(
            {
                "status": "ok",
                "vehicles": len(self.dashboard.store),
                "simulating": self.dashboard.simulation.is_running,
            }
        )

    async def handle_snapshot(self, request: web.Request) -> web.Response:
        return web.json_response(self.dashboard.snapshot().to_json_dict())

    async def handle_vehicles(self, request: web.Request) -> web.Response:
        vehicles = self.dashboard.visible_vehicles()
        return web.json_response([vehicle.to_json_dict() for vehicle in vehicles])

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def _simulation_response(self) -> web.Response:
        return web.json_response(self.dashboard.simulation_status().to_json_dict())

    async def handle_simulation_start(self, request: web.Request) -> web.Response:
        self.dashboard.simulation.start()
        return self._simulation_response()

    async def handle_simulation_stop(self, request: web.Request) -> web.Response:
        self.dashboard.simulation.stop()
        return self._simulation_response()

    async def handle_simulation_toggle(self, request: web.Request) -> web.Response:
        self.dashboard.simulation.toggle()
        return self._simulation_response()

    async def handle_simulation_interval(self, request: web.Request) -> web.Response:
        body = await _read_json(request)
        value = body.get("intervalMs")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return _error(400, "intervalMs must be a number")
        self.dashboard.simulation.set_interval(value)
        return self._simulation_response()

    async def handle_simulation_clear_error(self, request: web.Request) -> web.Response:
        self.dashboard.simulation.clear_error()
        return self._simulation_response()

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def _filters_response(self) -> web.Response:
        sync = self.dashboard.filters
        return web.json_response(
            {
                "pending": sync.pending.to_json_dict(),
                "committed": sync.committed.to_json_dict(),
                "query": sync.query,
                "settled": sync.is_settled,
            }
        )

    async def handle_filters(self, request: web.Request) -> web.Response:
        return self._filters_response()

    async def handle_filter_status(self, request: web.Request) -> web.Response:
        body = await _read_json(request)
        value = str(body.get("value", ""))
        if value != FILTER_ALL and value not in {status.value for status in VehicleStatus}:
            return _error(400, f"unknown status {value!r}")
        self.dashboard.filters.toggle_status(value)
        return self._filters_response()

    async def handle_filter_charging(self, request: web.Request) -> web.Response:
        body = await _read_json(request)
        value = str(body.get("value", ""))
        if value != FILTER_ALL and value not in {state.value for state in ChargingStatus}:
            return _error(400, f"unknown charging status {value!r}")
        self.dashboard.filters.toggle_charging(value)
        return self._filters_response()

    async def handle_filters_clear(self, request: web.Request) -> web.Response:
        self.dashboard.filters.clear()
        return self._filters_response()

    async def handle_filters_back(self, request: web.Request) -> web.Response:
        self.dashboard.filters.history.back()
        return self._filters_response()

    async def handle_filters_forward(self, request: web.Request) -> web.Response:
        self.dashboard.filters.history.forward()
        return self._filters_response()

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------

    async def handle_sort(self, request: web.Request) -> web.Response:
        body = await _read_json(request)
        try:
            sort = self.dashboard.set_sort(option=body.get("option"), order=body.get("order"))
        except ValueError as exc:
            return _error(400, str(exc))
        return web.json_response(sort.to_json_dict())

    async def handle_sort_toggle(self, request: web.Request) -> web.Response:
        return web.json_response(self.dashboard.toggle_sort_order().to_json_dict())

    # ------------------------------------------------------------------
    # Alerts
    # ------------------------------------------------------------------

    def _alerts_response(self) -> web.Response:
        engine = self.dashboard.alerts
        return web.json_response(
            {
                "alerts": [alert.to_json_dict() for alert in engine.active_alerts],
                "unreadCount": engine.unread_count,
                "criticalCount": engine.critical_count,
            }
        )

    async def handle_alerts(self, request: web.Request) -> web.Response:
        return self._alerts_response()

    async def handle_alert_read(self, request: web.Request) -> web.Response:
        alert_id = request.match_info["alert_id"]
        if not self.dashboard.alerts.mark_as_read(alert_id):
            return _error(404, f"unknown alert {alert_id!r}")
        return self._alerts_response()

    async def handle_alert_dismiss(self, request: web.Request) -> web.Response:
        alert_id = request.match_info["alert_id"]
        if not self.dashboard.alerts.dismiss(alert_id):
            return _error(404, f"unknown alert {alert_id!r}")
        return self._alerts_response()

    async def handle_alerts_read_all(self, request: web.Request) -> web.Response:
        self.dashboard.alerts.mark_all_as_read()
        return self._alerts_response()

    async def handle_alerts_clear_dismissed(self, request: web.Request) -> web.Response:
        removed = self.dashboard.alerts.clear_dismissed()
        _logger.debug("Cleared %d dismissed alert(s)", removed)
        return self._alerts_response()


def create_app(dashboard: FleetDashboard) -> web.Application:
    return DashboardServer(dashboard).create_app()
