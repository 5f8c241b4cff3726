from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, current_context, json_body, ok, require_field
from ..container import Container
from ..core.exceptions import StoreUnavailableError


def register(app: Flask, container: Container) -> None:
    settings = container.settings_service
    admin_only = admin_required(container)

    @app.route("/api/rates", methods=["GET"], endpoint="get_rates")
    def get_rates():
        return ok(rates=settings.get_rates().to_dict())

    @app.route("/api/rates", methods=["PUT"], endpoint="update_rates")
    @admin_only
    def update_rates():
        data = json_body()
        rates = settings.update_rates(
            current_context(container),
            weekday_rate=require_field(data, "weekday"),
            weekend_rate=require_field(data, "weekend"),
        )
        return ok(rates=rates.to_dict())

    @app.route("/api/settings", methods=["GET"], endpoint="get_settings")
    def get_settings():
        return ok(auto_refresh=settings.get_auto_refresh(), last_manual_refresh=settings.last_manual_refresh())

    @app.route("/api/settings/auto-refresh", methods=["PUT"], endpoint="set_auto_refresh")
    @admin_only
    def set_auto_refresh():
        data = json_body()
        settings.set_auto_refresh(current_context(container), enabled=bool(require_field(data, "enabled")))
        return ok(auto_refresh=settings.get_auto_refresh())

    @app.route("/api/settings/refresh", methods=["POST"], endpoint="manual_refresh")
    def manual_refresh():
        when = settings.trigger_manual_refresh(current_context(container))
        return ok(last_manual_refresh=when.isoformat())

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        try:
            available = settings.store_available()
        except StoreUnavailableError as e:
            return jsonify({"success": False, "store": {"available": False, "error": str(e)}}), 503
        return ok(store={"available": available}, sessions=container.auth_service.active_session_count())
