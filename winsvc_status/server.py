"""Flask server exposing a read-only JSON API over service status."""

import platform

from flask import Flask
from flask import jsonify
from flask import request

from .errors import InvalidArgument
from .errors import PermissionDenied
from .errors import PlatformError
from .errors import ServiceInspectionError
from .errors import UnsupportedPlatform
from .service import ServiceInspector
from .service import ServiceState

# Error type -> HTTP status
_ERROR_STATUS = {
    InvalidArgument: 400,
    PermissionDenied: 403,
    UnsupportedPlatform: 501,
    PlatformError: 502,
}


def _no_cache(response):
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"
    return response


def create_app(inspector: ServiceInspector | None = None) -> Flask:
    """
    Create Flask app serving service status.

    Args:
        inspector: Inspector to query (default: the process-wide inspector
            for this platform)

    Returns:
        Configured Flask app
    """
    if inspector is None:
        from . import _default_inspector

        inspector = _default_inspector()

    app = Flask(__name__)
    app.config["INSPECTOR"] = inspector

    @app.errorhandler(ServiceInspectionError)
    def handle_inspection_error(e: ServiceInspectionError):
        status = next(
            (code for error_type, code in _ERROR_STATUS.items() if isinstance(e, error_type)),
            500,
        )
        body = {"error": type(e).__name__, "message": str(e)}
        if isinstance(e, PermissionDenied):
            body["resource"] = e.resource.value
        if isinstance(e, PlatformError):
            body["winerror"] = e.winerror
        return _no_cache(jsonify(body)), status

    @app.route("/api/health")
    def health():
        """Report whether this host can inspect services."""
        return _no_cache(
            jsonify({"supported": inspector.supported, "platform": platform.system()})
        )

    @app.route("/api/services")
    def get_services():
        """List services, optionally filtered by ?state=..."""
        wanted = request.args.getlist("state")
        try:
            states = {ServiceState(value) for value in wanted}
        except ValueError:
            return _no_cache(jsonify({"error": "Invalid 'state' parameter"})), 400

        records = inspector.list_services()
        if states:
            records = [r for r in records if r.state in states]

        return _no_cache(jsonify({"services": [r.to_dict() for r in records]}))

    @app.route("/api/services/<name>")
    def get_service(name: str):
        """Get status of a single service."""
        return _no_cache(jsonify(inspector.get_service_status(name).to_dict()))

    @app.route("/api/services/<name>/exists")
    def get_service_exists(name: str):
        """Check whether a service is registered."""
        return _no_cache(jsonify({"name": name, "exists": inspector.service_exists(name)}))

    return app
