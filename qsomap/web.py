"""
Web API for the QSO map: upload an ADIF log, scrub through days, pan/zoom/hover.

Run with: qsomap serve   (or: flask --app qsomap.web run)
Access at: http://localhost:5000 or behind proxy with URL_PREFIX set
"""

import logging
import math
import os
from datetime import datetime, timezone

from flask import Flask, Blueprint, Response, request, jsonify
from werkzeug.middleware.proxy_fix import ProxyFix

from .adif import parse_adif
from .config import load_config
from .errors import AdifParseError, UploadError
from .plot import render_png
from .session import MapSession
from .timeline import parse_qso_date
from .viewport import event_from_dict


logger = logging.getLogger(__name__)

URL_PREFIX = os.getenv('URL_PREFIX', '')
UPLOAD_FIELD = "adifFile"

app = Flask(__name__)

# Support running behind reverse proxy
if URL_PREFIX:
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

bp = Blueprint('main', __name__, url_prefix=URL_PREFIX)

# There is one map per server process
_session: MapSession | None = None


def get_session() -> MapSession:
    global _session
    if _session is None:
        _session = MapSession(load_config())
    return _session


def set_session(session: MapSession | None) -> None:
    global _session
    _session = session


def read_upload() -> str:
    """Text of the uploaded ADIF file.

    Raises:
        UploadError: if the request has no file
    """
    upload = request.files.get(UPLOAD_FIELD)
    if upload is None or not upload.filename:
        raise UploadError("No file provided")
    return upload.read().decode('utf-8', errors='replace')


def map_state() -> dict:
    session = get_session()
    tooltip = session.tooltip()
    return {
        "view": session.view.as_dict(),
        "tooltip": tooltip.as_dict() if tooltip else None,
        "pointer": session.view.pointer,
    }


@app.errorhandler(UploadError)
def handle_upload_error(e):
    return jsonify({"error": str(e)}), 400


@app.errorhandler(AdifParseError)
def handle_parse_error(e):
    logger.warning("Rejected ADIF upload: %s", e)
    return jsonify({"error": str(e)}), 422


# ============================================================
# API Routes
# ============================================================

@bp.route("/api/parse-adif", methods=["POST"])
def api_parse_adif():
    """Parse an uploaded ADIF file and return its records."""
    text = read_upload()
    records = parse_adif(text, get_session().config["normalize_tags"])
    return jsonify(records)


@bp.route("/api/map/load", methods=["POST"])
def api_map_load():
    """Parse an uploaded ADIF file into the map session."""
    session = get_session()
    session.load_text(read_upload())
    return jsonify(session.summary())


@bp.route("/api/map/timeline")
def api_map_timeline():
    return jsonify(get_session().summary())


@bp.route("/api/map/select", methods=["POST"])
def api_map_select():
    """Select a day by slider percentage {"percent": 40} or date {"date": "2022-01-15"}."""
    session = get_session()
    data = request.get_json(silent=True) or {}

    if "percent" in data:
        try:
            percent = float(data["percent"])
        except (TypeError, ValueError):
            return jsonify({"error": "percent must be a number"}), 400
        if not math.isfinite(percent):
            return jsonify({"error": "percent must be a finite number"}), 400
        session.select_percent(percent)
    elif "date" in data:
        value = str(data["date"]).replace("-", "")
        day = parse_qso_date(value)
        if day is None:
            return jsonify({"error": f"Invalid date: {data['date']}"}), 400
        session.select_date(day)
    else:
        return jsonify({"error": "Expected 'percent' or 'date'"}), 400

    return jsonify(session.summary())


@bp.route("/api/map/resize", methods=["POST"])
def api_map_resize():
    data = request.get_json(silent=True) or {}
    try:
        width, height = float(data["width"]), float(data["height"])
        if not (math.isfinite(width) and math.isfinite(height)):
            raise ValueError("width and height must be finite")
        changed = get_session().resize(width, height)
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"error": f"Bad canvas size: {e}"}), 400
    return jsonify({"changed": changed, **map_state()})


@bp.route("/api/map/event", methods=["POST"])
def api_map_event():
    """Apply a pointer/wheel/zoom event, e.g. {"type": "pointermove", "x": 10, "y": 20}."""
    data = request.get_json(silent=True) or {}
    try:
        event = event_from_dict(data)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    get_session().handle(event)
    return jsonify(map_state())


@bp.route("/api/map/frame")
def api_map_frame():
    frame = get_session().frame()
    return jsonify({**frame.as_dict(), **map_state()})


@bp.route("/api/map.png")
def api_map_png():
    png = render_png(get_session().frame())
    return Response(png, mimetype="image/png")


@bp.route("/api/map/geometry/reload", methods=["POST"])
def api_geometry_reload():
    """Retry loading the map background after a failure."""
    session = get_session()
    session.reload_geometry()
    frame = session.frame()
    return jsonify({"error": frame.error, "polygons": len(frame.polygons)})


@bp.route("/health")
def health():
    """Health check endpoint for monitoring."""
    return jsonify({
        "status": "ok",
        "service": "qsomap",
        "version": "1.0.0",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }), 200


app.register_blueprint(bp)


def run(host: str = "0.0.0.0", port: int | None = None, debug: bool = False) -> None:
    port = port or int(os.getenv('PORT', 5000))
    print("Starting QSO Map Web API...")
    print(f"Access at: http://localhost:{port}{URL_PREFIX}/")
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    logging.basicConfig(level=get_session().config["log_level"],
                        format="%(levelname)s %(name)s: %(message)s")
    run(debug=True)
