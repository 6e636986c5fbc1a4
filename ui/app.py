import io
import os
import sys

from flask import Flask, Response, jsonify, request, send_file
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Ensure the project root and src/ are importable when running from a checkout
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
for path in (ROOT, os.path.join(ROOT, 'src')):
    if path not in sys.path:
        sys.path.insert(0, path)

from citation_manager.config import Config
from citation_manager.exceptions import RecordNotFoundError, UnsupportedFormatError, ValidationError
from citation_manager.formatting import STYLE_NAMES
from citation_manager.providers import record_from_search_result, record_from_url_metadata
from citation_manager.reference_manager import ReferenceManager
from citation_manager.storage import JsonFileStore

from ui.forms import SourceForm


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _citation_json(manager, record):
    data = record.to_dict()
    data['citation'] = manager.format_record(record.id)
    data['in_text'] = manager.in_text(record.id)
    return data


def create_app(store=None, config=None):
    """Create the citation manager web app.

    Args:
        store: KeyValueStore for the bibliography; defaults to a JSON file
               at Config.STORAGE_PATH
        config: Extra Flask config values (e.g. TESTING, RATELIMIT_ENABLED)
    """
    app = Flask(__name__)

    # Configuration
    app.config.update(
        SECRET_KEY=Config.SECRET_KEY,
        RATELIMIT_DEFAULT=Config.RATELIMIT_DEFAULT,
        RATELIMIT_HEADERS_ENABLED=True,
        RATELIMIT_STORAGE_URI="memory://",
    )
    if config:
        app.config.update(config)

    manager = ReferenceManager(store if store is not None else JsonFileStore(Config.STORAGE_PATH))
    app.extensions['citation_manager'] = manager

    # Initialize rate limiter
    limiter = Limiter(
        key_func=get_remote_address,
        app=app,
        default_limits=[app.config["RATELIMIT_DEFAULT"]]
    )
    # Route decorators only hold weak proxies to the limiter; the app owns it
    app.extensions['rate_limiter'] = limiter

    # Error handlers
    @app.errorhandler(ValidationError)
    def validation_error(e):
        app.logger.warning(f"Validation error: {e}")
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(UnsupportedFormatError)
    def unsupported_format_error(e):
        app.logger.warning(f"Unsupported format: {e}")
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(RecordNotFoundError)
    def not_found_record(e):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(404)
    def not_found_error(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(429)
    def ratelimit_handler(e):
        return jsonify({"error": "Rate limit exceeded. Please try again later."}), 429

    @app.errorhandler(500)
    def internal_error(e):
        app.logger.error(f"Internal error: {e}")
        return jsonify({"error": "Internal server error"}), 500

    # Simple health route
    @app.route("/health", methods=["GET"])
    @limiter.exempt
    def health():
        return "ok", 200

    @app.route("/citations", methods=["GET"])
    def list_citations():
        sort_by = request.args.get("sort", "added")
        descending = request.args.get("order", "asc").lower() == "desc"
        source_type = request.args.get("type", "all")
        records = manager.list_records(sort_by, descending, source_type)
        return jsonify({
            "style": manager.preferred_style.value,
            "citations": [_citation_json(manager, r) for r in records],
        })

    @app.route("/citations", methods=["POST"])
    @limiter.limit("30 per minute")
    def add_citation():
        """Add a manually entered citation."""
        form = SourceForm.from_payload(_json_body())
        if not form.validate():
            return jsonify({"error": "Invalid citation", "fields": form.errors}), 400
        record = manager.add(form.to_record())
        app.logger.info(f"Citation added: {record.title}")
        return jsonify(_citation_json(manager, record)), 201

    @app.route("/citations/from-search", methods=["POST"])
    @limiter.limit("30 per minute")
    def add_search_result():
        """Add a selected search result as-is."""
        record = manager.add(record_from_search_result(_json_body()))
        return jsonify(_citation_json(manager, record)), 201

    @app.route("/citations/from-url", methods=["POST"])
    @limiter.limit("30 per minute")
    def add_url_metadata():
        """Add a citation from extracted URL metadata."""
        data = _json_body()
        record = manager.add(record_from_url_metadata(data, url=data.get("url")))
        return jsonify(_citation_json(manager, record)), 201

    @app.route("/citations/<record_id>", methods=["GET"])
    def get_citation(record_id):
        return jsonify(_citation_json(manager, manager.get(record_id)))

    @app.route("/citations/<record_id>", methods=["PUT"])
    @limiter.limit("30 per minute")
    def update_citation(record_id):
        """Replace a citation as a whole."""
        manager.get(record_id)
        form = SourceForm.from_payload(_json_body())
        if not form.validate():
            return jsonify({"error": "Invalid citation", "fields": form.errors}), 400
        record = manager.update(record_id, form.to_record(record_id))
        return jsonify(_citation_json(manager, record))

    @app.route("/citations/<record_id>", methods=["DELETE"])
    def delete_citation(record_id):
        manager.delete(record_id)
        return "", 204

    @app.route("/citations/<record_id>/format", methods=["GET"])
    def format_citation(record_id):
        style = request.args.get("style") or None
        return jsonify({
            "id": record_id,
            "style": (style or manager.preferred_style.value).lower(),
            "citation": manager.format_record(record_id, style),
            "in_text": manager.in_text(record_id, style, request.args.get("page")),
        })

    @app.route("/bibliography", methods=["GET"])
    def bibliography():
        style = request.args.get("style") or None
        return Response(manager.format_all(style), mimetype="text/plain")

    @app.route("/preferred-style", methods=["GET"])
    def get_preferred_style():
        style = manager.preferred_style
        return jsonify({
            "style": style.value,
            "name": style.display_name,
            "available": {s.value: name for s, name in STYLE_NAMES.items()},
        })

    @app.route("/preferred-style", methods=["PUT"])
    def set_preferred_style():
        style = manager.set_preferred_style(_json_body().get("style", ""))
        return jsonify({"style": style.value, "name": style.display_name})

    @app.route('/export/<export_format>')
    @limiter.limit("10 per minute")
    def export(export_format):
        """Export the bibliography in the specified format."""
        style = request.args.get("style") or None
        content, filename, mime = manager.export(export_format, style)
        app.logger.info(f"Export {export_format}: {filename}")

        if isinstance(content, bytes):
            return send_file(
                io.BytesIO(content),
                as_attachment=True,
                download_name=filename,
                mimetype=mime
            )
        return Response(
            content,
            mimetype=mime,
            headers={'Content-Disposition': f'attachment; filename={filename}'}
        )

    return app


if __name__ == "__main__":
    # In production, use a production WSGI server like Gunicorn
    create_app().run(debug=os.environ.get('FLASK_DEBUG', 'False').lower() == 'true')
