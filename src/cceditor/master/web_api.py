"""Web API for the CC editor.

Provides REST endpoints to load layouts and presets, move and toggle
controls, pick the MIDI port and channel, and send or reset all values.
"""

from flask import Flask, jsonify, request
from flask_cors import CORS
import time
import logging
from .actions import Actions, CONFLICT, INVALID, NOT_FOUND

logger = logging.getLogger('cceditor.api')


STATUS_CODES = {NOT_FOUND: 404, INVALID: 400, CONFLICT: 409}


def _status_code(result: dict) -> int:
    """Map an action result to an HTTP status by its error kind."""
    if result['success']:
        return 200
    return STATUS_CODES.get(result.get('kind'), 500)


def _bad_request(message: str):
    return jsonify({'success': False, 'error': message, 'kind': INVALID}), 400


class EditorWebAPI:
    """Web API server for the CC editor."""

    def __init__(self, controller, host='127.0.0.1', port=5000):
        """Initialize the web API.

        Args:
            controller: Reference to EditorController instance
            host: Host to bind to
            port: Port to bind to
        """
        self.controller = controller
        self.actions = Actions(controller)
        self.host = host
        self.port = port
        self.app = Flask(__name__)
        CORS(self.app)

        self._setup_routes()

    def _path_from_body(self):
        body = request.get_json(silent=True) or {}
        path = body.get('path')
        if not path:
            return None
        return str(path)

    def _setup_routes(self):
        """Set up API routes."""

        @self.app.route('/api/health', methods=['GET'])
        def health():
            """Health check endpoint."""
            return jsonify({
                'status': 'ok',
                'running': self.controller.running,
                'timestamp': time.time()
            })

        @self.app.route('/api/status', methods=['GET'])
        def status():
            """Get session status."""
            return jsonify(self.actions.get_status())

        @self.app.route('/api/controls', methods=['GET'])
        def list_controls():
            """Get all controls in layout order."""
            return jsonify(self.actions.list_controls())

        @self.app.route('/api/controls/<int:index>/value', methods=['POST'])
        def set_value(index):
            """Move a control (sends MIDI when the control is active)."""
            body = request.get_json(silent=True) or {}
            if 'value' not in body:
                return _bad_request('Invalid request: missing value')
            result = self.actions.set_value(index, body['value'])
            return jsonify(result), _status_code(result)

        @self.app.route('/api/controls/<int:index>/on', methods=['POST'])
        def activate_control(index):
            """Activate a control."""
            result = self.actions.set_active(index, True)
            return jsonify(result), _status_code(result)

        @self.app.route('/api/controls/<int:index>/off', methods=['POST'])
        def deactivate_control(index):
            """Deactivate a control."""
            result = self.actions.set_active(index, False)
            return jsonify(result), _status_code(result)

        @self.app.route('/api/layout/load', methods=['POST'])
        def load_layout():
            """Load a layout file."""
            path = self._path_from_body()
            if path is None:
                return _bad_request('Invalid request: missing path')
            result = self.actions.load_layout(path)
            if result['success']:
                logger.info(f"API: Layout loaded ({result['count']} controls)")
            return jsonify(result), _status_code(result)

        @self.app.route('/api/preset/load', methods=['POST'])
        def load_preset():
            """Load a preset file."""
            path = self._path_from_body()
            if path is None:
                return _bad_request('Invalid request: missing path')
            result = self.actions.load_preset(path)
            return jsonify(result), _status_code(result)

        @self.app.route('/api/preset/save', methods=['POST'])
        def save_preset():
            """Save the current values to a preset file."""
            path = self._path_from_body()
            if path is None:
                return _bad_request('Invalid request: missing path')
            result = self.actions.save_preset(path)
            return jsonify(result), _status_code(result)

        @self.app.route('/api/send-all', methods=['POST'])
        def send_all():
            """Send every active control."""
            result = self.actions.send_all()
            if result['success']:
                logger.info(f"API: Sent {result['count']} controls")
            return jsonify(result), _status_code(result)

        @self.app.route('/api/reset-all', methods=['POST'])
        def reset_all():
            """Reset every active control."""
            result = self.actions.reset_all()
            if result['success']:
                logger.info(f"API: Reset {result['count']} controls")
            return jsonify(result), _status_code(result)

        @self.app.route('/api/ports', methods=['GET'])
        def list_ports():
            """Get available MIDI output ports."""
            result = self.actions.list_ports()
            return jsonify(result), _status_code(result)

        @self.app.route('/api/ports/select', methods=['POST'])
        def select_port():
            """Close the current port and open another."""
            body = request.get_json(silent=True) or {}
            result = self.actions.select_port(index=body.get('index'), name=body.get('name'))
            return jsonify(result), _status_code(result)

        @self.app.route('/api/channel', methods=['POST'])
        def select_channel():
            """Select the MIDI channel (1-16)."""
            body = request.get_json(silent=True) or {}
            result = self.actions.select_channel(body.get('channel'))
            return jsonify(result), _status_code(result)

    def run(self):
        """Serve requests on the calling thread until interrupted.

        Requests are handled one at a time so the control bank is only
        ever touched from this thread.
        """
        logger.info(f"Starting web API on {self.host}:{self.port}")
        # Disable Flask's default request logging (we have our own)
        log = logging.getLogger('werkzeug')
        log.setLevel(logging.WARNING)
        self.app.run(host=self.host, port=self.port, debug=False,
                     use_reloader=False, threaded=False)
