from flask import Blueprint, current_app, jsonify

from scanrelay.exceptions import SessionNotFound

sessions = Blueprint('sessions', __name__)


def _store():
    return current_app.extensions['scanrelay'].store


@sessions.errorhandler(SessionNotFound)
def handle_session_not_found(exc):
    return jsonify({'error': exc.message, 'sessionId': exc.session_id}), 404


@sessions.route('/', methods=['GET'])
def list_sessions():
    """Summaries of every session still in the store, finished ones included."""
    return jsonify([s.to_dict(include_items=False) for s in _store().sessions()])


@sessions.route('/<string:session_id>', methods=['GET'])
def get_session(session_id):
    session = _store().get(session_id)
    return jsonify(session.to_dict())
