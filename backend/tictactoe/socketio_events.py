from flask_socketio import join_room, leave_room, emit
from flask import current_app
from tictactoe import socketio
from tictactoe.services.games.tables import get_controller


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_table(data):
    table_code = (data or {}).get('table_code')
    if not table_code:
        emit('error', {'message': 'table_code is required'})
        return
    controller = get_controller(current_app._get_current_object(), table_code)
    if controller is None:
        emit('error', {'message': 'Table not found'})
        return
    room = f"table:{table_code.upper()}"
    join_room(room)
    emit('joined', {'room': room})
    # Late joiners render from the current state right away
    emit('state_update', controller.snapshot())


def handle_leave_table(data):
    table_code = (data or {}).get('table_code')
    if not table_code:
        emit('error', {'message': 'table_code is required'})
        return
    room = f"table:{table_code.upper()}"
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('join_table', handle_join_table, namespace=namespace)
        socketio.on_event('leave_table', handle_leave_table, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
