from flask import Blueprint, jsonify, request, current_app
from tictactoe.services.games.tables import create_table, get_controller


tables = Blueprint('tables', __name__)


def _controller_or_404(table_code):
    controller = get_controller(current_app._get_current_object(), table_code)
    if controller is None:
        return None, (jsonify({'error': 'Table not found'}), 404)
    return controller, None


def _parse_board_size(data):
    raw = data.get('board_size')
    error = (jsonify({'error': 'board_size must be an integer'}), 400)
    # JSON true/false and 3.7 would otherwise slip through int()
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        return None, error
    try:
        return int(raw), None
    except ValueError:
        return None, error


@tables.route('/create', methods=['POST'])
def create():
    data = request.get_json(silent=True) or {}
    size = None
    if data.get('board_size') is not None:
        size, error = _parse_board_size(data)
        if error:
            return error
    try:
        controller = create_table(current_app._get_current_object(), size)
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    return jsonify(controller.snapshot()), 201


@tables.route('/<string:table_code>/state', methods=['GET'])
def get_state(table_code):
    controller, error = _controller_or_404(table_code)
    if error:
        return error
    payload = controller.snapshot()
    cfg = current_app.config
    payload['delays'] = {
        'auto_reset': float(cfg.get('AUTO_RESET_DELAY_SEC', 5)),
        'computer_move': float(cfg.get('COMPUTER_MOVE_DELAY_SEC', 1)),
    }
    return jsonify(payload)


@tables.route('/<string:table_code>/cells/<int:index>', methods=['POST'])
def select_cell(table_code, index):
    controller, error = _controller_or_404(table_code)
    if error:
        return error
    # Rejected moves are not errors; the board simply stays as it was.
    accepted = controller.select_cell(index)
    payload = controller.snapshot()
    payload['accepted'] = accepted
    return jsonify(payload)


@tables.route('/<string:table_code>/reset', methods=['POST'])
def request_reset(table_code):
    controller, error = _controller_or_404(table_code)
    if error:
        return error
    controller.request_reset()
    return jsonify(controller.snapshot())


@tables.route('/<string:table_code>/reset/confirm', methods=['POST'])
def confirm_reset(table_code):
    controller, error = _controller_or_404(table_code)
    if error:
        return error
    controller.confirm_reset()
    return jsonify(controller.snapshot())


@tables.route('/<string:table_code>/reset/cancel', methods=['POST'])
def cancel_reset(table_code):
    controller, error = _controller_or_404(table_code)
    if error:
        return error
    controller.cancel_reset()
    return jsonify(controller.snapshot())


@tables.route('/<string:table_code>/size', methods=['POST'])
def change_size(table_code):
    controller, error = _controller_or_404(table_code)
    if error:
        return error
    size, error = _parse_board_size(request.get_json(silent=True) or {})
    if error:
        return error
    try:
        controller.change_size(size)
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    return jsonify(controller.snapshot())


@tables.route('/<string:table_code>/scores/reset', methods=['POST'])
def reset_scores(table_code):
    controller, error = _controller_or_404(table_code)
    if error:
        return error
    controller.reset_scores()
    return jsonify(controller.snapshot())


@tables.route('/<string:table_code>/names', methods=['POST'])
def update_names(table_code):
    controller, error = _controller_or_404(table_code)
    if error:
        return error
    data = request.get_json(silent=True) or {}
    controller.update_names(str(data.get('player1') or ''), str(data.get('player2') or ''))
    return jsonify(controller.snapshot())


@tables.route('/<string:table_code>/solo', methods=['POST'])
def toggle_solo(table_code):
    controller, error = _controller_or_404(table_code)
    if error:
        return error
    controller.toggle_solo_mode()
    return jsonify(controller.snapshot())
