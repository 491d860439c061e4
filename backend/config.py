import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///tictactoe.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Board sizes offered by the size selector
    DEFAULT_BOARD_SIZE = int(os.environ.get('DEFAULT_BOARD_SIZE', '3'))
    MIN_BOARD_SIZE = int(os.environ.get('MIN_BOARD_SIZE', '1'))
    MAX_BOARD_SIZE = int(os.environ.get('MAX_BOARD_SIZE', '10'))
    # Delayed effects (seconds)
    AUTO_RESET_DELAY_SEC = float(os.environ.get('AUTO_RESET_DELAY_SEC', '5'))
    COMPUTER_MOVE_DELAY_SEC = float(os.environ.get('COMPUTER_MOVE_DELAY_SEC', '1'))
    # Optional: fixed seed for the computer player. Empty means unseeded.
    COMPUTER_SEED = os.environ.get('COMPUTER_SEED') or None
    # Forget in-memory tables idle this long (seconds); they are rebuilt from the database
    TABLE_IDLE_TIMEOUT_SEC = float(os.environ.get('TABLE_IDLE_TIMEOUT_SEC', '3600'))
    # Run real background timers even when TESTING is on
    ENABLE_SCHEDULER_IN_TESTS = os.environ.get('ENABLE_SCHEDULER_IN_TESTS', '').lower() in ('1', 'true', 'yes')
