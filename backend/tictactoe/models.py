from tictactoe import db
import string
import random

def generate_table_code(length=4):
    """Generate a unique, short table code."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if not Table.query.filter_by(table_code=code).first():
            return code

class Table(db.Model):
    __tablename__ = 'tic_table'
    id = db.Column(db.Integer, primary_key=True)
    table_code = db.Column(db.String(4), unique=True, index=True)
    board_size = db.Column(db.Integer, nullable=False, default=3)
    settings = db.relationship('Setting', back_populates='table', lazy='dynamic')

    def __init__(self, **kwargs):
        super(Table, self).__init__(**kwargs)
        if not self.table_code:
            self.table_code = generate_table_code()

    def to_dict(self):
        return {
            'id': self.id,
            'table_code': self.table_code,
            'board_size': self.board_size,
        }

class Setting(db.Model):
    """One flat key/value pair (scores, names, mode) for a table."""
    __tablename__ = 'setting'
    __table_args__ = (db.UniqueConstraint('table_id', 'key', name='uq_setting_table_key'),)
    id = db.Column(db.Integer, primary_key=True)
    table_id = db.Column(db.Integer, db.ForeignKey('tic_table.id'), nullable=False)
    key = db.Column(db.String(64), nullable=False)
    value = db.Column(db.Text, nullable=True)
    table = db.relationship('Table', back_populates='settings')
