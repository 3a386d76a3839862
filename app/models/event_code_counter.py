from app.extensions import db


class EventCodeCounter(db.Model):
    """Named counter row; incremented under a row lock to hand out event codes."""

    __tablename__ = 'event_code_counters'

    name = db.Column(db.String(50), primary_key=True)
    value = db.Column(db.Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<EventCodeCounter {self.name}={self.value}>"
