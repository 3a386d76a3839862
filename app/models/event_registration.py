from app.extensions import db
from app.utils.clock import utcnow
from .enums import RegistrationStatus, ACTIVE_REGISTRATION_STATUSES


class EventRegistration(db.Model):
    __tablename__ = 'event_registrations'

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    status = db.Column(db.Enum(RegistrationStatus), nullable=False, default=RegistrationStatus.PENDING)
    team_name = db.Column(db.String(100), nullable=True)
    additional_notes = db.Column(db.Text, nullable=True)
    transaction_id = db.Column(db.String(255), nullable=True)
    amount_paid = db.Column(db.Numeric(10, 2), nullable=True)
    payment_verified = db.Column(db.Boolean, nullable=False, default=False)
    registered_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    cancelled_at = db.Column(db.DateTime, nullable=True)
    cancellation_reason = db.Column(db.Text, nullable=True)

    # Relationships
    event = db.relationship('Event', back_populates='registrations')
    user = db.relationship('User', backref=db.backref('event_registrations', lazy=True))

    # One row per player per event; re-registering reuses it
    __table_args__ = (db.UniqueConstraint('event_id', 'user_id', name='uq_event_user_registration'),)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_REGISTRATION_STATUSES

    def to_dict(self):
        return {
            'id': self.id,
            'event_id': self.event_id,
            'event_code': self.event.event_code if self.event else None,
            'event_name': self.event.event_name if self.event else None,
            'user_id': self.user_id,
            'username': self.user.username if self.user else None,
            'user_email': self.user.email if self.user else None,
            'status': self.status.value,
            'team_name': self.team_name,
            'additional_notes': self.additional_notes,
            'transaction_id': self.transaction_id,
            'amount_paid': float(self.amount_paid) if self.amount_paid is not None else None,
            'payment_verified': self.payment_verified,
            'registered_at': self.registered_at.isoformat() if self.registered_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'cancelled_at': self.cancelled_at.isoformat() if self.cancelled_at else None,
            'cancellation_reason': self.cancellation_reason
        }

    def __repr__(self):
        return (
            f"EventRegistration("
            f"id={self.id}, "
            f"event_id={self.event_id}, "
            f"user_id={self.user_id}, "
            f"status={self.status}"
            f")"
        )
