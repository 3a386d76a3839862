from datetime import datetime
from app.extensions import db
from app.utils.clock import utcnow
from .enums import EventStatus, EventVisibility, ParticipationType


def _money(value):
    return float(value) if value is not None else None


class Event(db.Model):
    __tablename__ = "events"

    id = db.Column(db.Integer, primary_key=True)
    event_code = db.Column(db.String(50), unique=True, nullable=False)
    event_name = db.Column(db.String(200), nullable=False)
    game_name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)

    event_date = db.Column(db.Date, nullable=False)
    event_start_time = db.Column(db.Time, nullable=False)
    event_end_time = db.Column(db.Time, nullable=False)
    registration_open_date = db.Column(db.DateTime, nullable=False)
    registration_close_date = db.Column(db.DateTime, nullable=False)

    participation_type = db.Column(db.Enum(ParticipationType), nullable=False)
    team_size = db.Column(db.Integer, nullable=False)
    max_participants = db.Column(db.Integer, nullable=False)
    min_participants = db.Column(db.Integer, nullable=False)
    allowed_ranks = db.Column(db.String(500), nullable=True)
    platform = db.Column(db.String(50), nullable=True)

    is_paid = db.Column(db.Boolean, nullable=False, default=False)
    entry_fee = db.Column(db.Numeric(10, 2), nullable=True, default=0)
    prize_pool = db.Column(db.Numeric(10, 2), nullable=True, default=0)
    prize_distribution = db.Column(db.JSON, nullable=True)
    refund_policy = db.Column(db.Text, nullable=True)

    map = db.Column(db.String(100), nullable=True)
    mode = db.Column(db.String(100), nullable=True)
    server_region = db.Column(db.String(50), nullable=True)
    room_id = db.Column(db.String(100), nullable=True)
    room_password = db.Column(db.String(100), nullable=True)
    rules = db.Column(db.Text, nullable=True)

    organizer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    organizer_name = db.Column(db.String(200), nullable=False)
    contact = db.Column(db.String(200), nullable=True)

    slots_filled = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.Enum(EventStatus), nullable=False, default=EventStatus.DRAFT)
    visibility = db.Column(
        db.Enum(EventVisibility), nullable=False, default=EventVisibility.PUBLIC
    )

    thumbnail_url = db.Column(db.String(500), nullable=True)
    live_stream_link = db.Column(db.String(500), nullable=True)
    winner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    highlight_video_url = db.Column(db.String(500), nullable=True)
    remarks = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    organizer = db.relationship("User", foreign_keys=[organizer_id])
    registrations = db.relationship(
        "EventRegistration",
        back_populates="event",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.CheckConstraint("slots_filled >= 0", name="ck_events_slots_filled_non_negative"),
        db.CheckConstraint("min_participants <= max_participants", name="ck_events_participant_limits"),
    )

    @property
    def is_full(self) -> bool:
        return self.slots_filled >= self.max_participants

    @property
    def slots_available(self) -> int:
        return self.max_participants - self.slots_filled

    @property
    def registration_closes_by(self) -> datetime:
        """Registration has to be over by the start of the event day."""
        return datetime.combine(self.event_date, datetime.min.time())

    def is_within_registration_window(self, now: datetime = None) -> bool:
        now = now or utcnow()
        return self.registration_open_date <= now < self.registration_close_date

    def is_registration_open(self, now: datetime = None) -> bool:
        return (
            self.is_within_registration_window(now)
            and self.status == EventStatus.REGISTRATION_OPEN
            and not self.is_full
        )

    def increment_slots_filled(self):
        self.slots_filled += 1

    def decrement_slots_filled(self):
        if self.slots_filled > 0:
            self.slots_filled -= 1

    def to_dict(self, now: datetime = None):
        return {
            "id": self.id,
            "event_code": self.event_code,
            "event_name": self.event_name,
            "game_name": self.game_name,
            "description": self.description,
            "event_date": self.event_date.isoformat() if self.event_date else None,
            "event_start_time": (
                self.event_start_time.isoformat() if self.event_start_time else None
            ),
            "event_end_time": (
                self.event_end_time.isoformat() if self.event_end_time else None
            ),
            "registration_open_date": (
                self.registration_open_date.isoformat()
                if self.registration_open_date
                else None
            ),
            "registration_close_date": (
                self.registration_close_date.isoformat()
                if self.registration_close_date
                else None
            ),
            "participation_type": self.participation_type.value,
            "team_size": self.team_size,
            "max_participants": self.max_participants,
            "min_participants": self.min_participants,
            "allowed_ranks": self.allowed_ranks,
            "platform": self.platform,
            "is_paid": self.is_paid,
            "entry_fee": _money(self.entry_fee),
            "prize_pool": _money(self.prize_pool),
            "prize_distribution": self.prize_distribution,
            "refund_policy": self.refund_policy,
            "map": self.map,
            "mode": self.mode,
            "server_region": self.server_region,
            "room_id": self.room_id,
            "room_password": self.room_password,
            "rules": self.rules,
            "organizer_id": self.organizer_id,
            "organizer_name": self.organizer_name,
            "contact": self.contact,
            "slots_filled": self.slots_filled,
            "slots_available": self.slots_available,
            "status": self.status.value,
            "visibility": self.visibility.value,
            "thumbnail_url": self.thumbnail_url,
            "live_stream_link": self.live_stream_link,
            "winner_id": self.winner_id,
            "highlight_video_url": self.highlight_video_url,
            "remarks": self.remarks,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "is_registration_open": self.is_registration_open(now),
        }

    def __repr__(self):
        return (
            f"Event("
            f"id={self.id}, "
            f"event_code='{self.event_code}', "
            f"status={self.status}, "
            f"slots_filled={self.slots_filled}/{self.max_participants}"
            f")"
        )
