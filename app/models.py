from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class Gym(Base):
    """Tenant: every staff member, client and setting belongs to one gym"""

    __tablename__ = "gyms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    settings = relationship("GymSettings", back_populates="gym", uselist=False)
    users = relationship("User", back_populates="gym")
    clients = relationship("Client", back_populates="gym")


class GymSettings(Base):
    __tablename__ = "gym_settings"

    id = Column(Integer, primary_key=True, index=True)
    gym_id = Column(Integer, ForeignKey("gyms.id"), unique=True, nullable=False)
    # Post-first-meeting workflow; NULL falls back to config defaults
    days_to_first_followup = Column(Integer, nullable=True)  # Delay before auto follow-up on "none"
    package_confirmation_days = Column(Integer, nullable=True)
    custom_plan_confirmation_days = Column(Integer, nullable=True)
    require_default_template_assignment = Column(Boolean, nullable=True)  # Advisory only
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    gym = relationship("Gym", back_populates="settings")


class User(Base):
    """Staff member; role is one of admin, operator, trainer, assistant, instructor"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=True)
    role = Column(String(50), nullable=False, default="trainer")
    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=True, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    gym = relationship("Gym", back_populates="users")
    notifications = relationship("Notification", back_populates="user")


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=False, index=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    source = Column(String(100), nullable=True)  # walk_in, website, referral, ...

    # Lifecycle fields
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    first_meeting_date = Column(DateTime, nullable=True)
    first_meeting_completed = Column(Boolean, default=False, nullable=False)
    purchase_type = Column(String(20), nullable=True)  # package, custom_plan, none
    internal_notes = Column(Text, nullable=True)
    next_confirmation_due = Column(DateTime, nullable=True)

    # Row version for optimistic concurrency (bumped on every UPDATE)
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version}

    gym = relationship("Gym", back_populates="clients")
    trainer = relationship("User", foreign_keys=[assigned_to])
    followups = relationship(
        "ClientFollowup", back_populates="client", order_by="ClientFollowup.scheduled_at"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class ClientFollowup(Base):
    """Scheduled contact with a client; outcome is filled by the resolution flow"""

    __tablename__ = "client_followups"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    trainer_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    type = Column(String(50), nullable=False)  # in_app, post_first_meeting, call, email, whatsapp, sms
    scheduled_at = Column(DateTime, nullable=False)
    notes = Column(Text, nullable=True)
    outcome = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    client = relationship("Client", back_populates="followups")


class ActivityLog(Base):
    """Append-only audit trail for lifecycle mutations"""

    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, index=True)
    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=False, index=True)
    action = Column(String(100), nullable=False)
    target_id = Column(Integer, nullable=True, index=True)
    target_type = Column(String(50), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    channel = Column(String(20), nullable=False, default="app")  # app, email, both
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="notifications")
