from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from .extensions import db, login_manager


DEFAULT_SCENE_TITLE = "Untitled Scene"
SCENE_TITLE_MAX_LENGTH = 150


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    display_name = db.Column(db.String(120), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    scenes = db.relationship("Scene", backref="owner", lazy=True, passive_deletes=True)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "display_name": self.display_name,
        }

    def __repr__(self) -> str:  # pragma: no cover - repr for debugging
        return f"<User {self.email}>"


@login_manager.user_loader
def load_user(user_id: str) -> Optional["User"]:
    return db.session.get(User, int(user_id))


class Scene(db.Model):
    __tablename__ = "scenes"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = db.Column(db.String(SCENE_TITLE_MAX_LENGTH), nullable=False, default=DEFAULT_SCENE_TITLE)
    description = db.Column(db.Text, nullable=True)
    scene_text = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    # Unloaded breakdowns are removed by ON DELETE CASCADE rather than fetched first.
    breakdowns = db.relationship(
        "Breakdown",
        backref="scene",
        cascade="all, delete-orphan",
        lazy=True,
        passive_deletes=True,
        order_by="[Breakdown.created_at.desc(), Breakdown.id.desc()]",
    )

    @property
    def latest_breakdown(self) -> Optional["Breakdown"]:
        return self.breakdowns[0] if self.breakdowns else None

    def to_summary(self) -> Dict[str, Any]:
        latest = self.latest_breakdown
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description or "",
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "breakdown": latest.to_dict() if latest else None,
        }

    def to_detail(self) -> Dict[str, Any]:
        payload = self.to_summary()
        payload["scene_text"] = self.scene_text
        payload["breakdowns"] = [breakdown.to_dict() for breakdown in self.breakdowns]
        return payload

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Scene {self.title} (user {self.user_id})>"


class Breakdown(db.Model):
    __tablename__ = "breakdowns"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    scene_id = db.Column(
        db.Integer,
        db.ForeignKey("scenes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    characters = db.Column(db.JSON, nullable=False, default=list)
    locations = db.Column(db.JSON, nullable=False, default=list)
    themes = db.Column(db.JSON, nullable=False, default=list)
    tone = db.Column(db.Text, nullable=False, default="")
    structure = db.Column(db.Text, nullable=False, default="")
    technical_notes = db.Column(db.Text, nullable=False, default="")
    visual_elements = db.Column(db.Text, nullable=False, default="")
    emotional_arc = db.Column(db.Text, nullable=False, default="")
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "scene_id": self.scene_id,
            "characters": list(self.characters or []),
            "locations": list(self.locations or []),
            "themes": list(self.themes or []),
            "tone": self.tone or "",
            "structure": self.structure or "",
            "technicalNotes": self.technical_notes or "",
            "visualElements": self.visual_elements or "",
            "emotionalArc": self.emotional_arc or "",
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Breakdown {self.id} for scene {self.scene_id}>"
