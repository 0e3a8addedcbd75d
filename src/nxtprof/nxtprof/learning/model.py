from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class LearningPoint:
    """Thực thể miền (domain): Điểm học tập ghi nhận trong một phiên learning hour."""

    point_id: str
    session_id: str
    user_id: str
    task_name: str = ""
    framework_category: str = ""
    subcategory: str = ""
    point_type: str = ""
    recipient: str = ""
    situation: str = ""
    behavior: str = ""
    impact: str = ""
    action_item: str = ""
    date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    editable: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.point_id,
            "sessionId": self.session_id,
            "userId": self.user_id,
            "task_name": self.task_name,
            "framework_category": self.framework_category,
            "subcategory": self.subcategory,
            "point_type": self.point_type,
            "recipient": self.recipient,
            "situation": self.situation,
            "behavior": self.behavior,
            "impact": self.impact,
            "action_item": self.action_item,
            "date": self.date.isoformat() if self.date else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "editable": self.editable,
        }
