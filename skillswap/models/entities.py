"""Dataclass-style entity representations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from flask_login import UserMixin

SKILL_LEVELS = ("beginner", "intermediate", "advanced", "expert")
SKILL_TYPES = ("offered", "wanted")
SWAP_STATUSES = ("pending", "accepted", "rejected", "completed")
MESSAGE_TYPES = ("announcement", "maintenance", "feature_update")
REPORT_STATUSES = ("pending", "reviewed", "resolved")
DAYS_OF_WEEK = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
TIME_SLOTS = ("morning", "afternoon", "evening")


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class User(UserMixin):
    """User entity compatible with Flask-Login."""

    user_id: int
    username: str
    email: str
    password_hash: str
    first_name: Optional[str]
    last_name: Optional[str]
    profile_image_url: Optional[str]
    location: Optional[str]
    bio: Optional[str]
    is_public: bool
    is_admin: bool
    is_banned: bool
    rating: float
    total_ratings: int
    created_at: datetime
    updated_at: datetime

    def get_id(self) -> str:
        return str(self.user_id)

    @property
    def is_active(self) -> bool:
        # Flask-Login refuses to log in inactive users.
        return not self.is_banned

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.user_id,
            "username": self.username,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "profileImageUrl": self.profile_image_url,
            "location": self.location,
            "bio": self.bio,
            "isPublic": self.is_public,
            "isAdmin": self.is_admin,
            "isBanned": self.is_banned,
            "rating": self.rating,
            "totalRatings": self.total_ratings,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    def to_public_dict(self) -> dict[str, Any]:
        """Serialize for anonymous listings: no contact details."""

        data = self.to_dict()
        del data["email"]
        return data


@dataclass
class Skill:
    """A skill a user offers or wants."""

    skill_id: int
    user_id: int
    name: str
    description: Optional[str]
    category: str
    level: str
    type: str
    created_at: datetime
    updated_at: datetime
    tags: list[str] = field(default_factory=list)
    is_active: bool = True
    is_approved: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.skill_id,
            "userId": self.user_id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "level": self.level,
            "type": self.type,
            "tags": list(self.tags),
            "isActive": self.is_active,
            "isApproved": self.is_approved,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass
class Availability:
    """One (day, time slot) availability entry for a user."""

    availability_id: int
    user_id: int
    day_of_week: str
    time_slot: str
    is_available: bool
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.availability_id,
            "userId": self.user_id,
            "dayOfWeek": self.day_of_week,
            "timeSlot": self.time_slot,
            "isAvailable": self.is_available,
            "createdAt": _iso(self.created_at),
        }


@dataclass
class SwapRequest:
    """Proposal exchanging a requester's skill for a provider's skill."""

    request_id: int
    requester_id: int
    provider_id: int
    offered_skill_id: int
    requested_skill_id: int
    message: Optional[str]
    status: str
    created_at: datetime
    updated_at: datetime
    preferred_times: list[str] = field(default_factory=list)

    def involves(self, user_id: int) -> bool:
        return user_id in (self.requester_id, self.provider_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.request_id,
            "requesterId": self.requester_id,
            "providerId": self.provider_id,
            "offeredSkillId": self.offered_skill_id,
            "requestedSkillId": self.requested_skill_id,
            "message": self.message,
            "status": self.status,
            "preferredTimes": list(self.preferred_times),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass
class Rating:
    """Score one swap participant gave the other."""

    rating_id: int
    rater_id: int
    ratee_id: int
    swap_request_id: int
    rating: int
    comment: Optional[str]
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.rating_id,
            "raterId": self.rater_id,
            "rateeId": self.ratee_id,
            "swapRequestId": self.swap_request_id,
            "rating": self.rating,
            "comment": self.comment,
            "createdAt": _iso(self.created_at),
        }


@dataclass
class AdminMessage:
    """Broadcast announcement authored by an admin."""

    message_id: int
    admin_id: int
    title: str
    content: str
    type: str
    is_active: bool
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.message_id,
            "adminId": self.admin_id,
            "title": self.title,
            "content": self.content,
            "type": self.type,
            "isActive": self.is_active,
            "createdAt": _iso(self.created_at),
        }


@dataclass
class Report:
    """Moderation report filed against a user, skill or swap request."""

    report_id: int
    reporter_id: int
    reported_user_id: Optional[int]
    reported_skill_id: Optional[int]
    reported_request_id: Optional[int]
    reason: str
    description: Optional[str]
    status: str
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.report_id,
            "reporterId": self.reporter_id,
            "reportedUserId": self.reported_user_id,
            "reportedSkillId": self.reported_skill_id,
            "reportedRequestId": self.reported_request_id,
            "reason": self.reason,
            "description": self.description,
            "status": self.status,
            "createdAt": _iso(self.created_at),
        }


@dataclass
class SwapRequestDetails:
    """A swap request together with both parties and both skills."""

    request: SwapRequest
    requester: Optional[User]
    provider: Optional[User]
    offered_skill: Optional[Skill]
    requested_skill: Optional[Skill]

    def to_dict(self) -> dict[str, Any]:
        return {
            "request": self.request.to_dict(),
            "requester": self.requester.to_dict() if self.requester else None,
            "provider": self.provider.to_dict() if self.provider else None,
            "offeredSkill": self.offered_skill.to_dict() if self.offered_skill else None,
            "requestedSkill": self.requested_skill.to_dict() if self.requested_skill else None,
        }


@dataclass
class ReportDetails:
    """A report with whatever it points at resolved."""

    report: Report
    reporter: Optional[User]
    reported_user: Optional[User] = None
    reported_skill: Optional[Skill] = None
    reported_request: Optional[SwapRequest] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "report": self.report.to_dict(),
            "reporter": self.reporter.to_dict() if self.reporter else None,
            "reportedUser": self.reported_user.to_dict() if self.reported_user else None,
            "reportedSkill": self.reported_skill.to_dict() if self.reported_skill else None,
            "reportedRequest": self.reported_request.to_dict() if self.reported_request else None,
        }
