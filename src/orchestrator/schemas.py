"""
src/orchestrator/schemas.py

Argument models for every tool. They double as the JSON schema shown to the
model and as the validator the executor runs before dispatching.
Keep them small and typed to reduce hallucinations.
"""


import datetime as dt
from typing import Annotated, List, Literal, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict, Field


IntExt = Literal["INT", "EXT", "BOTH"]
DayNight = Literal["DAY", "NIGHT", "DAWN", "DUSK", "MORNING", "AFTERNOON", "EVENING"]
SceneStatus = Literal["NOT_SCHEDULED", "SCHEDULED", "PARTIALLY_SHOT", "COMPLETED", "CUT"]
WorkStatus = Literal["ON_HOLD", "CONFIRMED", "WORKING", "WRAPPED", "DROPPED"]
LocationType = Literal["PRACTICAL", "STUDIO", "BACKLOT", "VIRTUAL"]
PermitStatus = Literal["NOT_STARTED", "APPLIED", "APPROVED", "DENIED"]
DayStatus = Literal["TENTATIVE", "SCHEDULED", "CONFIRMED", "IN_PROGRESS", "COMPLETED", "CANCELLED"]
Department = Literal[
    "PRODUCTION", "DIRECTION", "CAMERA", "SOUND", "LIGHTING", "ART", "COSTUME", "HAIR_MAKEUP",
    "LOCATIONS", "STUNTS", "VFX", "TRANSPORTATION", "CATERING", "ACCOUNTING", "POST_PRODUCTION",
]
ElementCategory = Literal[
    "PROP", "WARDROBE", "VEHICLE", "ANIMAL", "VFX", "SFX", "MAKEUP", "HAIR", "SET_DRESSING",
    "GREENERY", "CAMERA", "SOUND", "BACKGROUND", "STUNT", "MECHANICAL_EFFECTS", "VIDEO_PLAYBACK",
]


class ToolArgs(BaseModel):

    model_config = ConfigDict(extra="forbid")


class NoArgs(ToolArgs):
    pass


def _iso_date(value: str) -> str:

    try:
        return dt.date.fromisoformat(value.strip()).isoformat()
    except ValueError:
        raise ValueError(f"Invalid date '{value}'. Use YYYY-MM-DD.")


IsoDate = Annotated[str, AfterValidator(_iso_date)]


# -------- Scenes ---------------------------------------------------------------
class CreateSceneArgs(ToolArgs):

    scene_number: str = Field(description="Scene number (e.g. '15', '2A')")
    int_ext: Optional[IntExt] = Field(default=None, description="Interior or exterior")
    day_night: Optional[DayNight] = Field(default=None, description="Time of day")
    set_name: Optional[str] = Field(default=None, description="Set name from the scene heading")
    synopsis: Optional[str] = Field(default=None, description="Brief description of what happens")
    page_count: Optional[float] = Field(default=None, description="Page count (e.g. 1.5)")
    location_id: Optional[str] = Field(default=None, description="ID of an existing location to link")
    script_day: Optional[str] = None
    estimated_minutes: Optional[int] = Field(default=None, description="Estimated filming time in minutes")
    notes: Optional[str] = None


class UpdateSceneArgs(ToolArgs):

    scene_id: str = Field(description="ID (or scene number) of the scene to update")
    scene_number: Optional[str] = None
    int_ext: Optional[IntExt] = None
    day_night: Optional[DayNight] = None
    set_name: Optional[str] = None
    synopsis: Optional[str] = None
    page_count: Optional[float] = None
    location_id: Optional[str] = None
    script_day: Optional[str] = None
    estimated_minutes: Optional[int] = None
    notes: Optional[str] = None
    status: Optional[SceneStatus] = None


class SceneRefArgs(ToolArgs):

    scene_id: str = Field(description="ID (or scene number) of the scene")


class AssignSceneArgs(ToolArgs):

    scene_id: str = Field(description="ID (or scene number) of the scene")
    shooting_day_id: str = Field(description="ID of the shooting day")
    position: Optional[int] = Field(default=None, description="Position in the day's order (0-based, default last)")


class SceneCastArgs(ToolArgs):

    scene_id: str = Field(description="ID (or scene number) of the scene")
    cast_member_id: str = Field(description="ID of the cast member")


# -------- Cast & crew ----------------------------------------------------------
class CreateCastArgs(ToolArgs):

    character_name: str = Field(description="Character name")
    actor_name: Optional[str] = Field(default=None, description="Actor's real name")
    cast_number: Optional[int] = Field(default=None, description="Cast number for scheduling")
    work_status: Optional[WorkStatus] = None
    notes: Optional[str] = None


class UpdateCastArgs(ToolArgs):

    cast_member_id: str = Field(description="ID of the cast member")
    character_name: Optional[str] = None
    actor_name: Optional[str] = None
    cast_number: Optional[int] = None
    work_status: Optional[WorkStatus] = None
    notes: Optional[str] = None


class CastRefArgs(ToolArgs):

    cast_member_id: str = Field(description="ID of the cast member")


class CreateCrewArgs(ToolArgs):

    name: str = Field(description="Person's name")
    role: str = Field(description="Job title (e.g. 'Gaffer', 'Script Supervisor')")
    department: Department
    email: Optional[str] = None
    phone: Optional[str] = None
    is_head: Optional[bool] = Field(default=None, description="Whether this person is a department head")


class UpdateCrewArgs(ToolArgs):

    crew_member_id: str = Field(description="ID of the crew member")
    name: Optional[str] = None
    role: Optional[str] = None
    department: Optional[Department] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    is_head: Optional[bool] = None


class CrewRefArgs(ToolArgs):

    crew_member_id: str = Field(description="ID of the crew member")


# -------- Locations & elements -------------------------------------------------
class CreateLocationArgs(ToolArgs):

    name: str = Field(description="Location name")
    address: Optional[str] = None
    location_type: Optional[LocationType] = None
    interior_exterior: Optional[IntExt] = None
    permit_status: Optional[PermitStatus] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    technical_notes: Optional[str] = None


class UpdateLocationArgs(ToolArgs):

    location_id: str = Field(description="ID of the location")
    name: Optional[str] = None
    address: Optional[str] = None
    location_type: Optional[LocationType] = None
    interior_exterior: Optional[IntExt] = None
    permit_status: Optional[PermitStatus] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    technical_notes: Optional[str] = None


class LocationRefArgs(ToolArgs):

    location_id: str = Field(description="ID of the location")


class CreateElementArgs(ToolArgs):

    category: ElementCategory
    name: str = Field(description="Element name")
    description: Optional[str] = None
    notes: Optional[str] = None


class ElementRefArgs(ToolArgs):

    element_id: str = Field(description="ID of the element")


# -------- Shooting days --------------------------------------------------------
class CreateShootingDayArgs(ToolArgs):

    date: IsoDate = Field(description="Date in YYYY-MM-DD format")
    day_number: int = Field(description="Day number (e.g. 1, 2, 3)")
    general_call: Optional[str] = Field(default=None, description="General crew call time (HH:MM)")
    estimated_wrap: Optional[str] = Field(default=None, description="Estimated wrap time (HH:MM)")
    status: Optional[DayStatus] = None
    notes: Optional[str] = None
    scenes: Optional[List[str]] = Field(default=None, description="Scene IDs to schedule on this day")


class UpdateShootingDayArgs(ToolArgs):

    shooting_day_id: str = Field(description="ID of the shooting day")
    date: Optional[IsoDate] = None
    day_number: Optional[int] = None
    general_call: Optional[str] = None
    estimated_wrap: Optional[str] = None
    status: Optional[DayStatus] = None
    notes: Optional[str] = None


class ShootingDayRefArgs(ToolArgs):

    shooting_day_id: str = Field(description="ID of the shooting day")
