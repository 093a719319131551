"""
src/orchestrator/registry.py

Tool registry: the static catalog of callable tools, each tagged with a tier.

`read` tools only look at project data and may run without asking. Anything
that creates, updates, deletes or links records is `mutate` and must go through
a confirmation first. The tier is a safety boundary, not a permission system:
role checks happen inside the production handlers.
"""


from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from config import ToolTier
from orchestrator import schemas
from production import cast, crew, elements, locations, scenes, schedule


@dataclass(frozen=True)
class ToolDefinition:

    name: str
    description: str
    tier: ToolTier
    args_model: Type[schemas.ToolArgs]
    handler: Callable[..., Any]
    describe: str = ""

    @property
    def is_read(self) -> bool:

        return self.tier is ToolTier.READ


def _read(name: str, description: str, handler: Callable[..., Any]) -> ToolDefinition:

    return ToolDefinition(name, description, ToolTier.READ, schemas.NoArgs, handler)

def _mutate(
        name: str,
        description: str,
        args_model: Type[schemas.ToolArgs],
        handler: Callable[..., Any],
        describe: str,
) -> ToolDefinition:

    return ToolDefinition(name, description, ToolTier.MUTATE, args_model, handler, describe)


# -------- Catalog ---------------------------------------------------------------
ALL_TOOLS: List[ToolDefinition] = [
    # read
    _read("list_scenes", "List all scenes: number, set, INT/EXT, day/night, pages, status, linked cast.", scenes.list_scenes),
    _read("list_cast", "List all cast members: character, actor, work status, cast number.", cast.list_cast),
    _read("list_crew", "List all crew members: name, role, department.", crew.list_crew),
    _read("list_locations", "List all locations: name, address, type, permit status.", locations.list_locations),
    _read("list_elements", "List all breakdown elements (props, wardrobe, vehicles, ...).", elements.list_elements),
    _read("list_shooting_days", "List shooting days: date, day number, call/wrap, status, scheduled scenes.", schedule.list_shooting_days),
    # mutate
    _mutate("create_scene", "Create a new scene in the project.", schemas.CreateSceneArgs, scenes.create_scene, ""),
    _mutate("update_scene", "Update a scene. Provide the scene ID and only the fields to change.", schemas.UpdateSceneArgs, scenes.update_scene, "Update scene ({scene_id})"),
    _mutate("delete_scene", "Permanently delete a scene.", schemas.SceneRefArgs, scenes.delete_scene, "Delete scene ({scene_id})"),
    _mutate("create_cast_member", "Create a new cast member (character).", schemas.CreateCastArgs, cast.create_cast_member, "Create cast member: {character_name}"),
    _mutate("update_cast_member", "Update an existing cast member.", schemas.UpdateCastArgs, cast.update_cast_member, "Update cast member ({cast_member_id})"),
    _mutate("delete_cast_member", "Permanently delete a cast member.", schemas.CastRefArgs, cast.delete_cast_member, "Delete cast member ({cast_member_id})"),
    _mutate("create_crew_member", "Add a new crew member.", schemas.CreateCrewArgs, crew.create_crew_member, "Add crew member: {name} ({role})"),
    _mutate("update_crew_member", "Update an existing crew member.", schemas.UpdateCrewArgs, crew.update_crew_member, "Update crew member ({crew_member_id})"),
    _mutate("delete_crew_member", "Remove a crew member from the project.", schemas.CrewRefArgs, crew.delete_crew_member, "Remove crew member ({crew_member_id})"),
    _mutate("create_location", "Create a new filming location.", schemas.CreateLocationArgs, locations.create_location, "Create location: {name}"),
    _mutate("update_location", "Update an existing location.", schemas.UpdateLocationArgs, locations.update_location, "Update location ({location_id})"),
    _mutate("delete_location", "Permanently delete a location.", schemas.LocationRefArgs, locations.delete_location, "Delete location ({location_id})"),
    _mutate("create_element", "Create a production element (prop, wardrobe item, vehicle, ...).", schemas.CreateElementArgs, elements.create_element, "Create element: {name} ({category})"),
    _mutate("delete_element", "Permanently delete a production element.", schemas.ElementRefArgs, elements.delete_element, "Delete element ({element_id})"),
    _mutate("create_shooting_day", "Create a shooting day in the schedule.", schemas.CreateShootingDayArgs, schedule.create_shooting_day, "Create shooting day {day_number} on {date}"),
    _mutate("update_shooting_day", "Update an existing shooting day.", schemas.UpdateShootingDayArgs, schedule.update_shooting_day, "Update shooting day ({shooting_day_id})"),
    _mutate("delete_shooting_day", "Permanently delete a shooting day.", schemas.ShootingDayRefArgs, schedule.delete_shooting_day, "Delete shooting day ({shooting_day_id})"),
    _mutate("assign_scene_to_day", "Schedule a scene on a shooting day at a given position.", schemas.AssignSceneArgs, scenes.assign_scene_to_day, "Assign scene {scene_id} to shooting day {shooting_day_id}"),
    _mutate("add_cast_to_scene", "Link a cast member to a scene.", schemas.SceneCastArgs, scenes.add_cast_to_scene, "Link cast member {cast_member_id} to scene {scene_id}"),
]

TOOL_MAP: Dict[str, ToolDefinition] = {t.name: t for t in ALL_TOOLS}


def lookup(name: str) -> Optional[ToolDefinition]:

    return TOOL_MAP.get(name)

def list_all() -> List[ToolDefinition]:

    return list(ALL_TOOLS)

def tier_of(name: str) -> ToolTier:
    """Unknown tools are treated as mutating so they can never auto-run."""

    tool = lookup(name)

    return tool.tier if tool else ToolTier.MUTATE


# -------- OpenAI function specs --------------------------------------------------
def _tool_spec(name: str, description: str, parameters: Dict[str, Any]) -> Dict[str, Any]:
    """Build an OpenAI function spec."""

    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": parameters.get("properties", {}),
                "required": parameters.get("required", []),
                "additionalProperties": False,
            },
        },
    }

def to_openai_tools() -> List[Dict[str, Any]]:

    return [_tool_spec(t.name, t.description, t.args_model.model_json_schema()) for t in ALL_TOOLS]


# -------- Action descriptions ----------------------------------------------------
class _Placeholders(dict):

    def __missing__(self, key: str) -> str:

        return "?"


def describe_action(name: str, args: Dict[str, Any]) -> str:
    """Short human-readable description of a planned call, e.g. "Create scene 14A - INT. KITCHEN - DAY"."""

    values = _Placeholders({k: v for k, v in args.items() if v is not None and v != ""})

    if name == "create_scene":
        text = "Create scene {scene_number}".format_map(values)
        if "set_name" in values:
            text += " - {int_ext}. {set_name} - {day_night}".format_map(
                _Placeholders({"int_ext": "", "day_night": "", **values})
            )
        return text

    tool = lookup(name)

    if tool is None or not tool.describe:
        return name

    return tool.describe.format_map(values)
