from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_by_name=True)


class MoveOut(CamelModel):
    move_id: str = Field(..., alias="moveId")
    name: str
    pp: int
    max_pp: int = Field(..., alias="maxPp")
    disabled: bool


class CombatantOut(CamelModel):
    species: str
    hp: int
    max_hp: int = Field(..., alias="maxHp")
    hp_percent: int = Field(..., alias="hpPercent")
    status: Optional[str] = None
    volatiles: List[str]
    boosts: Dict[str, int]
    active: bool
    fainted: bool
    # Hidden for the opposing side.
    item: Optional[str] = None
    ability: Optional[str] = None
    moves: Optional[List[str]] = None


class SideOut(CamelModel):
    id: str
    name: str
    combatants: List[CombatantOut]
    side_conditions: Dict[str, int] = Field(..., alias="sideConditions")


class LogEntryOut(CamelModel):
    header: str
    args: List[str]
    text: str


class BattleStateResponse(CamelModel):
    ended: bool
    turn: int
    winner: Optional[str] = None
    request_state: str = Field(..., alias="requestState")
    phases: Dict[str, str]
    own_side: SideOut = Field(..., alias="ownSide")
    foe_side: SideOut = Field(..., alias="foeSide")
    own_moves: List[MoveOut] = Field(..., alias="ownMoves")
    trapped: bool
    choices: List[str]
    recent_logs: List[LogEntryOut] = Field(..., alias="recentLogs")
    player_trainer: str = Field(..., alias="playerTrainer")
    ai_trainer: str = Field(..., alias="aiTrainer")


class ApiResponse(CamelModel):
    ok: bool
    message: Optional[str] = None
    message_kind: Optional[str] = Field(None, alias="messageKind")
    state: Optional[BattleStateResponse] = None


class ChoiceRequest(CamelModel):
    choice: str = ""
