"""
战斗会话数据模型
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from .combatant import Combatant
from .encounter_state import EncounterState


class EncounterEndReason(str, Enum):
    """战斗结束原因"""

    KNOCKOUT = "knockout"  # 一方生命值归零
    TURN_CAP = "turn_cap"  # 达到回合上限


@dataclass(frozen=True)
class BattleLogEntry:
    """战斗日志条目"""

    seq: int
    round: int
    actor_id: str
    message: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seq": self.seq,
            "round": self.round,
            "actor": self.actor_id,
            "message": self.message,
        }


class BattleLog:
    """
    战斗日志

    只能追加，不能修改或重置
    """

    def __init__(self) -> None:
        self._entries: List[BattleLogEntry] = []

    def add(self, round_number: int, actor_id: str, message: str) -> BattleLogEntry:
        entry = BattleLogEntry(
            seq=len(self._entries) + 1,
            round=round_number,
            actor_id=actor_id,
            message=message,
        )
        self._entries.append(entry)
        return entry

    def messages(self) -> List[str]:
        return [entry.message for entry in self._entries]

    def __iter__(self) -> Iterator[BattleLogEntry]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def to_list(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self._entries]


@dataclass
class EncounterSession:
    """
    一场遭遇战的完整状态

    由 CombatEngine 创建并推进到结束
    """

    # ===== 参战双方 =====
    first: Combatant
    second: Combatant
    first_state: EncounterState
    second_state: EncounterState

    # ===== 进度 =====
    is_monster_encounter: bool = False
    turn_cap: int = 50
    current_round: int = 0

    # ===== 结果 =====
    end_reason: Optional[EncounterEndReason] = None
    winner_id: Optional[str] = None

    # ===== 日志 =====
    log: BattleLog = field(default_factory=BattleLog)

    # ===== 统计 =====
    damage_dealt: Dict[str, int] = field(default_factory=dict)

    @property
    def is_over(self) -> bool:
        return self.end_reason is not None

    def get_combatant(self, combatant_id: str) -> Optional[Combatant]:
        for combatant in (self.first, self.second):
            if combatant.id == combatant_id:
                return combatant
        return None

    def state_for(self, combatant: Combatant) -> EncounterState:
        return self.first_state if combatant is self.first else self.second_state

    def opponent_of(self, combatant: Combatant) -> Combatant:
        return self.second if combatant is self.first else self.first

    def record_damage(self, combatant_id: str, amount: int) -> None:
        self.damage_dealt[combatant_id] = self.damage_dealt.get(combatant_id, 0) + amount
