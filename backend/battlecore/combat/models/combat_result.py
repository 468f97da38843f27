"""
战斗结果数据模型
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .combat_session import BattleLog
from .combatant import Monster
from .encounter_state import EncounterState


@dataclass
class RewardResult:
    """战斗奖励"""

    exp: int = 0
    coins: int = 0
    new_streak: int = 0
    triggered_milestones: List[str] = field(default_factory=list)
    items: List[str] = field(default_factory=list)  # 掉落物品ID列表
    milestone_multiplier: int = 1
    streak_info: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exp": self.exp,
            "coins": self.coins,
            "new_streak": self.new_streak,
            "triggered_milestones": list(self.triggered_milestones),
            "items": list(self.items),
            "milestone_multiplier": self.milestone_multiplier,
            "streak_info": dict(self.streak_info),
        }


@dataclass
class BattleOutcome:
    """
    玩家对怪物的最终结果

    只描述结果，不包含任何持久化动作
    """

    # ===== 基础信息 =====
    won: bool
    log: BattleLog
    final_health: int
    monster: Monster

    # ===== 奖励 =====
    exp: int = 0
    coins: int = 0
    new_streak: int = 0
    reward: Optional[RewardResult] = None

    # ===== 战后状态（回写用） =====
    player_state: EncounterState = field(default_factory=EncounterState)
    turns: int = 0
    hit_turn_cap: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result_dict = {
            "won": self.won,
            "final_health": self.final_health,
            "exp": self.exp,
            "coins": self.coins,
            "new_streak": self.new_streak,
            "turns": self.turns,
            "hit_turn_cap": self.hit_turn_cap,
            "monster": self.monster.to_dict(),
            "battle_log": self.log.to_list(),
        }
        if self.reward:
            result_dict["reward"] = self.reward.to_dict()
        return result_dict

    def to_summary(self) -> str:
        """
        生成简短摘要

        Returns:
            str: 适合直接展示的文本
        """
        lines = []
        if self.won:
            lines.append(f"You defeated {self.monster.name} in {self.turns} turns.")
            parts = []
            if self.exp > 0:
                parts.append(f"{self.exp} exp")
            if self.coins > 0:
                parts.append(f"{self.coins} coins")
            if self.reward and self.reward.items:
                parts.append("items: " + ", ".join(self.reward.items))
            if parts:
                lines.append("Gained " + ", ".join(parts) + ".")
            if self.reward and self.reward.triggered_milestones:
                lines.append("Milestones: " + ", ".join(self.reward.triggered_milestones))
        elif self.hit_turn_cap:
            lines.append(f"{self.monster.name} outlasted you ({self.turns} turns).")
        else:
            lines.append(f"You were defeated by {self.monster.name}.")
        lines.append(f"Streak: {self.new_streak}")
        lines.append(f"Health: {self.final_health}")
        return "\n".join(lines)


@dataclass
class DuelOutcome:
    """玩家对玩家的最终结果"""

    winner_id: str
    loser_id: str
    log: BattleLog
    final_health: Dict[str, int] = field(default_factory=dict)
    states: Dict[str, EncounterState] = field(default_factory=dict)
    turns: int = 0
    hit_turn_cap: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "winner_id": self.winner_id,
            "loser_id": self.loser_id,
            "final_health": dict(self.final_health),
            "turns": self.turns,
            "hit_turn_cap": self.hit_turn_cap,
            "battle_log": self.log.to_list(),
        }
