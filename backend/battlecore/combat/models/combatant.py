"""
战斗单位数据模型
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class CombatantType(str, Enum):
    """战斗单位类型"""

    PLAYER = "player"
    MONSTER = "monster"


class Archetype(str, Enum):
    """流派（四选一的特殊机制）"""

    COMBO = "combo"  # 连击 → 二档爆发
    CRIT_AMPLIFIER = "crit_amplifier"  # 暴击再放大
    POISON = "poison"  # 命中概率施加中毒
    BURN = "burn"  # 命中概率施加灼烧


class StatusEffect(str, Enum):
    """状态效果"""

    POISON = "POISON"
    BURN = "BURN"
    STUN = "STUN"
    HEAL_OVER_TIME = "HEAL_OVER_TIME"


class BuffType(str, Enum):
    """增益类型"""

    ATTACK = "ATTACK"
    DEFENSE = "DEFENSE"
    SPEED = "SPEED"
    ALL = "ALL"


@dataclass
class Combatant:
    """
    战斗单位

    设计原则：
    - 只保留战斗相关属性
    - 仅在一场战斗内有效，战后只回写生命值
    """

    # ===== 基础信息 =====
    id: str
    name: str
    combatant_type: CombatantType
    level: int

    # ===== 生命值 =====
    hp: int
    max_hp: int

    # ===== 攻防 =====
    attack: int
    defense: int

    # ===== 先手 =====
    speed: int = 0

    # ===== 流派 =====
    archetype: Optional[Archetype] = None

    def __post_init__(self):
        if self.max_hp < 1:
            raise ValueError(f"max_hp must be >= 1 (got {self.max_hp})")
        if self.attack < 0 or self.defense < 0:
            raise ValueError("attack and defense must be >= 0")
        self.hp = max(0, min(self.hp, self.max_hp))

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    def is_monster(self) -> bool:
        """是否是怪物"""
        return self.combatant_type == CombatantType.MONSTER

    def take_damage(self, amount: int) -> int:
        """
        受到伤害

        Args:
            amount: 伤害值

        Returns:
            int: 实际受到的伤害（不会为负）
        """
        actual_damage = max(0, min(amount, self.hp))
        self.hp -= actual_damage
        return actual_damage

    def set_health(self, value: int) -> None:
        """直接设置生命值（夹在 [0, max_hp] 内）"""
        self.hp = max(0, min(value, self.max_hp))


@dataclass
class Monster:
    """生成好的怪物（已按连胜缩放）"""

    id: str
    catalog_id: str
    name: str
    level: int
    hp: int
    attack: int
    defense: int
    exp: int
    coins: int
    drops: List[str] = field(default_factory=list)
    speed: int = 0
    rank: str = ""

    def to_combatant(self) -> Combatant:
        return Combatant(
            id=self.id,
            name=self.name,
            combatant_type=CombatantType.MONSTER,
            level=self.level,
            hp=self.hp,
            max_hp=self.hp,
            attack=self.attack,
            defense=self.defense,
            speed=self.speed,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "catalog_id": self.catalog_id,
            "name": self.name,
            "level": self.level,
            "hp": self.hp,
            "attack": self.attack,
            "defense": self.defense,
            "exp": self.exp,
            "coins": self.coins,
            "drops": list(self.drops),
            "rank": self.rank,
        }
