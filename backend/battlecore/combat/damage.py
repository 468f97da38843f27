"""
伤害计算

纯函数：攻防数值 + 随机源 → 伤害结果
"""
import math
from dataclasses import dataclass
from typing import Any, Dict

from . import rules
from .dice import DiceRoller


@dataclass(frozen=True)
class DamageResult:
    """单次攻击的伤害结果"""

    damage: int
    is_critical: bool = False
    crit_multiplier: float = 1.0
    is_super_critical: bool = False
    power_ratio: float = 1.0
    damage_multiplier: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "damage": self.damage,
            "is_critical": self.is_critical,
            "crit_multiplier": self.crit_multiplier,
            "is_super_critical": self.is_super_critical,
            "power_ratio": round(self.power_ratio, 4),
            "damage_multiplier": self.damage_multiplier,
        }


def power_ratio(attack_power: int, defense_power: int, is_monster_attacking: bool) -> float:
    """
    计算力量比

    攻击与防御分别取指数，指数由攻击方身份与前/后期决定
    """
    early_game = rules.is_early_game(attack_power)
    attack_exp = rules.ATTACK_EXPONENTS[(is_monster_attacking, early_game)]
    defense_exp = rules.DEFENSE_EXPONENTS[early_game]
    exponentiated_attack = math.pow(attack_power, attack_exp)
    exponentiated_defense = math.pow(defense_power, defense_exp)
    return exponentiated_attack / max(exponentiated_defense, 1.0)


def critical_chance(ratio: float, is_monster_attacking: bool) -> float:
    """暴击概率 = 基础概率 + 力量比加成（不为负，有上限）"""
    if is_monster_attacking:
        base = rules.MONSTER_CRIT_CHANCE
        scale = rules.MONSTER_CRIT_RATIO_SCALE
        cap = rules.MONSTER_CRIT_BONUS_CAP
    else:
        base = rules.PLAYER_CRIT_CHANCE
        scale = rules.PLAYER_CRIT_RATIO_SCALE
        cap = rules.PLAYER_CRIT_BONUS_CAP
    bonus = min(max((ratio - 1.0) * scale, 0.0), cap)
    return base + bonus


def super_critical_multiplier(ratio: float) -> float:
    bonus = min(ratio * rules.SUPER_CRIT_RATIO_SCALE, rules.SUPER_CRIT_RATIO_BONUS_CAP)
    return rules.SUPER_CRIT_BASE_MULTIPLIER + bonus


def apply_damage_cap(damage: int, is_monster_attacking: bool) -> int:
    """
    软上限

    超出上限的部分按 excess ** γ (γ<1) 计入，而不是直接截断
    """
    cap = rules.MONSTER_DAMAGE_CAP if is_monster_attacking else rules.PLAYER_DAMAGE_CAP
    if damage <= cap:
        return damage
    excess = damage - cap
    return cap + int(math.floor(math.pow(excess, rules.DAMAGE_OVERFLOW_EXPONENT)))


def compute_damage(
    attack_power: int,
    defense_power: int,
    is_monster_attacking: bool,
    rng: DiceRoller,
) -> DamageResult:
    """
    计算一次攻击的伤害

    Args:
        attack_power: 攻击方攻击力
        defense_power: 防守方防御力
        is_monster_attacking: 攻击方是否为怪物
        rng: 随机源

    Returns:
        DamageResult: 伤害、是否暴击、暴击倍率

    流程：
    1. 计算力量比并选择伤害倍率
    2. 基础伤害 = floor((攻击 - 防御 × 抵消比例) × 倍率)，并应用最低伤害
    3. 暴击判定；暴击时再判定超级暴击
    4. 应用软上限
    """
    if attack_power < 0 or defense_power < 0:
        raise ValueError(
            f"attack_power and defense_power must be >= 0 (got {attack_power}, {defense_power})"
        )

    early_game = rules.is_early_game(attack_power)
    ratio = power_ratio(attack_power, defense_power, is_monster_attacking)
    multiplier = rules.select_damage_multiplier(ratio, is_monster_attacking, early_game)

    # 1. 基础伤害
    raw = (attack_power - defense_power * rules.DEFENSE_IMPACT) * multiplier
    damage = int(math.floor(raw))
    min_damage = rules.MONSTER_MIN_DAMAGE if is_monster_attacking else rules.PLAYER_MIN_DAMAGE
    damage = max(damage, min_damage)

    # 2. 暴击
    is_critical = rng.chance(critical_chance(ratio, is_monster_attacking))
    is_super_critical = False
    crit_multiplier = 1.0
    if is_critical:
        crit_multiplier = rules.CRIT_MULTIPLIER
        if rng.chance(rules.SUPER_CRIT_CHANCE):
            is_super_critical = True
            crit_multiplier = super_critical_multiplier(ratio)
        damage = int(math.floor(damage * crit_multiplier))

    # 3. 软上限
    damage = apply_damage_cap(damage, is_monster_attacking)

    return DamageResult(
        damage=damage,
        is_critical=is_critical,
        crit_multiplier=crit_multiplier,
        is_super_critical=is_super_critical,
        power_ratio=ratio,
        damage_multiplier=multiplier,
    )
