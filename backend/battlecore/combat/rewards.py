"""
奖励计算

经验/金币 = floor(基础值 × 等级分段倍率 × 连胜线性加成 × 里程碑倍率)
全部使用 Fraction 精确计算，任意连胜下都不会溢出或丢精度
"""
import logging
import math
from fractions import Fraction
from typing import List, Optional, Tuple

from battlecore.config import settings

from .dice import DiceRoller
from .models.combat_result import RewardResult
from .models.combatant import Monster
from .rules import (
    DEFAULT_BRACKET,
    DROP_BASE_CHANCE,
    DROP_BONUS_CAP,
    DROP_BONUS_PER_STREAK,
    LEVEL_BRACKETS,
    PERIODIC_MILESTONES,
    STREAK_BONUS_PER_WIN,
    STREAK_TIER_BONUSES,
)

logger = logging.getLogger(__name__)


def level_bracket(player_level: int) -> Tuple[Fraction, Fraction]:
    """(经验倍率, 金币倍率)，低等级倍率更高"""
    for upper, exp_mult, coin_mult in LEVEL_BRACKETS:
        if player_level < upper:
            return exp_mult, coin_mult
    return DEFAULT_BRACKET


def streak_multiplier(streak: int) -> Fraction:
    return 1 + streak * STREAK_BONUS_PER_WIN


def periodic_milestone(streak: int) -> Optional[Tuple[int, str]]:
    """最具体的周期里程碑 (倍率, 名称)；互斥，只取一个"""
    if streak <= 0:
        return None
    for period, multiplier, name in PERIODIC_MILESTONES:
        if streak % period == 0:
            return multiplier, name
    return None


def tier_bonus(streak: int) -> int:
    """绝对连胜档位的额外倍率（只取达到的最高档）"""
    for threshold, bonus in STREAK_TIER_BONUSES:
        if streak >= threshold:
            return bonus
    return 0


def drop_chance(streak: int) -> float:
    bonus = min(streak * DROP_BONUS_PER_STREAK, DROP_BONUS_CAP)
    return DROP_BASE_CHANCE * (1 + bonus)


class RewardCalculator:
    """奖励计算器"""

    def compute_reward(
        self,
        monster: Monster,
        streak_after_win: int,
        player_level: int,
        rng: Optional[DiceRoller] = None,
    ) -> RewardResult:
        """
        计算一场胜利的奖励

        Args:
            monster: 被击败的怪物（exp/coins 已按连胜缩放）
            streak_after_win: 本场胜利后的连胜
            player_level: 玩家等级
            rng: 掉落判定用的随机源

        Returns:
            RewardResult
        """
        if streak_after_win < 0:
            raise ValueError(f"streak_after_win must be >= 0 (got {streak_after_win})")

        exp_mult, coin_mult = level_bracket(player_level)
        linear = streak_multiplier(streak_after_win)

        milestones: List[str] = []
        milestone_multiplier = 1
        milestone = periodic_milestone(streak_after_win)
        bonus = 0
        if milestone:
            periodic, name = milestone
            bonus = tier_bonus(streak_after_win)
            milestone_multiplier = periodic + bonus
            milestones.append(name)
            logger.info(
                "streak milestone %s reached at %d (x%d)",
                name,
                streak_after_win,
                milestone_multiplier,
            )

        exp = math.floor(monster.exp * exp_mult * linear * milestone_multiplier)
        coins = math.floor(monster.coins * coin_mult * linear * milestone_multiplier)

        rng = rng or DiceRoller(seed=settings.default_seed)
        chance = drop_chance(streak_after_win)
        items = [item for item in monster.drops if rng.chance(chance)]

        return RewardResult(
            exp=exp,
            coins=coins,
            new_streak=streak_after_win,
            triggered_milestones=milestones,
            items=items,
            milestone_multiplier=milestone_multiplier,
            streak_info={
                "streak": streak_after_win,
                "exp_multiplier": str(exp_mult),
                "coin_multiplier": str(coin_mult),
                "streak_multiplier": str(linear),
                "tier_bonus": bonus,
                "drop_chance": chance,
            },
        )
