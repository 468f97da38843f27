"""
怪物生成器

按玩家等级分桶抽样，再按连胜缩放属性
"""
import logging
import math
from fractions import Fraction
from typing import Any, Dict, List, Optional, Tuple

from battlecore.config import settings

from .dice import DiceRoller
from .errors import MonsterNotFoundError
from .models.combatant import Monster
from .monster_catalog import load_catalog
from .rules import (
    BUCKET_BASE_WEIGHTS,
    BUCKET_RANGES,
    BUCKET_STREAK_WEIGHTS,
    BUCKET_WEIGHT_STREAK_CAP,
    DEFAULT_COINS_DIVISOR,
    HIGH_LEVEL_HP_PER_STREAK,
    HIGH_LEVEL_THRESHOLD,
    STAT_SCALING_WEIGHTS,
    STREAK_SCALING_TIERS,
    rank_label,
)

logger = logging.getLogger(__name__)

CatalogEntry = Tuple[str, Dict[str, Any]]


def bucket_weights(streak: int) -> Dict[str, float]:
    """连胜越高，越偏向高等级的桶（线性插值，连胜上限后不再变化）"""
    t = Fraction(min(max(streak, 0), BUCKET_WEIGHT_STREAK_CAP), BUCKET_WEIGHT_STREAK_CAP)
    return {
        name: float(
            Fraction(BUCKET_BASE_WEIGHTS[name])
            + (Fraction(BUCKET_STREAK_WEIGHTS[name]) - Fraction(BUCKET_BASE_WEIGHTS[name])) * t
        )
        for name in BUCKET_RANGES
    }


def streak_bonus(streak: int) -> Fraction:
    """分段递减的连胜加成（不含 1），最后一段终点后封顶"""
    bonus = Fraction(0)
    for start, end, rate in STREAK_SCALING_TIERS:
        if streak <= start:
            break
        bonus += (min(streak, end) - start) * rate
    return bonus


def scale_stat(base: int, bonus: Fraction, weight: Fraction) -> int:
    """按权重吃到连胜加成，结果向下取整且不低于基础值"""
    return max(base, math.floor(base * (1 + bonus * weight)))


class MonsterGenerator:
    """
    怪物生成器

    Attributes:
        catalog: catalog_id -> 图鉴条目
        rng: 默认随机源（generate 未显式传入时使用）
    """

    def __init__(
        self,
        catalog: Optional[Dict[str, Dict[str, Any]]] = None,
        rng: Optional[DiceRoller] = None,
    ):
        if catalog is None:
            catalog = load_catalog(settings.monster_catalog_path or None)
        self.catalog = catalog
        self.rng = rng

    def generate(self, level: int, streak: int, rng: Optional[DiceRoller] = None) -> Monster:
        """
        生成一个怪物

        Args:
            level: 玩家等级
            streak: 当前连胜
            rng: 随机源

        Returns:
            Monster: 已缩放的怪物

        Raises:
            ValueError: level/streak 为负
            MonsterNotFoundError: 图鉴为空
        """
        if level < 0:
            raise ValueError(f"level must be >= 0 (got {level})")
        if streak < 0:
            raise ValueError(f"streak must be >= 0 (got {streak})")
        if not self.catalog:
            raise MonsterNotFoundError("monster catalog is empty", level=level)

        rng = rng or self.rng or DiceRoller(seed=settings.default_seed)
        catalog_id, entry = self._sample(level, streak, rng)
        monster = self._scale(catalog_id, entry, level, streak)
        logger.debug(
            "generated %s (catalog lv%d) for lv%d streak=%d: hp=%d atk=%d def=%d",
            catalog_id,
            entry["level"],
            level,
            streak,
            monster.hp,
            monster.attack,
            monster.defense,
        )
        return monster

    # ============================================
    # 抽样
    # ============================================

    def buckets(self, level: int) -> Dict[str, List[CatalogEntry]]:
        """按等级差把图鉴分桶（按 catalog_id 排序，保证同种子结果稳定）"""
        result: Dict[str, List[CatalogEntry]] = {name: [] for name in BUCKET_RANGES}
        for catalog_id in sorted(self.catalog):
            entry = self.catalog[catalog_id]
            diff = entry["level"] - level
            for name, (low, high) in BUCKET_RANGES.items():
                if low <= diff <= high:
                    result[name].append((catalog_id, entry))
                    break
        return result

    def _sample(self, level: int, streak: int, rng: DiceRoller) -> CatalogEntry:
        buckets = self.buckets(level)
        weights = bucket_weights(streak)
        names = [name for name, members in buckets.items() if members]

        if names:
            index = rng.weighted_index([weights[name] for name in names])
            return rng.pick(buckets[names[index]])

        # 所有桶都为空：退回到不高于玩家等级的怪物，再退回到最低等级的怪物
        ordered = sorted(self.catalog.items())
        fallback = [item for item in ordered if item[1]["level"] <= level]
        if not fallback:
            lowest = min(entry["level"] for _, entry in ordered)
            fallback = [item for item in ordered if item[1]["level"] == lowest]
        logger.debug("no bucket matched lv%d, falling back to %d monster(s)", level, len(fallback))
        return rng.pick(fallback)

    # ============================================
    # 缩放
    # ============================================

    def _scale(self, catalog_id: str, entry: Dict[str, Any], level: int, streak: int) -> Monster:
        bonus = streak_bonus(streak)
        base_coins = entry.get("coins")
        if base_coins is None:
            base_coins = entry["exp"] // DEFAULT_COINS_DIVISOR

        hp = scale_stat(entry["hp"], bonus, STAT_SCALING_WEIGHTS["hp"])
        if level >= HIGH_LEVEL_THRESHOLD:
            hp += streak * HIGH_LEVEL_HP_PER_STREAK

        rank = rank_label(streak)
        name = f"{rank} {entry['name']}" if rank else entry["name"]

        return Monster(
            id=f"monster:{catalog_id}",
            catalog_id=catalog_id,
            name=name,
            level=entry["level"],
            hp=hp,
            attack=scale_stat(entry["attack"], bonus, STAT_SCALING_WEIGHTS["attack"]),
            defense=scale_stat(entry["defense"], bonus, STAT_SCALING_WEIGHTS["defense"]),
            exp=scale_stat(entry["exp"], bonus, STAT_SCALING_WEIGHTS["exp"]),
            coins=base_coins,
            drops=list(entry.get("drops", [])),
            rank=rank,
        )
