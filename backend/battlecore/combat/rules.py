"""
战斗规则（数值平衡表）

定义所有战斗相关的常量和规则
"""
from fractions import Fraction
from typing import Dict, List, Tuple


# ============================================
# 伤害计算
# ============================================

# 攻击力低于该值视为前期（前期有额外的伤害加成）
EARLY_GAME_ATTACK_THRESHOLD = 50

# 攻击指数：怪物刻意削弱，玩家强化
ATTACK_EXPONENTS: Dict[Tuple[bool, bool], float] = {
    # (is_monster, is_early_game): exponent
    (True, True): 0.8,
    (True, False): 0.7,
    (False, True): 1.5,
    (False, False): 1.4,
}

# 防御指数（只与前/后期有关）
DEFENSE_EXPONENTS: Dict[bool, float] = {
    True: 1.0,
    False: 1.1,
}

# 防御力对基础伤害的抵消比例
DEFENSE_IMPACT = 0.5

# 力量比分档阈值
RATIO_OVERWHELMING = 2.5
RATIO_STRONG = 1.5
RATIO_WEAK = 0.7
RATIO_HOPELESS = 0.4

# 伤害倍率表：(overwhelming, strong, hopeless, weak, default)
DAMAGE_MULTIPLIERS: Dict[Tuple[bool, bool], Tuple[float, float, float, float, float]] = {
    (True, True): (0.8, 0.6, 0.4, 0.5, 0.5),
    (True, False): (0.7, 0.5, 0.3, 0.4, 0.4),
    (False, True): (2.5, 2.0, 1.2, 1.3, 1.5),
    (False, False): (2.2, 1.8, 1.0, 1.1, 1.3),
}

# 最低伤害
MONSTER_MIN_DAMAGE = 1
PLAYER_MIN_DAMAGE = 5

# 暴击
MONSTER_CRIT_CHANCE = 0.05
PLAYER_CRIT_CHANCE = 0.10
MONSTER_CRIT_RATIO_SCALE = 0.02
PLAYER_CRIT_RATIO_SCALE = 0.05
MONSTER_CRIT_BONUS_CAP = 0.05
PLAYER_CRIT_BONUS_CAP = 0.15
CRIT_MULTIPLIER = 1.5

# 超级暴击（只在已经暴击时判定）
SUPER_CRIT_CHANCE = 0.10
SUPER_CRIT_BASE_MULTIPLIER = 3.0
SUPER_CRIT_RATIO_SCALE = 0.25
SUPER_CRIT_RATIO_BONUS_CAP = 2.0

# 单次伤害软上限：超出部分按 excess ** γ 计入
MONSTER_DAMAGE_CAP = 5_000
PLAYER_DAMAGE_CAP = 50_000
DAMAGE_OVERFLOW_EXPONENT = 0.5


# ============================================
# 流派特效
# ============================================

COMBO_THRESHOLD = 5
SECOND_WIND_HITS = 3
SECOND_WIND_MULTIPLIER = 2

CRIT_AMPLIFIER_MULTIPLIER = 3

POISON_PROC_CHANCE = 0.20
POISON_DAMAGE_RATIO = 0.20
POISON_DURATION = 3

BURN_PROC_CHANCE = 0.15
BURN_DAMAGE_RATIO = 0.15
BURN_DURATION = 2


# ============================================
# 怪物生成
# ============================================

# 等级差分桶（monster.level - player.level）
BUCKET_RANGES: Dict[str, Tuple[int, int]] = {
    "same": (-1, 1),
    "below_near": (-5, -2),
    "slightly_above": (2, 5),
    "much_above": (6, 10),
}

# 连胜 0 时的权重 与 连胜达到上限时的权重
BUCKET_BASE_WEIGHTS: Dict[str, float] = {
    "same": 50.0,
    "below_near": 35.0,
    "slightly_above": 12.0,
    "much_above": 3.0,
}
BUCKET_STREAK_WEIGHTS: Dict[str, float] = {
    "same": 25.0,
    "below_near": 10.0,
    "slightly_above": 40.0,
    "much_above": 25.0,
}
BUCKET_WEIGHT_STREAK_CAP = 50

# 连胜成长分段：(段起点, 段终点, 每场连胜加成)，逐段递减，终点后封顶
STREAK_SCALING_TIERS: List[Tuple[int, int, Fraction]] = [
    (0, 10, Fraction(3, 100)),
    (10, 25, Fraction(2, 100)),
    (25, 50, Fraction(1, 100)),
    (50, 100, Fraction(5, 1000)),
]

# 各属性吃到的成长比例
STAT_SCALING_WEIGHTS: Dict[str, Fraction] = {
    "hp": Fraction(1),
    "attack": Fraction(4, 5),
    "defense": Fraction(3, 5),
    "exp": Fraction(1),
}

# 高等级玩家：每场连胜额外增加的怪物生命值
HIGH_LEVEL_THRESHOLD = 50
HIGH_LEVEL_HP_PER_STREAK = 25

# 连胜称号（从高到低匹配）
RANK_LABELS: List[Tuple[int, str]] = [
    (100, "Legendary"),
    (50, "Champion"),
    (25, "Elite"),
    (10, "Veteran"),
]


# ============================================
# 奖励
# ============================================

# 等级分段：(等级上限（不含）, 经验倍率, 金币倍率)；低等级追赶
LEVEL_BRACKETS: List[Tuple[int, Fraction, Fraction]] = [
    (20, Fraction(3, 2), Fraction(3, 2)),
    (50, Fraction(5, 4), Fraction(6, 5)),
]
DEFAULT_BRACKET: Tuple[Fraction, Fraction] = (Fraction(1), Fraction(1))

# 每场连胜的线性加成
STREAK_BONUS_PER_WIN = Fraction(2, 100)

# 周期里程碑（互斥，只取最具体的一个）：(周期, 倍率, 名称)
PERIODIC_MILESTONES: List[Tuple[int, int, str]] = [
    (100, 10, "legendary"),
    (50, 7, "epic"),
    (25, 5, "rare"),
    (10, 4, "great"),
    (5, 3, "good"),
]

# 绝对连胜档位（与周期里程碑叠加）：(最低连胜, 额外倍率)
STREAK_TIER_BONUSES: List[Tuple[int, int]] = [
    (200, 5),
    (150, 3),
    (100, 2),
    (50, 1),
]

# 掉落
DROP_BASE_CHANCE = 0.25
DROP_BONUS_PER_STREAK = 0.01
DROP_BONUS_CAP = 0.50

# 未配置金币的怪物：金币 = 经验 // 2
DEFAULT_COINS_DIVISOR = 2


# ============================================
# 成长
# ============================================

EXP_PER_LEVEL = 1000
LEVEL_UP_ATTACK_GAIN = 2
LEVEL_UP_DEFENSE_GAIN = 2
BASE_MAX_HEALTH = 100
MAX_HEALTH_PER_LEVEL = 10


# ============================================
# 规则函数
# ============================================


def is_early_game(attack_power: int) -> bool:
    """攻击力是否处于前期区间"""
    return attack_power < EARLY_GAME_ATTACK_THRESHOLD


def select_damage_multiplier(power_ratio: float, is_monster: bool, early_game: bool) -> float:
    """
    根据力量比选择伤害倍率

    Args:
        power_ratio: 指数化攻击 ÷ 指数化防御
        is_monster: 攻击方是否为怪物
        early_game: 是否为前期

    Returns:
        float: 伤害倍率
    """
    overwhelming, strong, hopeless, weak, default = DAMAGE_MULTIPLIERS[(is_monster, early_game)]
    if power_ratio >= RATIO_OVERWHELMING:
        return overwhelming
    if power_ratio >= RATIO_STRONG:
        return strong
    if power_ratio <= RATIO_HOPELESS:
        return hopeless
    if power_ratio <= RATIO_WEAK:
        return weak
    return default


def max_health_for_level(level: int) -> int:
    """等级对应的最大生命值"""
    return BASE_MAX_HEALTH + (level - 1) * MAX_HEALTH_PER_LEVEL


def exp_needed_for_level(level: int) -> int:
    """升到下一级所需的累计经验"""
    return level * EXP_PER_LEVEL


def rank_label(streak: int) -> str:
    """连胜称号，未达到任何档位时返回空串"""
    for threshold, label in RANK_LABELS:
        if streak >= threshold:
            return label
    return ""
