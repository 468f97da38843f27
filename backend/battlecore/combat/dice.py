"""
骰子系统

所有随机性都来自一个可注入的 DiceRoller，固定种子即可复现整场战斗
"""
import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


class DiceRoller:
    """骰子投掷器（包装独立的 random.Random 实例）"""

    def __init__(self, seed: Optional[int] = None, source: Optional[random.Random] = None):
        """
        Args:
            seed: 随机种子，None 表示使用系统熵
            source: 直接注入的随机源（优先于 seed）
        """
        self.seed = seed
        self._random = source if source is not None else random.Random(seed)

    def chance(self, probability: float) -> bool:
        """
        伯努利试验

        Args:
            probability: 成功概率（<=0 必败，>=1 必成）

        Returns:
            bool: 是否成功
        """
        if probability <= 0:
            return False
        if probability >= 1:
            return True
        return self._random.random() < probability

    def pick(self, options: Sequence[T]) -> T:
        """从序列中等概率选择一个"""
        if not options:
            raise ValueError("Cannot pick from an empty sequence")
        return options[self._random.randrange(len(options))]

    def weighted_index(self, weights: Sequence[float]) -> int:
        """
        按权重选择下标

        权重为 0 的项永远不会被选中
        """
        total = sum(w for w in weights if w > 0)
        if total <= 0:
            raise ValueError("At least one weight must be positive")
        roll = self._random.random() * total
        cumulative = 0.0
        last_positive = 0
        for index, weight in enumerate(weights):
            if weight <= 0:
                continue
            cumulative += weight
            last_positive = index
            if roll < cumulative:
                return index
        return last_positive

    def spawn(self) -> "DiceRoller":
        """派生一个独立的子随机源（同一种子下结果稳定）"""
        return DiceRoller(seed=self._random.getrandbits(64))
