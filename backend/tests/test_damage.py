import random

import pytest

from battlecore.combat.damage import apply_damage_cap, compute_damage, critical_chance
from battlecore.combat.dice import DiceRoller


class _FixedRandom(random.Random):
    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


def _never():
    return DiceRoller(source=_FixedRandom(0.99))


def _always():
    return DiceRoller(source=_FixedRandom(0.0))


def test_player_damage_uses_overwhelming_multiplier():
    result = compute_damage(50, 15, is_monster_attacking=False, rng=_never())

    assert result.damage_multiplier == 2.2
    assert result.damage == 93
    assert result.is_critical is False
    assert result.crit_multiplier == 1.0


def test_monster_damage_is_at_least_one():
    result = compute_damage(1, 500, is_monster_attacking=True, rng=_never())
    assert result.damage == 1


def test_player_damage_has_configured_minimum():
    result = compute_damage(0, 500, is_monster_attacking=False, rng=_never())
    assert result.damage == 5


def test_super_critical_uses_ratio_dependent_multiplier():
    result = compute_damage(50, 15, is_monster_attacking=False, rng=_always())

    assert result.is_critical is True
    assert result.is_super_critical is True
    assert result.crit_multiplier == 5.0
    assert result.damage == 465


@pytest.mark.parametrize("seed", range(25))
@pytest.mark.parametrize("is_monster", [True, False])
def test_damage_never_negative(seed, is_monster):
    rng = DiceRoller(seed=seed)
    for attack, defense in [(0, 0), (3, 90), (45, 10), (120, 300), (900, 2)]:
        result = compute_damage(attack, defense, is_monster, rng)
        assert result.damage >= 0
        if is_monster:
            assert result.damage >= 1


def test_negative_stats_rejected():
    with pytest.raises(ValueError):
        compute_damage(-1, 10, is_monster_attacking=False, rng=_never())


def test_damage_cap_is_soft():
    assert apply_damage_cap(4_000, True) == 4_000
    assert apply_damage_cap(5_100, True) == 5_010
    assert apply_damage_cap(60_000, False) == 50_100


def test_monster_crit_bonus_is_capped():
    assert critical_chance(1000.0, True) == pytest.approx(0.10)
    assert critical_chance(0.1, True) == pytest.approx(0.05)
