import pytest

from battlecore.combat.progression import apply_experience


def test_single_level_up_heals_to_new_max():
    result = apply_experience(level=1, experience=900, attack=10, defense=5, health=50, max_health=100, amount=200)

    assert result.leveled_up is True
    assert result.level == 2
    assert result.experience == 1100
    assert (result.attack, result.defense) == (12, 7)
    assert result.max_health == 110
    assert result.health == 110


def test_multi_level_jump():
    result = apply_experience(level=1, experience=900, attack=10, defense=5, health=50, max_health=100, amount=2100)

    assert result.level == 4
    assert result.levels_gained == 3
    assert result.max_health == 130
    assert result.attack == 16


def test_no_level_up_keeps_health():
    result = apply_experience(level=3, experience=100, attack=10, defense=5, health=40, max_health=120, amount=50)

    assert result.leveled_up is False
    assert result.health == 40
    assert result.experience == 150


def test_negative_amount_rejected():
    with pytest.raises(ValueError):
        apply_experience(level=1, experience=0, attack=1, defense=1, health=1, max_health=1, amount=-5)
