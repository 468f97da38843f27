from battlecore.combat.effects import is_stunned, tick
from battlecore.combat.models import EncounterState, StatusEffect


def test_poison_present_after_two_ticks_absent_after_three():
    state = EncounterState()
    state.add_status_effect(StatusEffect.POISON, magnitude=5, duration=3)

    health = 100
    for expected in (95, 90):
        health = tick("hero", state, health, 100).new_health
        assert health == expected
        assert state.has_status_effect(StatusEffect.POISON)

    result = tick("hero", state, health, 100)
    assert result.new_health == 85
    assert not state.has_status_effect(StatusEffect.POISON)
    assert [e.kind for e in result.expired] == [StatusEffect.POISON]


def test_heal_over_time_clamped_to_max():
    state = EncounterState()
    state.add_status_effect(StatusEffect.HEAL_OVER_TIME, magnitude=5, duration=2)

    result = tick("hero", state, 98, 100)

    assert result.new_health == 100
    assert result.healed == 2


def test_damage_over_time_floors_at_zero():
    state = EncounterState()
    state.add_status_effect(StatusEffect.BURN, magnitude=40, duration=2)

    result = tick("hero", state, 10, 100)

    assert result.new_health == 0
    assert result.damage_taken == 40


def test_stun_is_aged_like_other_effects():
    state = EncounterState()
    state.add_status_effect(StatusEffect.STUN, magnitude=0, duration=1)
    assert is_stunned(state)

    result = tick("hero", state, 50, 100)

    assert result.new_health == 50
    assert not is_stunned(state)


def test_zero_magnitude_is_valid():
    state = EncounterState()
    state.add_status_effect(StatusEffect.HEAL_OVER_TIME, magnitude=0, duration=1)

    result = tick("hero", state, 50, 100)

    assert result.new_health == 50
    assert result.healed == 0
