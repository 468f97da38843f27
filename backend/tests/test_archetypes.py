import random

from battlecore.combat.archetypes import apply_archetype_effect
from battlecore.combat.dice import DiceRoller
from battlecore.combat.models import Archetype, Combatant, CombatantType, EncounterState, StatusEffect


class _FixedRandom(random.Random):
    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


def _attacker(archetype):
    return Combatant(
        id="hero",
        name="Hero",
        combatant_type=CombatantType.PLAYER,
        level=5,
        hp=100,
        max_hp=100,
        attack=30,
        defense=10,
        archetype=archetype,
    )


def _hit(attacker, state, raw=10, critical=False, roll=0.99, defender_state=None):
    return apply_archetype_effect(
        attacker,
        raw,
        critical,
        state,
        defender_state if defender_state is not None else EncounterState(),
        DiceRoller(source=_FixedRandom(roll)),
    )


def test_combo_fifth_hit_is_doubled():
    attacker = _attacker(Archetype.COMBO)
    state = EncounterState()

    damages = [_hit(attacker, state).damage for _ in range(5)]

    assert damages == [10, 10, 10, 10, 20]
    assert state.second_wind_active is True
    assert state.second_wind_turns_left == 3


def test_combo_second_wind_lasts_three_hits_then_resets():
    attacker = _attacker(Archetype.COMBO)
    state = EncounterState(combo_count=4)

    damages = [_hit(attacker, state).damage for _ in range(5)]

    assert damages == [20, 20, 20, 20, 10]
    assert state.second_wind_active is False
    assert state.combo_count == 1


def test_crit_amplifier_only_on_critical():
    attacker = _attacker(Archetype.CRIT_AMPLIFIER)

    assert _hit(attacker, EncounterState(), raw=15, critical=False).damage == 15
    assert _hit(attacker, EncounterState(), raw=15, critical=True).damage == 45


def test_poison_inflicted_on_defender():
    attacker = _attacker(Archetype.POISON)
    own_state = EncounterState()
    defender_state = EncounterState()

    outcome = _hit(attacker, own_state, raw=50, roll=0.0, defender_state=defender_state)

    assert outcome.damage == 50
    assert own_state.status_effects == []
    assert len(defender_state.status_effects) == 1
    effect = defender_state.status_effects[0]
    assert effect.kind == StatusEffect.POISON
    assert effect.magnitude == 10
    assert effect.remaining_turns == 3


def test_burn_respects_proc_chance():
    attacker = _attacker(Archetype.BURN)
    defender_state = EncounterState()

    missed = _hit(attacker, EncounterState(), raw=100, roll=0.5, defender_state=defender_state)
    assert missed.inflicted is None
    assert defender_state.status_effects == []

    landed = _hit(attacker, EncounterState(), raw=100, roll=0.0, defender_state=defender_state)
    assert landed.inflicted is not None
    assert landed.inflicted.kind == StatusEffect.BURN
    assert landed.inflicted.magnitude == 15
    assert landed.inflicted.remaining_turns == 2


def test_no_archetype_passes_damage_through():
    outcome = _hit(_attacker(None), EncounterState(), raw=33, critical=True)
    assert outcome.damage == 33
    assert outcome.messages == []
