"""
战斗引擎

核心战斗逻辑实现
"""
import logging
from fractions import Fraction
from typing import Dict, Optional

from battlecore.config import settings

from .archetypes import apply_archetype_effect
from .buffs import effective_combatant
from .damage import compute_damage
from .dice import DiceRoller
from .effects import is_stunned, tick
from .models.character import CharacterSnapshot, ItemEffect
from .models.combat_result import BattleOutcome, DuelOutcome
from .models.combat_session import EncounterEndReason, EncounterSession
from .models.combatant import Combatant
from .models.encounter_state import EncounterState
from .monster_generator import MonsterGenerator
from .rewards import RewardCalculator
from .turn_order import resolve_order

logger = logging.getLogger(__name__)


class CombatEngine:
    """
    战斗引擎

    职责：
    - 按速度决定行动顺序
    - 推进回合直到一方倒下或达到回合上限
    - 组合怪物生成与奖励计算，产出战斗结果

    引擎本身不做任何 I/O，所有随机性来自传入的 DiceRoller
    """

    def __init__(
        self,
        monster_generator: Optional[MonsterGenerator] = None,
        reward_calculator: Optional[RewardCalculator] = None,
        turn_cap: Optional[int] = None,
        item_table: Optional[Dict[str, ItemEffect]] = None,
    ):
        self.monster_generator = monster_generator or MonsterGenerator()
        self.reward_calculator = reward_calculator or RewardCalculator()
        self.turn_cap = turn_cap if turn_cap is not None else settings.battle_turn_cap
        if self.turn_cap < 1:
            raise ValueError(f"turn_cap must be >= 1 (got {self.turn_cap})")
        self.item_table = item_table or {}

    # ============================================
    # 公共接口
    # ============================================

    def resolve_battle(
        self,
        player_snapshot: CharacterSnapshot,
        enemy_level: int,
        streak: int,
        rng_seed: Optional[int] = None,
        now: Optional[float] = None,
    ) -> BattleOutcome:
        """
        玩家对随机怪物

        Args:
            player_snapshot: 玩家快照（战前一次性读取）
            enemy_level: 生成怪物所参照的等级
            streak: 当前连胜
            rng_seed: 随机种子
            now: 当前时间（用于判断增益是否过期），默认取系统时间

        Returns:
            BattleOutcome: 战斗结果（不包含持久化动作）

        流程：
        1. 读取/修复战斗状态，清理过期增益
        2. 计算有效属性
        3. 生成怪物
        4. 战斗循环
        5. 胜利时计算奖励，失败时连胜归零
        """
        rng = DiceRoller(seed=rng_seed if rng_seed is not None else settings.default_seed)

        # 1. 战斗状态
        state = EncounterState.load(player_snapshot.encounter_state, owner_id=player_snapshot.id)
        pruned = state.prune_expired_buffs(now)
        if pruned:
            logger.debug("%s: pruned %d expired buff(s)", player_snapshot.id, pruned)

        # 2. 有效属性
        player = effective_combatant(player_snapshot, state, self.item_table, now=now)

        # 3. 生成怪物
        monster = self.monster_generator.generate(enemy_level, streak, rng=rng.spawn())
        enemy = monster.to_combatant()

        # 4. 战斗
        session = self.run_encounter(
            player,
            enemy,
            state,
            EncounterState(),
            rng,
            is_monster_encounter=True,
        )
        won = session.winner_id == player.id

        # 5. 奖励
        if won:
            new_streak = streak + 1
            reward = self.reward_calculator.compute_reward(
                monster,
                new_streak,
                player_snapshot.level,
                rng=rng.spawn(),
            )
        else:
            new_streak = 0
            reward = None

        logger.info(
            "battle finished: player=%s monster=%s won=%s turns=%d streak=%d",
            player.id,
            monster.catalog_id,
            won,
            session.current_round,
            new_streak,
        )

        return BattleOutcome(
            won=won,
            log=session.log,
            final_health=player.hp,
            monster=monster,
            exp=reward.exp if reward else 0,
            coins=reward.coins if reward else 0,
            new_streak=new_streak,
            reward=reward,
            player_state=state,
            turns=session.current_round,
            hit_turn_cap=session.end_reason == EncounterEndReason.TURN_CAP,
        )

    def resolve_duel(
        self,
        a_snapshot: CharacterSnapshot,
        b_snapshot: CharacterSnapshot,
        rng_seed: Optional[int] = None,
        now: Optional[float] = None,
    ) -> DuelOutcome:
        """玩家对玩家（a 为挑战者，b 为被挑战者）"""
        if a_snapshot.id == b_snapshot.id:
            raise ValueError("A character cannot duel itself")

        rng = DiceRoller(seed=rng_seed if rng_seed is not None else settings.default_seed)
        a_state = EncounterState.load(a_snapshot.encounter_state, owner_id=a_snapshot.id)
        b_state = EncounterState.load(b_snapshot.encounter_state, owner_id=b_snapshot.id)
        a_state.prune_expired_buffs(now)
        b_state.prune_expired_buffs(now)

        a = effective_combatant(a_snapshot, a_state, self.item_table, now=now)
        b = effective_combatant(b_snapshot, b_state, self.item_table, now=now)

        session = self.run_encounter(a, b, a_state, b_state, rng, is_monster_encounter=False)
        winner = session.get_combatant(session.winner_id)
        loser = session.opponent_of(winner)

        logger.info(
            "duel finished: %s vs %s winner=%s turns=%d",
            a.id,
            b.id,
            winner.id,
            session.current_round,
        )

        return DuelOutcome(
            winner_id=winner.id,
            loser_id=loser.id,
            log=session.log,
            final_health={a.id: a.hp, b.id: b.hp},
            states={a.id: a_state, b.id: b_state},
            turns=session.current_round,
            hit_turn_cap=session.end_reason == EncounterEndReason.TURN_CAP,
        )

    def run_encounter(
        self,
        first: Combatant,
        second: Combatant,
        first_state: EncounterState,
        second_state: EncounterState,
        rng: DiceRoller,
        is_monster_encounter: bool = False,
    ) -> EncounterSession:
        """
        战斗循环

        每回合：快者攻击慢者；慢者仍存活则反击。任意一方生命值归零立即结束。
        """
        session = EncounterSession(
            first=first,
            second=second,
            first_state=first_state,
            second_state=second_state,
            is_monster_encounter=is_monster_encounter,
            turn_cap=self.turn_cap,
        )
        session.log.add(0, "system", f"⚔️ {first.name} VS {second.name}")

        # 开战前就已倒下的一方直接判负
        for combatant in (first, second):
            if not combatant.is_alive:
                self._end(session, EncounterEndReason.KNOCKOUT, session.opponent_of(combatant))
                return session

        faster, slower = resolve_order(first, second)
        logger.debug("turn order: %s -> %s", faster.id, slower.id)

        while not session.is_over:
            if session.current_round >= session.turn_cap:
                self._end_by_turn_cap(session)
                break

            session.current_round += 1
            self._take_turn(session, faster, slower, rng)
            if session.is_over:
                break
            self._take_turn(session, slower, faster, rng)

        return session

    # ============================================
    # 私有方法
    # ============================================

    def _take_turn(
        self,
        session: EncounterSession,
        actor: Combatant,
        target: Combatant,
        rng: DiceRoller,
    ) -> None:
        """执行一个行动者的回合：攻击 → 流派特效 → 状态结算"""
        state = session.state_for(actor)
        target_state = session.state_for(target)
        round_number = session.current_round

        if is_stunned(state):
            session.log.add(round_number, actor.id, f"⚡ {actor.name} is stunned and cannot act!")
        else:
            damage = compute_damage(actor.attack, target.defense, actor.is_monster(), rng)
            logger.debug("round %d %s -> %s: %s", round_number, actor.id, target.id, damage.to_dict())
            outcome = apply_archetype_effect(
                actor,
                damage.damage,
                damage.is_critical,
                state,
                target_state,
                rng,
            )
            dealt = target.take_damage(outcome.damage)
            session.record_damage(actor.id, dealt)

            crit_mark = "💥 " if damage.is_critical else ""
            session.log.add(
                round_number,
                actor.id,
                f"{actor.name} ➜ {target.name} {crit_mark}{outcome.damage}\n"
                f"{target.name}: {target.hp}/{target.max_hp}",
            )
            for message in outcome.messages:
                session.log.add(round_number, actor.id, message)

            if not target.is_alive:
                self._end(session, EncounterEndReason.KNOCKOUT, actor)
                return

        # 状态效果在行动者自己的回合末结算
        result = tick(actor.id, state, actor.hp, actor.max_hp)
        actor.set_health(result.new_health)
        if result.messages:
            session.log.add(round_number, actor.id, " ".join(result.messages))

        if not actor.is_alive:
            self._end(session, EncounterEndReason.KNOCKOUT, target)

    def _end(self, session: EncounterSession, reason: EncounterEndReason, winner: Combatant) -> None:
        session.end_reason = reason
        session.winner_id = winner.id
        session.log.add(session.current_round, "system", f"🏆 {winner.name} wins!")

    def _end_by_turn_cap(self, session: EncounterSession) -> None:
        """
        达到回合上限

        - 怪物战：强制判玩家失败
        - PvP：剩余生命比例高者胜，相同则被挑战者（second）胜
        """
        if session.is_monster_encounter:
            winner = session.second if session.second.is_monster() else session.first
        else:
            first_ratio = Fraction(session.first.hp, session.first.max_hp)
            second_ratio = Fraction(session.second.hp, session.second.max_hp)
            winner = session.first if first_ratio > second_ratio else session.second

        logger.info("encounter hit turn cap (%d rounds)", session.turn_cap)
        session.log.add(
            session.current_round,
            "system",
            f"⏱️ Turn limit reached ({session.turn_cap} rounds).",
        )
        self._end(session, EncounterEndReason.TURN_CAP, winner)


_default_engine: Optional[CombatEngine] = None


def _engine() -> CombatEngine:
    global _default_engine
    if _default_engine is None:
        _default_engine = CombatEngine()
    return _default_engine


def resolve_battle(
    player_snapshot: CharacterSnapshot,
    enemy_level: int,
    streak: int,
    rng_seed: Optional[int] = None,
) -> BattleOutcome:
    """Resolve a player-vs-monster battle with the default engine."""
    return _engine().resolve_battle(player_snapshot, enemy_level, streak, rng_seed)


def resolve_duel(
    a_snapshot: CharacterSnapshot,
    b_snapshot: CharacterSnapshot,
    rng_seed: Optional[int] = None,
) -> DuelOutcome:
    """Resolve a player-vs-player duel with the default engine."""
    return _engine().resolve_duel(a_snapshot, b_snapshot, rng_seed)
