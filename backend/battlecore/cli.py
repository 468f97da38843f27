"""
战斗模拟 CLI

直接调用服务层，无需任何存储后端（使用内存仓库）。

使用方式:
    battlecore-sim hunt --level 10 --attack 50 --defense 30 --speed 15 --rounds 5
    battlecore-sim duel --archetype-a combo --archetype-b poison --seed 7
"""
import argparse
import asyncio
import logging
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from battlecore.combat.models.character import CharacterSnapshot
from battlecore.combat.models.combatant import Archetype
from battlecore.combat.models.combat_session import BattleLog
from battlecore.combat.rules import max_health_for_level
from battlecore.config import settings, validate_config
from battlecore.services import BattleService, InMemoryCharacterRepository

logger = logging.getLogger(__name__)

console = Console()

ARCHETYPE_CHOICES = [a.value for a in Archetype]

# 颜色主题
COLORS = {
    "win": "bold bright_green",
    "loss": "bold bright_red",
    "system": "bright_magenta",
    "log": "dim",
}


# ==================== 构造角色 ====================

def build_character(
    character_id: str,
    name: str,
    level: int,
    attack: int,
    defense: int,
    speed: int,
    archetype: Optional[str],
) -> CharacterSnapshot:
    max_health = max_health_for_level(level)
    return CharacterSnapshot(
        id=character_id,
        name=name,
        level=level,
        health=max_health,
        max_health=max_health,
        attack=attack,
        defense=defense,
        speed=speed,
        archetype=Archetype(archetype) if archetype else None,
    )


# ==================== 显示渲染 ====================

def print_log(log: BattleLog, verbose: bool) -> None:
    if not verbose:
        return
    for entry in log:
        console.print(f"[{COLORS['log']}]R{entry.round:>2}[/] {escape(entry.message)}")


def print_hunt_table(rows: List[List[str]]) -> None:
    table = Table(title="Hunt results")
    for column in ("#", "Monster", "Result", "Turns", "HP", "Exp", "Coins", "Streak", "Drops"):
        table.add_column(column)
    for row in rows:
        table.add_row(*row)
    console.print(table)


# ==================== 命令 ====================

async def run_hunt(args: argparse.Namespace) -> None:
    player = build_character("player", args.name, args.level, args.attack, args.defense, args.speed, args.archetype)
    repository = InMemoryCharacterRepository({player.id: player})
    service = BattleService(repository)

    rows: List[List[str]] = []
    for index in range(args.rounds):
        seed = args.seed + index if args.seed is not None else None
        outcome = await service.hunt(player.id, enemy_level=args.enemy_level, rng_seed=seed)
        print_log(outcome.log, args.verbose)
        if args.verbose:
            console.print(outcome.to_summary(), markup=False)
        rows.append(
            [
                str(index + 1),
                outcome.monster.name,
                f"[{COLORS['win']}]WIN[/]" if outcome.won else f"[{COLORS['loss']}]LOSS[/]",
                str(outcome.turns),
                str(outcome.final_health),
                str(outcome.exp),
                str(outcome.coins),
                str(outcome.new_streak),
                ", ".join(outcome.reward.items) if outcome.reward else "",
            ]
        )
        if outcome.final_health <= 0:
            console.print(f"[{COLORS['system']}]{args.name} has fallen, stopping.[/]")
            break

    print_hunt_table(rows)
    final = await repository.get_snapshot(player.id)
    console.print(
        Panel(
            f"Level {final.level}  EXP {final.experience}  Coins {final.coins}\n"
            f"HP {final.health}/{final.max_health}  Streak {final.streak} (best {final.highest_streak})",
            title=final.name,
        )
    )


async def run_duel(args: argparse.Namespace) -> None:
    a = build_character("a", "Challenger", args.level, args.attack_a, args.defense_a, args.speed_a, args.archetype_a)
    b = build_character("b", "Defender", args.level, args.attack_b, args.defense_b, args.speed_b, args.archetype_b)
    service = BattleService(InMemoryCharacterRepository({a.id: a, b.id: b}))

    outcome = await service.duel(a.id, b.id, rng_seed=args.seed)
    print_log(outcome.log, args.verbose)
    winner = a.name if outcome.winner_id == a.id else b.name
    suffix = " (turn limit)" if outcome.hit_turn_cap else ""
    console.print(
        Panel(
            f"Winner: [{COLORS['win']}]{winner}[/]{suffix}\n"
            f"Turns: {outcome.turns}\n"
            f"HP: {a.name} {outcome.final_health[a.id]} / {b.name} {outcome.final_health[b.id]}",
            title="Duel",
        )
    )


# ==================== 入口 ====================

def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--seed", type=int, default=settings.default_seed, help="随机种子")
    common.add_argument("-v", "--verbose", action="store_true", help="打印完整战斗日志")

    parser = argparse.ArgumentParser(description="回合制战斗模拟器")
    sub = parser.add_subparsers(dest="command", required=True)

    hunt = sub.add_parser("hunt", parents=[common], help="连续狩猎怪物")
    hunt.add_argument("--name", default="Hero")
    hunt.add_argument("--level", type=int, default=1)
    hunt.add_argument("--enemy-level", type=int, default=None, help="怪物参考等级（默认等于角色等级）")
    hunt.add_argument("--attack", type=int, default=10)
    hunt.add_argument("--defense", type=int, default=5)
    hunt.add_argument("--speed", type=int, default=0)
    hunt.add_argument("--archetype", choices=ARCHETYPE_CHOICES, default=None)
    hunt.add_argument("--rounds", type=int, default=1, help="狩猎次数")

    duel = sub.add_parser("duel", parents=[common], help="两名角色对决")
    duel.add_argument("--level", type=int, default=10)
    for side in ("a", "b"):
        duel.add_argument(f"--attack-{side}", type=int, default=30)
        duel.add_argument(f"--defense-{side}", type=int, default=20)
        duel.add_argument(f"--speed-{side}", type=int, default=0)
        duel.add_argument(f"--archetype-{side}", choices=ARCHETYPE_CHOICES, default=None)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """主入口"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not validate_config():
        raise SystemExit(1)

    logger.debug("running %s (seed=%s)", args.command, args.seed)

    if args.command == "hunt":
        asyncio.run(run_hunt(args))
    else:
        asyncio.run(run_duel(args))


if __name__ == "__main__":
    main()
