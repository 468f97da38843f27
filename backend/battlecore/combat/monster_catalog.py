"""
怪物图鉴

内置静态图鉴 + 可选的 JSON 覆盖文件（BATTLE_MONSTER_CATALOG_PATH）
"""
import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


def _entry(name: str, level: int, hp: int, attack: int, defense: int, exp: int, drops: List[str]) -> Dict[str, Any]:
    return {
        "name": name,
        "level": level,
        "hp": hp,
        "attack": attack,
        "defense": defense,
        "exp": exp,
        "drops": drops,
    }


# ============================================
# 内置图鉴
# ============================================

MONSTER_CATALOG: Dict[str, Dict[str, Any]] = {
    # ===== Lv 1-5 =====
    "sea_beast_small": _entry("Small Sea Beast", 1, 50, 5, 3, 20, ["fish_small", "sea_crystal"]),
    "bandit_weak": _entry("Weak Bandit", 1, 45, 6, 2, 15, ["rusty_knife", "bandana"]),
    "wild_monkey": _entry("Wild Monkey", 2, 60, 7, 4, 25, ["banana", "monkey_fur"]),
    "angry_boar": _entry("Angry Boar", 2, 70, 8, 5, 30, ["boar_meat", "boar_tusk"]),
    "pirate_rookie": _entry("Rookie Pirate", 3, 80, 10, 6, 35, ["cutlass", "pirate_hat"]),
    "marine_trainee": _entry("Marine Trainee", 5, 100, 12, 8, 45, ["marine_badge", "training_sword"]),
    # ===== Lv 6-10 =====
    "axe_hand": _entry("Axe-Hand Marine", 6, 120, 15, 10, 50, ["steel_axe", "marine_coat"]),
    "corrupt_marine": _entry("Corrupt Marine", 7, 130, 16, 12, 55, ["bribe_money", "marine_rifle"]),
    "helmeppo": _entry("Helmeppo", 8, 150, 18, 15, 70, ["kukri_knife", "fancy_chin"]),
    "morgan": _entry("Captain Morgan", 10, 200, 25, 20, 100, ["axe_hand_blade", "captain_badge"]),
    "buggy_pirate": _entry("Buggy Pirate", 10, 160, 20, 15, 75, ["clown_nose", "circus_knife"]),
    # ===== Lv 11-20 =====
    "mohji_richie": _entry("Mohji & Richie", 12, 180, 22, 18, 85, ["lion_mane", "beast_whip"]),
    "cabaji": _entry("Cabaji", 13, 190, 23, 19, 90, ["unicycle", "acrobat_sword"]),
    "buggy": _entry("Buggy the Clown", 15, 250, 30, 25, 120, ["buggy_ball", "clown_cape"]),
    "black_cat_pirate": _entry("Black Cat Pirate", 15, 200, 25, 20, 95, ["cat_claw", "pirate_flag"]),
    "sham": _entry("Sham", 16, 210, 26, 21, 100, ["cat_claw", "cat_ears"]),
    "buchi": _entry("Buchi", 16, 220, 27, 22, 100, ["cat_claw", "heavy_boots"]),
    "jango": _entry("Jango", 17, 230, 28, 23, 110, ["hypno_ring", "chakram"]),
    "kuro": _entry("Captain Kuro", 20, 300, 35, 30, 150, ["cat_claws", "butler_glasses"]),
    "cook_pirate": _entry("Cook Pirate", 20, 250, 30, 25, 120, ["cooking_knife", "chef_hat"]),
    # ===== Lv 21-30 =====
    "street_thug": _entry("Street Thug", 25, 280, 32, 28, 130, ["brass_knuckles", "bandana"]),
    "corrupt_merchant": _entry("Corrupt Merchant", 26, 290, 33, 29, 135, ["gold_coin", "forged_papers"]),
    "bounty_hunter": _entry("Bounty Hunter", 27, 300, 35, 30, 140, ["wanted_poster", "hunter_pistol"]),
    "smoker": _entry("Captain Smoker", 30, 400, 45, 40, 200, ["jitte", "cigar"]),
    "fishman_grunt": _entry("Fishman Grunt", 30, 350, 40, 35, 160, ["fish_scale", "coral_spear"]),
    # ===== Lv 31-40 =====
    "chu": _entry("Chu", 31, 360, 42, 36, 165, ["water_gun", "fish_scale"]),
    "kuroobi": _entry("Kuroobi", 32, 370, 44, 38, 170, ["karate_belt", "fish_scale"]),
    "hatchan": _entry("Hatchan", 33, 380, 46, 40, 175, ["six_swords", "octopus_ink"]),
    "arlong": _entry("Arlong", 35, 500, 55, 50, 250, ["kiribachi", "shark_tooth"]),
    "snow_beast": _entry("Snow Beast", 35, 400, 48, 42, 180, ["snow_fur", "ice_crystal"]),
    "lapahn": _entry("Lapahn", 36, 410, 50, 44, 185, ["lapahn_fur", "snow_boots"]),
    "wapol_soldier": _entry("Wapol Soldier", 37, 420, 52, 46, 190, ["tin_armor", "soldier_rifle"]),
    "chess": _entry("Chess", 38, 430, 54, 48, 195, ["chess_piece", "bow"]),
    "wapol": _entry("Wapol", 40, 600, 65, 60, 300, ["tin_crown", "baku_baku_fruit"]),
}


# ============================================
# 校验
# ============================================

_REQUIRED_INT_FIELDS = ("level", "hp", "attack", "defense", "exp")


def _ensure_int(value: Any, field: str, errors: List[str]) -> Optional[int]:
    if isinstance(value, bool):
        errors.append(f"{field} must be an integer")
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        errors.append(f"{field} must be an integer")
        return None


def validate_entry(entry: Dict[str, Any]) -> List[str]:
    """Return a list of problems with one catalog entry (empty when valid)."""
    errors: List[str] = []

    name = entry.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append("name is required and must be a string")

    for field in _REQUIRED_INT_FIELDS:
        value = _ensure_int(entry.get(field), field, errors)
        if value is None:
            continue
        if field in ("level", "hp") and value < 1:
            errors.append(f"{field} must be >= 1")
        elif value < 0:
            errors.append(f"{field} must be >= 0")

    coins = entry.get("coins")
    if coins is not None:
        coins_value = _ensure_int(coins, "coins", errors)
        if coins_value is not None and coins_value < 0:
            errors.append("coins must be >= 0")

    drops = entry.get("drops", [])
    if not isinstance(drops, list) or any(not isinstance(d, str) or not d.strip() for d in drops):
        errors.append("drops must be a list of strings")

    return errors


def normalize_entry(catalog_id: str, entry: Dict[str, Any]) -> Dict[str, Any]:
    """Validate and coerce one entry; raises ValueError listing every problem."""
    if not isinstance(entry, dict):
        raise ValueError(f"{catalog_id}: entry must be an object")
    errors = validate_entry(entry)
    if errors:
        raise ValueError(f"{catalog_id}: " + "; ".join(errors))

    normalized = {
        "name": entry["name"],
        "level": int(entry["level"]),
        "hp": int(entry["hp"]),
        "attack": int(entry["attack"]),
        "defense": int(entry["defense"]),
        "exp": int(entry["exp"]),
        "drops": list(entry.get("drops", [])),
    }
    if entry.get("coins") is not None:
        normalized["coins"] = int(entry["coins"])
    return normalized


# ============================================
# 加载
# ============================================


def load_catalog(path: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
    """
    加载怪物图鉴

    Args:
        path: JSON 文件路径（对象：catalog_id -> entry）。为空时返回内置图鉴副本

    Returns:
        Dict: catalog_id -> 规范化条目

    Raises:
        FileNotFoundError: 文件不存在
        ValueError: JSON 结构或条目非法
    """
    if not path:
        return copy.deepcopy(MONSTER_CATALOG)

    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Monster catalog not found: {path}")

    with open(file_path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, dict):
        raise ValueError("Monster catalog must be a JSON object keyed by monster id")

    catalog = {catalog_id: normalize_entry(catalog_id, entry) for catalog_id, entry in raw.items()}
    logger.info("Loaded %d monsters from %s", len(catalog), path)
    return catalog
