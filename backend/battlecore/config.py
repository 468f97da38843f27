"""
配置管理模块
"""
import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

# 加载环境变量
load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else None


class Settings(BaseModel):
    """应用配置"""

    # 战斗循环配置（怪物战与 PvP 共用同一个回合上限）
    battle_turn_cap: int = int(os.getenv("BATTLE_TURN_CAP", "50"))

    # 随机数种子（未指定时每场战斗使用系统熵）
    default_seed: Optional[int] = _optional_int("BATTLE_DEFAULT_SEED")

    # 同一角色串行化等待上限（秒）
    state_lock_timeout: float = float(os.getenv("BATTLE_STATE_LOCK_TIMEOUT", "10.0"))

    # 怪物图鉴覆盖文件（JSON），为空时使用内置图鉴
    monster_catalog_path: str = os.getenv("BATTLE_MONSTER_CATALOG_PATH", "")

    # 日志
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = os.getenv(
        "BATTLE_LOG_LEVEL", "INFO"
    ).upper()

    model_config = ConfigDict(case_sensitive=False)


# 全局配置实例
settings = Settings()


def validate_config() -> bool:
    """
    验证配置是否完整

    Returns:
        bool: 配置是否有效
    """
    if settings.battle_turn_cap < 1:
        print(f"警告: BATTLE_TURN_CAP 必须 >= 1，当前为 {settings.battle_turn_cap}")
        return False

    if settings.monster_catalog_path and not Path(settings.monster_catalog_path).exists():
        print(f"警告: 怪物图鉴文件不存在: {settings.monster_catalog_path}")
        return False

    return True
