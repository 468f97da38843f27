"""
业务逻辑服务包
"""
from .battle_service import BattleService
from .character_repository import CharacterRepository, InMemoryCharacterRepository

__all__ = [
    "BattleService",
    "CharacterRepository",
    "InMemoryCharacterRepository",
]
