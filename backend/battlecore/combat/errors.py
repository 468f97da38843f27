"""Combat error types."""


class CombatantNotFoundError(LookupError):
    """Raised when a character id does not resolve to a stored character."""

    def __init__(self, combatant_id: str) -> None:
        self.combatant_id = combatant_id
        super().__init__(f"Combatant not found: {combatant_id}")


class MonsterNotFoundError(LookupError):
    """Raised when no catalog monster can be produced for a request."""

    def __init__(self, detail: str, level: int = 0) -> None:
        self.detail = detail
        self.level = level
        super().__init__(f"Monster not found (level {level}): {detail}")
