"""
Player actions, action results and process_action outcomes.

Actions are tagged variants: one frozen dataclass per kind, each carrying only
the fields that kind needs. The same classes are used for placing a card in the
circle phase and for naming a target in the resolution phase.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Optional, Union

from pechenka.errors import ERROR_MESSAGES, ErrorCode


class ActionKind(str, Enum):
    REVEAL = "reveal"
    SWORD = "sword"
    SHIELD = "shield"
    HILL = "hill"


@dataclass(frozen=True)
class RevealAction:
    """Place a hint card from hand (by index)."""

    card_index: int
    kind: ClassVar[ActionKind] = ActionKind.REVEAL

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind.value, "card_index": self.card_index}


@dataclass(frozen=True)
class SwordAction:
    """Commit the sword (circle phase) or name its target (resolution phase)."""

    target_id: Optional[str] = None
    kind: ClassVar[ActionKind] = ActionKind.SWORD

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind.value, "target_id": self.target_id}


@dataclass(frozen=True)
class ShieldAction:
    """Commit the shield, or name who it defends against (optional)."""

    target_id: Optional[str] = None
    kind: ClassVar[ActionKind] = ActionKind.SHIELD

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind.value, "target_id": self.target_id}


@dataclass(frozen=True)
class HillAction:
    """Place the hill card."""

    kind: ClassVar[ActionKind] = ActionKind.HILL

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind.value}


Action = Union[RevealAction, SwordAction, ShieldAction, HillAction]

ACTION_TYPES = (RevealAction, SwordAction, ShieldAction, HillAction)


def action_from_dict(data: dict[str, Any]) -> Action:
    """Parse {"type": ..., ...}. Accepts camelCase keys (cardIndex, targetId) too."""
    action_type = data.get("type")
    target_id = data.get("target_id", data.get("targetId"))
    if action_type == ActionKind.REVEAL.value:
        card_index = data.get("card_index", data.get("cardIndex"))
        if not isinstance(card_index, int) or isinstance(card_index, bool):
            raise ValueError("reveal action requires an integer card_index")
        return RevealAction(card_index=card_index)
    if action_type == ActionKind.SWORD.value:
        return SwordAction(target_id=target_id)
    if action_type == ActionKind.SHIELD.value:
        return ShieldAction(target_id=target_id)
    if action_type == ActionKind.HILL.value:
        return HillAction()
    raise ValueError(f"Unknown action type: {action_type!r}")


class ResultKind(str, Enum):
    CARD_PLACED = "card_placed"
    SWORD_USED = "sword_used"
    SHIELD_USED = "shield_used"


@dataclass(frozen=True)
class ActionResult:
    """What an accepted action did."""

    kind: ResultKind
    target_id: Optional[str] = None
    success: Optional[bool] = None  # sword only: did it hit the hunted character


@dataclass(frozen=True)
class ActionOutcome:
    """Return value of process_action."""

    success: bool
    result: Optional[ActionResult] = None
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None

    @classmethod
    def ok(cls, result: ActionResult) -> "ActionOutcome":
        return cls(success=True, result=result)

    @classmethod
    def failure(cls, code: ErrorCode) -> "ActionOutcome":
        """Create a failure outcome with the code's message."""
        return cls(success=False, error=ERROR_MESSAGES[code], error_code=code)
