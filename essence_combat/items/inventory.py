from typing import Any

from pydantic import BaseModel, Field


class LootDrop(BaseModel):
    """An entry of an enemy's drop table."""

    id: str = Field(
        description="Identifier of the item that can drop.",
    )
    name: str = Field(
        "",
        description="Display name of the item, defaults to its id.",
    )
    quantity: int = Field(
        1,
        ge=1,
        description="How many items drop at once.",
    )

    def model_post_init(self, _: Any) -> None:
        if not self.id:
            raise ValueError("Loot drop id must be a non-empty string.")
        if not self.name:
            self.name = self.id


class LootItem(BaseModel):
    """An item actually dropped during reward collection."""

    id: str = Field(
        description="Identifier of the dropped item.",
    )
    name: str = Field(
        description="Display name of the dropped item.",
    )
    quantity: int = Field(
        ge=1,
        description="How many items dropped.",
    )
    source: str = Field(
        description="Where the item came from, e.g. 'combat_forest'.",
    )

    def __str__(self) -> str:
        return f"{self.quantity}x {self.name}"


class Acquisition(BaseModel):
    """When and where an inventory stack was first obtained."""

    timestamp: float = Field(
        description="Epoch seconds of the acquisition.",
    )
    source: str = Field(
        description="Where the item came from.",
    )


class InventoryItem(BaseModel):
    """A stack of identical items in the player's inventory."""

    id: str = Field(
        description="Identifier of the item.",
    )
    name: str = Field(
        description="Display name of the item.",
    )
    quantity: int = Field(
        ge=0,
        description="Number of items in the stack.",
    )
    acquired: Acquisition | None = Field(
        None,
        description="Acquisition metadata, set when the stack is created by loot.",
    )


def merge_loot(
    inventory: list[InventoryItem],
    loot: list[LootItem],
    timestamp: float,
) -> list[InventoryItem]:
    """
    Merges dropped items into an inventory.

    Items whose id already has a stack increase that stack, the others are
    appended as new stacks carrying their acquisition metadata. The input
    inventory is left untouched.

    Args:
        inventory (list[InventoryItem]):
            The current inventory.
        loot (list[LootItem]):
            The dropped items, in drop order.
        timestamp (float):
            Acquisition time recorded on new stacks.

    Returns:
        list[InventoryItem]:
            The merged inventory.

    """
    merged = [item.model_copy() for item in inventory]
    for drop in loot:
        existing = next((item for item in merged if item.id == drop.id), None)
        if existing is not None:
            existing.quantity += drop.quantity
            continue
        merged.append(
            InventoryItem(
                id=drop.id,
                name=drop.name,
                quantity=drop.quantity,
                acquired=Acquisition(timestamp=timestamp, source=drop.source),
            )
        )
    return merged
