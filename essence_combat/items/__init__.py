from .inventory import Acquisition, InventoryItem, LootDrop, LootItem, merge_loot
