"""Equipment catalog and loot items for the simulated economy."""

from __future__ import annotations

from dataclasses import dataclass

from worldsim.core.enums import EquipmentSlot


# ---------------------------------------------------------------------------
# Equipment template
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Equipment:
    """Immutable catalog entry.  Actors reference equipment by ``item_id``."""

    item_id: int
    name: str
    slot: EquipmentSlot
    value: int
    weapon_power: int = 0
    armor_class: int = 0
    strength_bonus: int = 0
    max_hp_bonus: int = 0
    two_handed: bool = False


@dataclass(frozen=True, slots=True)
class LootItem:
    """A sellable trinket carried in an actor's market inventory."""

    name: str
    value: int
    level: int = 1


# ---------------------------------------------------------------------------
# Catalog registry
# ---------------------------------------------------------------------------

ITEM_CATALOG: dict[int, Equipment] = {}


def _reg(e: Equipment) -> Equipment:
    ITEM_CATALOG[e.item_id] = e
    return e


# ---- Weapons ----
_reg(Equipment(1,  "Dagger",            EquipmentSlot.MAIN_HAND, 60,    weapon_power=3))
_reg(Equipment(2,  "Short Sword",       EquipmentSlot.MAIN_HAND, 180,   weapon_power=6))
_reg(Equipment(3,  "Mace",              EquipmentSlot.MAIN_HAND, 420,   weapon_power=9))
_reg(Equipment(4,  "Long Sword",        EquipmentSlot.MAIN_HAND, 900,   weapon_power=13))
_reg(Equipment(5,  "War Hammer",        EquipmentSlot.MAIN_HAND, 1900,  weapon_power=19, two_handed=True))
_reg(Equipment(6,  "Bastard Sword",     EquipmentSlot.MAIN_HAND, 3600,  weapon_power=25))
_reg(Equipment(7,  "Great Axe",         EquipmentSlot.MAIN_HAND, 7200,  weapon_power=34, two_handed=True))
_reg(Equipment(8,  "Rune Blade",        EquipmentSlot.MAIN_HAND, 15000, weapon_power=45, strength_bonus=3))

# ---- Off hand ----
_reg(Equipment(20, "Buckler",           EquipmentSlot.OFF_HAND,  120,   armor_class=2))
_reg(Equipment(21, "Kite Shield",       EquipmentSlot.OFF_HAND,  800,   armor_class=5))

# ---- Armor ----
_reg(Equipment(30, "Padded Tunic",      EquipmentSlot.BODY,  90,    armor_class=2))
_reg(Equipment(31, "Leather Armor",     EquipmentSlot.BODY,  350,   armor_class=4))
_reg(Equipment(32, "Chain Mail",        EquipmentSlot.BODY,  1400,  armor_class=8, max_hp_bonus=5))
_reg(Equipment(33, "Plate Armor",       EquipmentSlot.BODY,  6000,  armor_class=14, max_hp_bonus=15))
_reg(Equipment(40, "Leather Cap",       EquipmentSlot.HEAD,  70,    armor_class=1))
_reg(Equipment(41, "Iron Helm",         EquipmentSlot.HEAD,  600,   armor_class=3))
_reg(Equipment(50, "Cloth Gloves",      EquipmentSlot.HANDS, 40,    armor_class=1))
_reg(Equipment(51, "Gauntlets",         EquipmentSlot.HANDS, 500,   armor_class=3))
_reg(Equipment(60, "Sandals",           EquipmentSlot.FEET,  30,    armor_class=1))
_reg(Equipment(61, "Iron Boots",        EquipmentSlot.FEET,  550,   armor_class=3))
_reg(Equipment(70, "Leather Greaves",   EquipmentSlot.LEGS,  150,   armor_class=2))
_reg(Equipment(71, "Steel Greaves",     EquipmentSlot.LEGS,  900,   armor_class=4))
_reg(Equipment(80, "Bracers",           EquipmentSlot.ARMS,  110,   armor_class=1))
_reg(Equipment(81, "Steel Vambraces",   EquipmentSlot.ARMS,  750,   armor_class=3))


class EquipmentCatalog:
    """Read access to the priced catalog used by shopping activities.

    Wraps a registry dict so tests can pass a tiny custom catalog.
    """

    __slots__ = ("_items",)

    def __init__(self, items: dict[int, Equipment] | None = None) -> None:
        self._items = items if items is not None else ITEM_CATALOG

    def get(self, item_id: int) -> Equipment | None:
        return self._items.get(item_id)

    def weapons(self) -> list[Equipment]:
        return [e for e in self._items.values() if e.slot == EquipmentSlot.MAIN_HAND]

    def by_slot(self, slot: EquipmentSlot) -> list[Equipment]:
        return [e for e in self._items.values() if e.slot == slot]

    def best_upgrade(self, slot: EquipmentSlot, current: int, budget: int) -> Equipment | None:
        """Highest-rated item in *slot* that beats *current* and fits *budget*."""
        if slot == EquipmentSlot.MAIN_HAND:
            rating = lambda e: e.weapon_power  # noqa: E731
        else:
            rating = lambda e: e.armor_class  # noqa: E731
        options = [e for e in self.by_slot(slot) if e.value <= budget and rating(e) > current]
        if not options:
            return None
        return max(options, key=rating)


DEFAULT_CATALOG = EquipmentCatalog()


# ---------------------------------------------------------------------------
# Loot names
# ---------------------------------------------------------------------------

LOOT_ADJECTIVES: tuple[str, ...] = (
    "Tarnished", "Gleaming", "Ancient", "Cracked", "Runed", "Gilded", "Bloodied",
)
LOOT_NOUNS: tuple[str, ...] = (
    "Amulet", "Goblet", "Idol", "Ring", "Dagger", "Scroll", "Crown", "Gem",
)
