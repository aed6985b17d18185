# pest_empire/economy.py
"""
Equipment and upgrade ownership: prerequisite-gated purchase checks and
aggregated bonuses. Aggregates are recomputed from the owned ids on every
call, there is no cache to invalidate.
"""
from typing import Dict, Iterable, List, Optional

from .catalog import EQUIPMENT, UPGRADES, EquipmentDef, UpgradeDef, UpgradeEffects, UpgradePath
from .models import ActiveEvent, EquipmentBonuses


def _can_purchase(catalog: Dict, item_id: str, owned: Iterable[str]) -> bool:
    item = catalog.get(item_id)
    if item is None:
        return False

    owned = set(owned)
    if item_id in owned:
        return False
    if item.requires:
        return item.requires in owned
    return True


def can_purchase_equipment(equipment_id: str, owned_equipment: Iterable[str]) -> bool:
    return _can_purchase(EQUIPMENT, equipment_id, owned_equipment)


def can_purchase_upgrade(upgrade_id: str, owned_upgrades: Iterable[str]) -> bool:
    return _can_purchase(UPGRADES, upgrade_id, owned_upgrades)


def aggregate_equipment_bonuses(owned_equipment: Iterable[str]) -> EquipmentBonuses:
    bonuses = EquipmentBonuses()
    for equipment_id in owned_equipment:
        equip = EQUIPMENT.get(equipment_id)
        if not equip:
            continue
        bonuses.satisfaction_bonus += equip.satisfaction_bonus
        bonuses.speed_bonus += equip.speed_bonus
        bonuses.eco_bonus += equip.eco_bonus
    return bonuses


def aggregate_upgrade_effects(owned_upgrades: Iterable[str]) -> UpgradeEffects:
    total = UpgradeEffects()
    for upgrade_id in owned_upgrades:
        upgrade = UPGRADES.get(upgrade_id)
        if not upgrade:
            continue
        fx = upgrade.effects

        total.job_speed += fx.job_speed
        total.satisfaction_bonus += fx.satisfaction_bonus
        total.revenue_bonus += fx.revenue_bonus
        total.eco_client_bonus += fx.eco_client_bonus
        total.speed_client_bonus += fx.speed_client_bonus

        total.auto_assign = total.auto_assign or fx.auto_assign
        total.smart_matching = total.smart_matching or fx.smart_matching
        total.auto_promote = total.auto_promote or fx.auto_promote
        total.auto_hire = total.auto_hire or fx.auto_hire
    return total


def equipment_price(equipment: EquipmentDef, active_event: Optional[ActiveEvent]) -> int:
    """List price, reduced by any discount the active event grants."""
    if active_event and active_event.discount:
        pct = round(active_event.discount * 100)
        return equipment.cost * (100 - pct) // 100
    return equipment.cost


def apply_revenue_bonus(revenue: int, upgrade_effects: UpgradeEffects) -> int:
    if revenue > 0 and upgrade_effects.revenue_bonus > 0:
        pct = round(upgrade_effects.revenue_bonus * 100)
        return revenue * (100 + pct) // 100
    return revenue


def available_equipment(owned_equipment: Iterable[str]) -> List[EquipmentDef]:
    owned = list(owned_equipment)
    return [e for e in EQUIPMENT.values() if can_purchase_equipment(e.id, owned)]


def available_upgrades(owned_upgrades: Iterable[str]) -> List[UpgradeDef]:
    owned = list(owned_upgrades)
    return [u for u in UPGRADES.values() if can_purchase_upgrade(u.id, owned)]


def upgrades_by_path(path: UpgradePath) -> List[UpgradeDef]:
    return sorted((u for u in UPGRADES.values() if u.path == path), key=lambda u: u.tier)
