# pest_empire/employees.py
from typing import Optional

from .catalog import TIERS, ClientArchetype, SkillTier, UpgradeEffects, next_tier
from .clients import clamp_satisfaction
from .config import SYNERGY_BONUS, TRUCK_COST, XP_PER_JOB
from .models import Client, Employee, EquipmentBonuses, PromotionInfo, ServiceResult


def hire_cost(tier: SkillTier) -> int:
    """Employee hire cost plus the truck that comes with them."""
    return TIERS[tier].hire_cost + TRUCK_COST


def is_sick(employee: Employee) -> bool:
    return employee.temporarily_unassigned is not None


def can_assign(employee: Employee) -> bool:
    # Suspended employees keep an empty roster but must not pick up new work
    if is_sick(employee):
        return False
    return len(employee.assigned_clients) < employee.max_clients


def is_assigned_to(employee: Employee, client_id: str) -> bool:
    return client_id in employee.assigned_clients


def assign(employee: Employee, client_id: str) -> bool:
    if not can_assign(employee) or is_assigned_to(employee, client_id):
        return False
    employee.assigned_clients.append(client_id)
    return True


def unassign(employee: Employee, client_id: str) -> bool:
    if client_id not in employee.assigned_clients:
        return False
    employee.assigned_clients.remove(client_id)
    return True


def satisfaction_gain(employee: Employee,
                      client: Client,
                      equipment_bonuses: EquipmentBonuses,
                      upgrade_effects: UpgradeEffects) -> int:
    """Raw satisfaction a single job is worth, before clamping."""
    rank = TIERS[employee.tier].rank
    gain = (TIERS[employee.tier].satisfaction_bonus
            + equipment_bonuses.satisfaction_bonus
            + upgrade_effects.satisfaction_bonus)

    if client.archetype == ClientArchetype.SPEED_FOCUSED:
        if rank >= TIERS[SkillTier.EXPERIENCED].rank:
            gain += SYNERGY_BONUS
        gain += upgrade_effects.speed_client_bonus

    elif client.archetype == ClientArchetype.ECO_FOCUSED:
        if employee.tier == SkillTier.EXPERT:
            gain += SYNERGY_BONUS
        gain += equipment_bonuses.eco_bonus + upgrade_effects.eco_client_bonus

    return gain


def service_client(employee: Employee,
                   client: Client,
                   equipment_bonuses: EquipmentBonuses,
                   upgrade_effects: UpgradeEffects) -> ServiceResult:
    """
    Perform one job: restore the client's satisfaction, mark them serviced,
    and credit the employee with the job and its XP.
    The reported gain is what actually landed after clamping at 100.
    """
    old = client.satisfaction
    gain = satisfaction_gain(employee, client, equipment_bonuses, upgrade_effects)
    client.satisfaction = clamp_satisfaction(client.satisfaction + gain)
    client.serviced = True

    employee.total_jobs_completed += 1
    employee.xp += XP_PER_JOB

    return ServiceResult(satisfaction_gain=client.satisfaction - old)


def get_promotion_info(employee: Employee) -> Optional[PromotionInfo]:
    target = next_tier(employee.tier)
    if target is None:
        return None

    spec = TIERS[target]
    return PromotionInfo(
        next_tier=target,
        xp_required=spec.xp_required,
        cost=spec.promotion_cost,
        can_promote=employee.xp >= spec.xp_required,
    )


def apply_promotion(employee: Employee, tier: SkillTier):
    """Move to ``tier`` and reset tier-derived fields. XP does not carry over."""
    spec = TIERS[tier]
    employee.tier = tier
    employee.salary = spec.weekly_salary
    employee.max_clients = spec.max_clients
    employee.xp = 0
