# pest_empire/events.py
"""
Random weekly events.

Each event is plain data: a base chance, preconditions, an optional seasonal
boost, and an effect that mutates the state and returns an EventResult.
Effects never log; the engine reports whatever the result says.

Candidates are rolled independently in declaration order and the first
success wins, so at most one event fires per week. Events declared earlier
get the first roll.
"""
import logging
import numpy as np
from dataclasses import dataclass
from typing import Callable, List, Literal, Optional, Tuple

from .catalog import Season
from .clients import clamp_satisfaction
from .config import EQUIPMENT_DEAL_DISCOUNT, SEASONAL_MULTIPLIER, WEEKS_PER_YEAR
from .factories import create_client
from .models import ActiveEvent, EventHistoryEntry, EventResult, GameState

logger = logging.getLogger(__name__)

EventEffect = Callable[[GameState, np.random.RandomState], EventResult]


@dataclass(frozen=True)
class EventDefinition:
    id: str
    name: str
    description: str
    kind: Literal['positive', 'negative', 'neutral']
    base_chance: float
    effect: EventEffect
    min_week: int = 0
    requires_clients: bool = False
    requires_employees: bool = False
    requires_trucks: bool = False
    peak_seasons: Tuple[Season, ...] = ()  # Chance x1.5 during these seasons


def get_season(week: int) -> Season:
    week_in_year = week % WEEKS_PER_YEAR
    if 1 <= week_in_year <= 13:
        return Season.SPRING
    if 14 <= week_in_year <= 26:
        return Season.SUMMER
    if 27 <= week_in_year <= 39:
        return Season.FALL
    return Season.WINTER


# --- Effects ---

def _new_client_opportunity(state, rng):
    client = create_client(rng)
    state.clients.append(client)
    state.stats.clients_acquired += 1
    return EventResult(success=True, message=f"{client.name} ({client.archetype.value}) joined as a new client!")


def _equipment_deal(state, rng):
    pct = int(EQUIPMENT_DEAL_DISCOUNT * 100)
    return EventResult(
        success=True,
        message=f"Equipment prices reduced by {pct}% this week!",
        discount=EQUIPMENT_DEAL_DISCOUNT,
    )


def _referral_bonus(state, rng):
    bonus = int(rng.randint(200, 500))
    state.money += bonus
    return EventResult(success=True, message=f"Received referral bonus of ${bonus:,}!")


def _pest_surge(state, rng):
    affected = 0
    for client in state.clients:
        if not state.is_client_assigned(client.id):
            client.satisfaction = clamp_satisfaction(client.satisfaction - 15)
            affected += 1
    return EventResult(success=True, message=f"Pest surge! {affected} unserviced clients are extremely unhappy.")


def _equipment_breakdown(state, rng):
    if not state.trucks:
        return EventResult(success=False)

    truck = state.trucks[rng.randint(0, len(state.trucks))]
    repair_cost = int(rng.randint(400, 800))
    state.money -= repair_cost
    truck.condition = max(50, truck.condition - 20)
    return EventResult(success=True, message=f"Truck {truck.id} broke down! Repair cost: ${repair_cost:,}")


def _competitor_poaching(state, rng):
    if not state.clients:
        return EventResult(success=False)

    attempts = min(len(state.clients), int(rng.randint(1, 4)))
    hit = []
    for _ in range(attempts):
        target = state.clients[rng.randint(0, len(state.clients))]
        if target.id in hit:
            continue
        target.satisfaction = clamp_satisfaction(target.satisfaction - 20)
        hit.append(target.id)
    return EventResult(success=True, message=f"Competitor targeted {len(hit)} of your clients! Satisfaction decreased.")


def _employee_sick(state, rng):
    if not state.employees:
        return EventResult(success=False)

    employee = state.employees[rng.randint(0, len(state.employees))]
    count = len(employee.assigned_clients)
    employee.temporarily_unassigned = list(employee.assigned_clients)
    employee.assigned_clients = []
    return EventResult(
        success=True,
        message=f"{employee.name} is sick! {count} clients won't be serviced this week.",
        restore_next_turn=employee.id,
    )


def _regulation_fine(state, rng):
    fine = int(rng.randint(500, 1500))
    state.money -= fine
    return EventResult(success=True, message=f"Regulatory fine: ${fine:,}")


def _business_loan_offer(state, rng):
    loan = 2000
    state.money += loan
    return EventResult(success=True, message=f"Accepted business loan of ${loan:,}")


EVENT_CATALOG: List[EventDefinition] = [
    # Positive
    EventDefinition(
        id='new_client_opportunity', name='New Client Opportunity',
        description='A potential client heard about your excellent service and wants to sign up!',
        kind='positive', base_chance=0.15, effect=_new_client_opportunity,
    ),
    EventDefinition(
        id='equipment_deal', name='Equipment Sale',
        description='A supplier is offering a 30% discount on equipment this week!',
        kind='positive', base_chance=0.10, effect=_equipment_deal,
    ),
    EventDefinition(
        id='referral_bonus', name='Referral Bonus',
        description='A satisfied customer referred you to others, earning you a bonus payment!',
        kind='positive', base_chance=0.12, effect=_referral_bonus,
        min_week=5, requires_clients=True,
    ),
    # Negative
    EventDefinition(
        id='pest_surge', name='Pest Surge',
        description='A sudden infestation outbreak has increased demand across the city!',
        kind='negative', base_chance=0.08, effect=_pest_surge,
        peak_seasons=(Season.SUMMER, Season.FALL),
    ),
    EventDefinition(
        id='equipment_breakdown', name='Equipment Breakdown',
        description='One of your trucks needs emergency repairs!',
        kind='negative', base_chance=0.10, effect=_equipment_breakdown,
        requires_trucks=True,
    ),
    EventDefinition(
        id='competitor_poaching', name='Competitor Poaching',
        description='A competitor is trying to steal your clients with aggressive marketing!',
        kind='negative', base_chance=0.08, effect=_competitor_poaching,
        min_week=8, requires_clients=True,
    ),
    EventDefinition(
        id='employee_sick', name='Employee Sick Day',
        description='One of your employees is sick and cannot work this week!',
        kind='negative', base_chance=0.12, effect=_employee_sick,
        requires_employees=True,
    ),
    EventDefinition(
        id='regulation_fine', name='Regulatory Fine',
        description='A compliance inspection found minor violations. Pay the fine!',
        kind='negative', base_chance=0.06, effect=_regulation_fine,
        min_week=10,
    ),
    # Neutral
    EventDefinition(
        id='business_loan_offer', name='Business Loan Offer',
        description='A bank is offering you a business loan.',
        kind='neutral', base_chance=0.05, effect=_business_loan_offer,
        min_week=6,
    ),
]


def is_eligible(event: EventDefinition, state: GameState) -> bool:
    if event.min_week and state.week < event.min_week:
        return False
    if event.requires_clients and not state.clients:
        return False
    if event.requires_employees and not state.employees:
        return False
    if event.requires_trucks and not state.trucks:
        return False
    return True


def effective_chance(event: EventDefinition, week: int) -> float:
    chance = event.base_chance
    if event.peak_seasons and get_season(week) in event.peak_seasons:
        chance *= SEASONAL_MULTIPLIER
    return chance


def check_for_event(state: GameState,
                    rng: np.random.RandomState,
                    catalog: Optional[List[EventDefinition]] = None) -> Optional[EventDefinition]:
    """First eligible event (in catalog order) whose own roll succeeds, or None."""
    if catalog is None:
        catalog = EVENT_CATALOG

    candidates = [(e, effective_chance(e, state.week)) for e in catalog if is_eligible(e, state)]
    for event, chance in candidates:
        if rng.random() < chance:
            return event
    return None


def trigger_event(state: GameState,
                  event: EventDefinition,
                  rng: np.random.RandomState) -> Optional[ActiveEvent]:
    """Apply the effect. A successful event becomes the week's active event and is added to history."""
    result = event.effect(state, rng)
    if not result.success:
        logger.debug("Event %s had no effect", event.id)
        return None

    state.active_event = ActiveEvent(
        event_id=event.id,
        name=event.name,
        description=event.description,
        kind=event.kind,
        message=result.message,
        week=state.week,
        discount=result.discount,
        restore_next_turn=result.restore_next_turn,
    )
    state.event_history.append(EventHistoryEntry(event_id=event.id, week=state.week, message=result.message))
    return state.active_event


def process_turn_cleanup(state: GameState) -> List[str]:
    """
    Expire last week's active event and bring sick employees back.
    Returns the names of recovered employees.
    """
    state.active_event = None

    present = {c.id for c in state.clients}
    recovered = []
    for employee in state.employees:
        if employee.temporarily_unassigned is None:
            continue
        # Clients handed to someone else during the sick week stay with them
        held = {cid for other in state.employees if other is not employee for cid in other.assigned_clients}
        employee.assigned_clients = [
            cid for cid in employee.temporarily_unassigned if cid in present and cid not in held
        ]
        employee.temporarily_unassigned = None
        recovered.append(employee.name)
    return recovered
