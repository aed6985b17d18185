# pest_empire/clients.py
import math

from .catalog import ARCHETYPES, ClientArchetype
from .config import (
    ACQUISITION_GROWTH, CHURN_THRESHOLD, HIGH_SATISFACTION, HIGH_SATISFACTION_PCT,
    LOW_SATISFACTION, LOW_SATISFACTION_PCT, NEGLECT_DECAY_MULT, SATISFACTION_MAX,
    SATISFACTION_MIN, SERVICE_RESTORE
)
from .models import Client, SatisfactionStatus


def clamp_satisfaction(value: int) -> int:
    return max(SATISFACTION_MIN, min(SATISFACTION_MAX, value))


def calculate_revenue(client: Client, was_serviced: bool) -> int:
    """
    Weekly revenue for one client.
    Unserviced clients pay nothing. Otherwise +20% at >= 80 satisfaction,
    -30% below 50, and no modifier in between.
    """
    if not was_serviced:
        return 0

    pct = 100
    if client.satisfaction >= HIGH_SATISFACTION:
        pct = HIGH_SATISFACTION_PCT
    elif client.satisfaction < LOW_SATISFACTION:
        pct = LOW_SATISFACTION_PCT

    # Integer percents keep the floor exact
    return client.base_revenue * pct // 100


def update_satisfaction(client: Client) -> int:
    """
    End-of-week satisfaction update.
    Serviced clients recover; neglected ones take double their archetype decay.
    """
    if client.serviced:
        client.satisfaction += SERVICE_RESTORE
        client.serviced = False
    else:
        decay = ARCHETYPES[client.archetype].satisfaction_decay * NEGLECT_DECAY_MULT
        client.satisfaction -= decay

    client.satisfaction = clamp_satisfaction(client.satisfaction)
    return client.satisfaction


def should_churn(client: Client) -> bool:
    return client.satisfaction < CHURN_THRESHOLD


_STATUS_BUCKETS = [
    (80, SatisfactionStatus(label='Excellent', severity='excellent')),
    (60, SatisfactionStatus(label='Good', severity='good')),
    (40, SatisfactionStatus(label='Fair', severity='fair')),
    (20, SatisfactionStatus(label='Poor', severity='poor')),
]
_CRITICAL = SatisfactionStatus(label='Critical', severity='critical')


def get_satisfaction_status(value: float) -> SatisfactionStatus:
    for threshold, status in _STATUS_BUCKETS:
        if value >= threshold:
            return status
    return _CRITICAL


def acquisition_multiplier(clients_acquired: int) -> float:
    # First few clients are cheap, then it climbs fast to push referrals
    return ACQUISITION_GROWTH ** clients_acquired


def acquisition_cost(archetype: ClientArchetype, clients_acquired: int) -> int:
    base = ARCHETYPES[archetype].acquisition_cost
    return math.floor(base * acquisition_multiplier(clients_acquired))


def satisfaction_bucket_changed(old: float, new: float) -> bool:
    """True when a change crosses one of the 20-point reporting bands."""
    return math.floor(old / 20) != math.floor(new / 20)
