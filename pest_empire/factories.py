# pest_empire/factories.py
import itertools
import time
import numpy as np
from typing import Optional

from .catalog import (
    ARCHETYPES, TIERS, HIRE_DISTRIBUTION, FIRST_NAMES, LAST_NAMES,
    ClientArchetype, SkillTier, name_pool
)
from .models import Client, Employee, Truck

_id_sequence = itertools.count(1)


def generate_id(prefix: str, rng: np.random.RandomState) -> str:
    """
    Timestamp plus random suffix. The process-wide sequence number keeps ids
    unique even when two are minted in the same millisecond.
    """
    stamp = int(time.time() * 1000)
    return f"{prefix}_{stamp}_{rng.randint(0, 10000)}_{next(_id_sequence)}"


def _pick(items, rng):
    return items[rng.randint(0, len(items))]


def pick_hire_tier(rng: np.random.RandomState) -> SkillTier:
    """Weighted draw over HIRE_DISTRIBUTION (50/30/15/5)."""
    total = sum(HIRE_DISTRIBUTION.values())
    roll = rng.random() * total
    cumulative = 0
    for tier, weight in HIRE_DISTRIBUTION.items():
        cumulative += weight
        if roll < cumulative:
            return tier
    return SkillTier.EXPERT


def create_client(rng: np.random.RandomState,
                  archetype: Optional[ClientArchetype] = None) -> Client:
    if archetype is None:
        archetype = _pick(list(ClientArchetype), rng)

    spec = ARCHETYPES[archetype]
    return Client(
        id=generate_id('client', rng),
        archetype=archetype,
        name=_pick(name_pool(archetype), rng),
        satisfaction=100,
        base_revenue=spec.base_revenue,
        demands=list(spec.demands),
    )


def create_employee(rng: np.random.RandomState,
                    tier: Optional[SkillTier] = None) -> Employee:
    if tier is None:
        tier = pick_hire_tier(rng)

    skill = TIERS[tier]
    first = _pick(FIRST_NAMES, rng)
    last = _pick(LAST_NAMES, rng)
    return Employee(
        id=generate_id('emp', rng),
        name=f"{first} {last}",
        tier=tier,
        salary=skill.weekly_salary,
        max_clients=skill.max_clients,
    )


def create_truck(rng: np.random.RandomState) -> Truck:
    return Truck(id=generate_id('truck', rng), condition=100)
