# pest_empire/baselines.py
"""
Scripted players that drive the command API once per week, used by
main.py to benchmark balance across seeds.
"""
import random

from .catalog import ClientArchetype, SkillTier, UpgradePath
from .clients import acquisition_cost
from .economy import available_equipment, available_upgrades, upgrades_by_path
from .employees import can_assign, get_promotion_info, hire_cost


def _assign_open_clients(game):
    s = game.state
    for client in list(s.clients):
        if s.is_client_assigned(client.id):
            continue
        employee = next((e for e in s.employees if can_assign(e)), None)
        if employee is None:
            return
        game.assign_employee(employee.id, client.id)


def random_player(game):
    """
    Player 1: Random
    Assigns what it can, then occasionally buys something at random.
    """
    _assign_open_clients(game)

    roll = random.random()
    if roll < 0.3:
        game.acquire_client()
    elif roll < 0.4:
        game.hire_employee()
    elif roll < 0.5:
        options = available_equipment(game.state.owned_equipment)
        if options:
            game.purchase_equipment(random.choice(options).id)


def reactive_player(game):
    """
    Player 2: Reactive
    - Keeps every client assigned.
    - Adds a Residential client whenever someone has spare capacity.
    - Hires a Trainee only once the crew is fully booked.
    - Never invests in equipment or upgrades.
    """
    s = game.state
    _assign_open_clients(game)

    has_room = any(can_assign(e) for e in s.employees)
    cost = acquisition_cost(ClientArchetype.RESIDENTIAL, s.stats.clients_acquired)
    if has_room and s.money > cost + 1000:
        game.acquire_client(ClientArchetype.RESIDENTIAL)
    elif not has_room and s.money > hire_cost(SkillTier.TRAINEE) + 1500:
        game.hire_employee(SkillTier.TRAINEE)

    _assign_open_clients(game)


class SmartPlayer:
    def __init__(self, reserve: int = 1500):
        self.reserve = reserve  # Cash kept back for salaries and bad luck

    def act(self, game):
        s = game.state

        # 1. Promotions first, they raise capacity for free clients
        for employee in s.employees:
            info = get_promotion_info(employee)
            if info and info.can_promote and s.money - info.cost > self.reserve:
                game.promote_employee(employee.id)

        # 2. Grow: clients while there is room, staff when there is not
        _assign_open_clients(game)
        if any(can_assign(e) for e in s.employees):
            archetype = ClientArchetype.COMMERCIAL if len(s.clients) >= 4 else ClientArchetype.RESIDENTIAL
            if s.money - acquisition_cost(archetype, s.stats.clients_acquired) > self.reserve:
                game.acquire_client(archetype)
        elif s.money - hire_cost(SkillTier.JUNIOR) > self.reserve:
            game.hire_employee(SkillTier.JUNIOR)
        _assign_open_clients(game)

        # 3. Invest surplus: automation first, then service, then gear
        wanted = [u.id for u in upgrades_by_path(UpgradePath.AUTOMATION)]
        wanted += [u.id for u in upgrades_by_path(UpgradePath.SERVICE)]
        open_ids = {u.id for u in available_upgrades(s.owned_upgrades)}
        next_upgrade = next((u for u in wanted if u in open_ids), None)
        if next_upgrade and s.money > self.reserve * 3:
            game.purchase_upgrade(next_upgrade)

        active = game.get_active_event()
        for equip in available_equipment(s.owned_equipment):
            discounted = active is not None and active.discount
            if s.money - equip.cost > self.reserve * (1 if discounted else 2):
                game.purchase_equipment(equip.id)
                break

        game.dismiss_event()


# Wrapper for main.py compatibility
_smart_player_instance = SmartPlayer()
def smart_player_wrapper(game):
    return _smart_player_instance.act(game)
