# pest_empire/engine.py
import logging
import numpy as np
from enum import Enum
from typing import List, Optional, Type
from pydantic import ValidationError

from .catalog import ARCHETYPES, EQUIPMENT, TIERS, UPGRADES, ClientArchetype, SkillTier
from .clients import (
    acquisition_cost, acquisition_multiplier, calculate_revenue, get_satisfaction_status,
    satisfaction_bucket_changed, should_churn, update_satisfaction
)
from .config import (
    OVERHEAD_START_WEEK, OWNER_NAME, REFERRAL_CHANCE, REFERRAL_THRESHOLD,
    VICTORY_MIN_CLIENTS, VICTORY_MIN_EMPLOYEES, VICTORY_WEEKLY_PROFIT, WEEKLY_OVERHEAD
)
from .economy import (
    aggregate_equipment_bonuses, aggregate_upgrade_effects, apply_revenue_bonus,
    can_purchase_equipment, can_purchase_upgrade, equipment_price
)
from .employees import (
    apply_promotion, assign, can_assign, get_promotion_info, hire_cost,
    is_assigned_to, is_sick, service_client, unassign
)
from .events import EVENT_CATALOG, EventDefinition, check_for_event, process_turn_cleanup, trigger_event
from .factories import create_client, create_employee, create_truck
from .logbook import ActionLog
from .models import (
    ActiveEvent, AutomationSettings, Client, Employee, EventHistoryEntry, GameOverReason, GameState,
    PromotionInfo, TurnReport
)
from .scorer import format_money, game_over_summary
from .storage import SaveStore

logger = logging.getLogger(__name__)


class PestControlGame:
    """
    Owns the GameState and is its only writer.

    Player commands validate, mutate and log synchronously. ``execute_turn``
    runs the weekly pipeline once, in a fixed order:
    automation, jobs, referrals, revenue, expenses, events, state update.
    """

    def __init__(self,
                 seed: Optional[int] = None,
                 rng=None,
                 storage: Optional[SaveStore] = None,
                 log: Optional[ActionLog] = None,
                 event_catalog: Optional[List[EventDefinition]] = None):
        self.seed = seed
        self.rng = rng if rng is not None else np.random.RandomState(seed)
        self.storage = storage
        self.log = log if log is not None else ActionLog()
        self.event_catalog = EVENT_CATALOG if event_catalog is None else event_catalog

        self.state = GameState()
        self._turn_in_progress = False

    # --- Lifecycle ---

    def init_or_load(self) -> bool:
        """Resume the saved game if there is a usable one, otherwise start fresh. True if loaded."""
        if self.storage and self.storage.has_save():
            loaded = self.storage.load()
            problems = self._integrity_problems(loaded) if loaded else ["unreadable save"]
            if not problems:
                self.state = loaded
                self._log(f"Game loaded (week {loaded.week})")
                return True
            logger.error("Discarding saved game: %s", "; ".join(problems))
            self._log("Saved game was corrupted, starting a new game")

        self.new_game()
        return False

    def new_game(self):
        if self.storage:
            self.storage.delete_save()

        self.state = GameState()
        self.log.clear()

        owner = create_employee(self.rng, SkillTier.JUNIOR)
        owner.name = OWNER_NAME
        truck = create_truck(self.rng)
        truck.assigned_employee = owner.id
        owner.truck_id = truck.id
        self.state.employees.append(owner)
        self.state.trucks.append(truck)

        self._log(f"Welcome to your new pest control business! You start with ${self.state.money:,} and your skills.")
        if self.storage:
            self.storage.save(self.state)

    def save_game(self) -> bool:
        if not self.storage:
            return False
        if self.storage.save(self.state):
            self._log("Game saved successfully!")
            return True
        self._log("Failed to save game")
        return False

    def load_game(self) -> bool:
        if not self.storage:
            return False
        loaded = self.storage.load()
        if loaded is None or self._integrity_problems(loaded):
            self._log("No usable saved game found")
            return False
        self.state = loaded
        self._log(f"Game loaded (week {loaded.week})")
        return True

    def get_state(self) -> GameState:
        """Deep copy; mutating it does not touch the live game."""
        return self.state.model_copy(deep=True)

    # --- Weekly pipeline ---

    def execute_turn(self) -> Optional[TurnReport]:
        if self._turn_in_progress:
            raise RuntimeError("execute_turn called while a turn is already running")

        if self.state.game_over:
            self._log("Cannot execute turn - game is over")
            return None

        self._turn_in_progress = True
        try:
            report = self._run_turn()
        finally:
            self._turn_in_progress = False

        if self.storage:
            self.storage.save(self.state)
        return report

    def _run_turn(self) -> TurnReport:
        s = self.state
        week = s.week
        logger.debug("Executing week %d", week)

        # 1. Reset weekly tracking
        s.weekly_revenue = 0
        s.weekly_expenses = 0

        # 2. Automation
        automation_actions = self._process_automation()

        # 3. Jobs
        jobs = self._process_jobs()

        # 4. Referrals
        referrals = self._process_referrals()

        # 5. Revenue
        self._process_revenue()

        # 6. Expenses
        self._process_expenses()

        # 7. Events
        event = self._process_events()

        # 8. State update (satisfaction, churn, cash, terminal checks)
        lost = self._update_game_state()

        # 9. Advance
        net = s.weekly_revenue - s.weekly_expenses
        self._log(f"Week {week} complete. Net: {format_money(net)}")
        s.week += 1

        return TurnReport(
            week=week,
            revenue=s.weekly_revenue,
            expenses=s.weekly_expenses,
            net_profit=net,
            jobs_completed=jobs,
            referrals=referrals,
            clients_lost=lost,
            automation_actions=automation_actions,
            event=event,
            game_over=s.game_over,
            game_over_reason=s.game_over_reason,
        )

    def _process_automation(self) -> int:
        s = self.state
        effects = aggregate_upgrade_effects(s.owned_upgrades)
        settings = s.automation_settings
        actions = 0

        if effects.auto_hire and settings.auto_hire:
            actions += self._auto_hire()
        if effects.auto_promote and settings.auto_promote:
            actions += self._auto_promote()
        if effects.auto_assign and settings.auto_assign:
            actions += self._auto_assign(smart=effects.smart_matching)
        return actions

    def _unassigned_clients(self) -> List[Client]:
        return [c for c in self.state.clients if not self.state.is_client_assigned(c.id)]

    def _auto_hire(self) -> int:
        s = self.state
        if not self._unassigned_clients():
            return 0
        if any(can_assign(e) for e in s.employees):
            return 0

        candidate = create_employee(self.rng)
        cost = hire_cost(candidate.tier)
        if s.money <= cost + s.automation_settings.hire_cash_buffer:
            return 0

        self._add_employee(candidate, cost)
        self._log(f"AUTO: Hired {candidate.name} ({TIERS[candidate.tier].name}) - Cost: {format_money(cost)}")
        return 1

    def _auto_promote(self) -> int:
        s = self.state
        promoted = 0
        for employee in s.employees:
            info = get_promotion_info(employee)
            if not info or not info.can_promote:
                continue
            if s.money < info.cost + s.automation_settings.promote_cash_buffer:
                continue
            old = employee.tier
            self._apply_promotion(employee, info)
            self._log(f"AUTO: {employee.name} promoted from {TIERS[old].name} to {TIERS[info.next_tier].name}")
            promoted += 1
        return promoted

    def _auto_assign(self, smart: bool) -> int:
        s = self.state
        clients = self._unassigned_clients()
        employees = list(s.employees)

        if smart:
            # Hardest clients first, paired against the most skilled free hands
            clients.sort(key=lambda c: ARCHETYPES[c.archetype].difficulty, reverse=True)
            employees.sort(key=lambda e: TIERS[e.tier].rank, reverse=True)

        assigned = 0
        for client in clients:
            employee = next((e for e in employees if can_assign(e)), None)
            if employee is None:
                break
            assign(employee, client.id)
            assigned += 1
            self._log(f"AUTO: Assigned {employee.name} to {client.name}")
        return assigned

    def _process_jobs(self) -> int:
        s = self.state
        equipment_bonuses = aggregate_equipment_bonuses(s.owned_equipment)
        upgrade_effects = aggregate_upgrade_effects(s.owned_upgrades)

        jobs = 0
        for employee in s.employees:
            for client_id in list(employee.assigned_clients):
                client = s.find_client(client_id)
                if client is None:
                    continue
                result = service_client(employee, client, equipment_bonuses, upgrade_effects)
                if result.success:
                    jobs += 1
                    s.stats.total_jobs += 1
            employee.weeks_employed += 1

        if jobs > 0:
            self._log(f"Completed {jobs} service jobs")
        return jobs

    def _process_referrals(self) -> int:
        s = self.state
        referrals = 0
        # Snapshot: clients referred this week do not refer again in the same pass
        for client in list(s.clients):
            if client.satisfaction < REFERRAL_THRESHOLD:
                continue
            if self.rng.random() < REFERRAL_CHANCE:
                new_client = create_client(self.rng)
                s.clients.append(new_client)
                s.stats.clients_acquired += 1
                referrals += 1
                self._log(f"{client.name} referred a new client: {new_client.name}!")
        return referrals

    def _process_revenue(self):
        s = self.state
        upgrade_effects = aggregate_upgrade_effects(s.owned_upgrades)

        total = 0
        serviced = 0
        unserviced = 0
        for client in s.clients:
            has_employee = s.is_client_assigned(client.id)
            revenue = calculate_revenue(client, has_employee)
            revenue = apply_revenue_bonus(revenue, upgrade_effects)

            total += revenue
            client.total_revenue += revenue
            client.weeks_active += 1
            if has_employee:
                serviced += 1
            else:
                unserviced += 1

        if total > 0:
            self._log(f"Client revenue: {format_money(total)} from {serviced} serviced clients")
        if unserviced > 0:
            self._log(f"WARNING: {unserviced} unserviced clients (no revenue, double satisfaction decay)")

        s.weekly_revenue += total

    def _process_expenses(self):
        s = self.state
        salaries = sum(e.salary for e in s.employees)
        if salaries > 0:
            self._log(f"Employee salaries: {format_money(salaries)} for {len(s.employees)} employees")
        s.weekly_expenses += salaries

        if s.week >= OVERHEAD_START_WEEK:
            s.weekly_expenses += WEEKLY_OVERHEAD
            self._log(f"Business overhead: {format_money(WEEKLY_OVERHEAD)} (rent, insurance, utilities)")

    def _process_events(self) -> Optional[ActiveEvent]:
        s = self.state
        for name in process_turn_cleanup(s):
            self._log(f"{name} recovered from sick day")

        event = check_for_event(s, self.rng, self.event_catalog)
        if event is None:
            return None

        active = trigger_event(s, event, self.rng)
        if active:
            self._log(f"EVENT: {active.message}")
        return active

    def _update_game_state(self) -> int:
        s = self.state

        churned = set()
        for client in s.clients:
            old = client.satisfaction
            update_satisfaction(client)

            if should_churn(client):
                churned.add(client.id)
                s.stats.clients_lost += 1
                self._log(f"Lost client: {client.name} (satisfaction too low)")
            elif satisfaction_bucket_changed(old, client.satisfaction):
                status = get_satisfaction_status(client.satisfaction)
                self._log(f"{client.name} satisfaction: {status.label} ({client.satisfaction}%)")

        if churned:
            self._remove_clients(churned)

        net = s.weekly_revenue - s.weekly_expenses
        s.money += net

        s.stats.total_revenue += s.weekly_revenue
        s.stats.total_expenses += s.weekly_expenses
        s.stats.total_profit = s.stats.total_revenue - s.stats.total_expenses

        if s.money < 0:
            self._game_over('bankruptcy')
            return len(churned)

        self._check_victory(net)
        return len(churned)

    def _remove_clients(self, client_ids):
        """Drop clients and every reference to them, including sick-day snapshots."""
        s = self.state
        s.clients = [c for c in s.clients if c.id not in client_ids]
        for employee in s.employees:
            employee.assigned_clients = [cid for cid in employee.assigned_clients if cid not in client_ids]
            if employee.temporarily_unassigned is not None:
                employee.temporarily_unassigned = [
                    cid for cid in employee.temporarily_unassigned if cid not in client_ids
                ]

    def _check_victory(self, net_profit: int) -> bool:
        s = self.state
        if (net_profit >= VICTORY_WEEKLY_PROFIT
                and len(s.clients) >= VICTORY_MIN_CLIENTS
                and len(s.employees) >= VICTORY_MIN_EMPLOYEES):
            self._game_over('victory')
            return True
        return False

    def _game_over(self, reason: GameOverReason):
        s = self.state
        s.game_over = True
        s.game_over_reason = reason
        logger.info("Game over in week %d: %s", s.week, reason)
        for line in game_over_summary(s):
            self._log(line)

    # --- Player commands ---

    def acquire_client(self, archetype=None) -> bool:
        if archetype is not None:
            archetype = self._coerce(ClientArchetype, archetype, "client type")
            if archetype is None:
                return False

        s = self.state
        client = create_client(self.rng, archetype)
        cost = acquisition_cost(client.archetype, s.stats.clients_acquired)
        logger.debug("Acquire %s: base %d x %.3f = %d (cash %d)",
                     client.archetype.value, ARCHETYPES[client.archetype].acquisition_cost,
                     acquisition_multiplier(s.stats.clients_acquired), cost, s.money)

        if s.money < cost:
            self._log(f"Cannot acquire {client.name} - insufficient funds (need {format_money(cost)})")
            return False

        s.money -= cost
        s.clients.append(client)
        s.stats.clients_acquired += 1
        self._log(f"Acquired client: {client.name} ({ARCHETYPES[client.archetype].name}) - Cost: {format_money(cost)}")
        return True

    def hire_employee(self, tier=None) -> bool:
        if tier is not None:
            tier = self._coerce(SkillTier, tier, "skill tier")
            if tier is None:
                return False

        employee = create_employee(self.rng, tier)
        cost = hire_cost(employee.tier)
        if self.state.money < cost:
            self._log(f"Cannot hire {employee.name} - insufficient funds (need {format_money(cost)})")
            return False

        self._add_employee(employee, cost)
        self._log(f"Hired {employee.name} ({TIERS[employee.tier].name}) with truck - Cost: {format_money(cost)}")
        return True

    def _add_employee(self, employee: Employee, cost: int):
        truck = create_truck(self.rng)
        employee.truck_id = truck.id
        truck.assigned_employee = employee.id

        self.state.money -= cost
        self.state.employees.append(employee)
        self.state.trucks.append(truck)

    def assign_employee(self, employee_id: str, client_id: str) -> bool:
        s = self.state
        employee = s.find_employee(employee_id)
        client = s.find_client(client_id)
        if not employee or not client:
            self._log("Cannot assign - unknown employee or client")
            return False

        if is_sick(employee):
            self._log(f"{employee.name} is out sick this week")
            return False
        if not can_assign(employee):
            self._log(f"{employee.name} is at full capacity ({employee.max_clients} clients)")
            return False
        if is_assigned_to(employee, client_id):
            self._log(f"{employee.name} is already assigned to {client.name}")
            return False

        assign(employee, client_id)
        self._log(f"Assigned {employee.name} to {client.name} "
                  f"({len(employee.assigned_clients)}/{employee.max_clients})")
        return True

    def unassign_employee(self, employee_id: str, client_id: str) -> bool:
        s = self.state
        employee = s.find_employee(employee_id)
        if not employee:
            self._log("Cannot unassign - unknown employee")
            return False

        if not unassign(employee, client_id):
            self._log(f"{employee.name} is not assigned to that client")
            return False

        client = s.find_client(client_id)
        label = client.name if client else client_id
        self._log(f"Unassigned {employee.name} from {label} "
                  f"({len(employee.assigned_clients)}/{employee.max_clients})")
        return True

    def purchase_equipment(self, equipment_id: str) -> bool:
        s = self.state
        equipment = EQUIPMENT.get(equipment_id)
        if not equipment:
            self._log(f"Unknown equipment: {equipment_id}")
            return False

        if not can_purchase_equipment(equipment_id, s.owned_equipment):
            self._log(f"Cannot purchase {equipment.name} - prerequisites not met or already owned")
            return False

        cost = equipment_price(equipment, s.active_event)
        if s.money < cost:
            self._log(f"Cannot purchase {equipment.name} - insufficient funds (need {format_money(cost)})")
            return False

        s.money -= cost
        s.owned_equipment.append(equipment_id)
        note = " (sale price)" if cost < equipment.cost else ""
        self._log(f"Purchased {equipment.name} - Cost: {format_money(cost)}{note}")
        return True

    def purchase_upgrade(self, upgrade_id: str) -> bool:
        s = self.state
        upgrade = UPGRADES.get(upgrade_id)
        if not upgrade:
            self._log(f"Unknown upgrade: {upgrade_id}")
            return False

        if not can_purchase_upgrade(upgrade_id, s.owned_upgrades):
            self._log(f"Cannot purchase {upgrade.name} - prerequisites not met or already owned")
            return False

        if s.money < upgrade.cost:
            self._log(f"Cannot purchase {upgrade.name} - insufficient funds (need {format_money(upgrade.cost)})")
            return False

        s.money -= upgrade.cost
        s.owned_upgrades.append(upgrade_id)
        self._log(f"Purchased {upgrade.name} - Cost: {format_money(upgrade.cost)}")
        return True

    def promote_employee(self, employee_id: str) -> bool:
        s = self.state
        employee = s.find_employee(employee_id)
        if not employee:
            self._log("Cannot promote - unknown employee")
            return False

        info = get_promotion_info(employee)
        if info is None:
            self._log(f"{employee.name} is already at the highest tier")
            return False
        if not info.can_promote:
            self._log(f"{employee.name} is not ready for promotion ({employee.xp}/{info.xp_required} XP)")
            return False
        if s.money < info.cost:
            self._log(f"Cannot afford promotion ({format_money(info.cost)})")
            return False

        old = employee.tier
        self._apply_promotion(employee, info)
        self._log(f"{employee.name} promoted from {TIERS[old].name} to {TIERS[info.next_tier].name}!")
        return True

    def _apply_promotion(self, employee: Employee, info: PromotionInfo):
        self.state.money -= info.cost
        apply_promotion(employee, info.next_tier)

    def set_automation(self, **changes) -> bool:
        """Update automation toggles/buffers, e.g. ``set_automation(auto_hire=False)``."""
        settings = self.state.automation_settings
        unknown = [k for k in changes if k not in AutomationSettings.model_fields]
        if unknown:
            self._log(f"Unknown automation settings: {', '.join(sorted(unknown))}")
            return False

        try:
            updated = AutomationSettings.model_validate({**settings.model_dump(), **changes})
        except ValidationError as e:
            logger.warning("Rejected automation settings %s: %s", changes, e)
            self._log("Invalid automation settings")
            return False

        self.state.automation_settings = updated
        self._log("Automation settings updated")
        return True

    # --- Events (presentation side) ---

    def get_active_event(self) -> Optional[ActiveEvent]:
        event = self.state.active_event
        if event is None or event.dismissed:
            return None
        return event.model_copy()

    def dismiss_event(self):
        """Hide the active event. Its effects (e.g. a discount) last until next week's cleanup."""
        if self.state.active_event:
            self.state.active_event.dismissed = True

    def get_event_history(self) -> List[EventHistoryEntry]:
        return list(self.state.event_history)

    # --- Helpers ---

    def _log(self, message: str):
        self.log.add(self.state.week, message)

    def _coerce(self, enum_cls: Type[Enum], value, label: str):
        try:
            return enum_cls(value)
        except ValueError:
            self._log(f"Unknown {label}: {value}")
            return None

    @staticmethod
    def _integrity_problems(state: GameState) -> List[str]:
        """Catalog and id references a loaded state must satisfy."""
        problems = []
        problems += [f"unknown equipment {e}" for e in state.owned_equipment if e not in EQUIPMENT]
        problems += [f"unknown upgrade {u}" for u in state.owned_upgrades if u not in UPGRADES]

        client_ids = [c.id for c in state.clients]
        if len(set(client_ids)) != len(client_ids):
            problems.append("duplicate client ids")
        employee_ids = [e.id for e in state.employees]
        if len(set(employee_ids)) != len(employee_ids):
            problems.append("duplicate employee ids")

        known = set(client_ids)
        for employee in state.employees:
            dangling = [cid for cid in employee.assigned_clients if cid not in known]
            if dangling:
                problems.append(f"{employee.id} references missing clients")
        return problems
