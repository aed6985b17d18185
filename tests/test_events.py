"""
Unit tests for random events

Tests cover:
- Season bands
- Preconditions and first-match candidate evaluation
- Triggering, history, and next-turn cleanup
"""

from pest_empire.catalog import ClientArchetype, Season, SkillTier
from pest_empire.events import (
    EVENT_CATALOG, EventDefinition, check_for_event, effective_chance,
    get_season, is_eligible, process_turn_cleanup, trigger_event
)
from pest_empire.factories import create_client, create_employee, create_truck
from pest_empire.models import EventResult, GameState

from conftest import StubRng


def catalog_event(event_id):
    return next(e for e in EVENT_CATALOG if e.id == event_id)


def make_event(event_id, chance=0.1, **kwargs):
    return EventDefinition(
        id=event_id, name=event_id, description='', kind='neutral',
        base_chance=chance, effect=lambda state, rng: EventResult(success=True, message=event_id),
        **kwargs
    )


class TestSeasons:

    def test_bands(self):
        assert get_season(1) == Season.SPRING
        assert get_season(13) == Season.SPRING
        assert get_season(14) == Season.SUMMER
        assert get_season(26) == Season.SUMMER
        assert get_season(27) == Season.FALL
        assert get_season(39) == Season.FALL
        assert get_season(40) == Season.WINTER
        assert get_season(52) == Season.WINTER

    def test_wraps_each_year(self):
        assert get_season(53) == Season.SPRING
        assert get_season(66) == Season.SUMMER


class TestCandidateEvaluation:

    def test_first_success_in_declaration_order_wins(self):
        """When both would fire, the earlier-declared event is chosen"""
        catalog = [make_event('first'), make_event('second')]
        event = check_for_event(GameState(), StubRng(rolls=[0.01, 0.01]), catalog)
        assert event.id == 'first'

    def test_later_event_reached_after_miss(self):
        catalog = [make_event('first'), make_event('second')]
        event = check_for_event(GameState(), StubRng(rolls=[0.5, 0.05]), catalog)
        assert event.id == 'second'

    def test_no_event(self):
        catalog = [make_event('first'), make_event('second')]
        assert check_for_event(GameState(), StubRng(default=0.99), catalog) is None

    def test_preconditions_filter_candidates(self, rng):
        state = GameState(week=3)
        assert not is_eligible(make_event('late', min_week=5), state)
        assert not is_eligible(make_event('needs_clients', requires_clients=True), state)
        assert not is_eligible(make_event('needs_staff', requires_employees=True), state)
        assert not is_eligible(make_event('needs_trucks', requires_trucks=True), state)

        state.week = 5
        state.clients.append(create_client(rng))
        state.employees.append(create_employee(rng))
        state.trucks.append(create_truck(rng))
        assert is_eligible(make_event('late', min_week=5), state)
        assert is_eligible(make_event('needs_clients', requires_clients=True), state)

    def test_ineligible_events_do_not_consume_rolls(self):
        """Only eligible events are rolled, so the first roll goes to the eligible one"""
        catalog = [make_event('late', min_week=10), make_event('now')]
        event = check_for_event(GameState(week=1), StubRng(rolls=[0.05]), catalog)
        assert event.id == 'now'

    def test_seasonal_multiplier(self):
        surge = make_event('surge', chance=0.1, peak_seasons=(Season.SUMMER, Season.FALL))
        assert abs(effective_chance(surge, 14) - 0.15) < 1e-9
        assert effective_chance(surge, 1) == 0.1

        catalog = [surge]
        assert check_for_event(GameState(week=20), StubRng(rolls=[0.12]), catalog).id == 'surge'
        assert check_for_event(GameState(week=2), StubRng(rolls=[0.12]), catalog) is None


class TestTriggerAndCleanup:

    def test_success_records_active_event_and_history(self):
        state = GameState(week=4)
        active = trigger_event(state, catalog_event('equipment_deal'), StubRng())
        assert active.discount == 0.3
        assert state.active_event.event_id == 'equipment_deal'
        assert len(state.event_history) == 1
        assert state.event_history[0].week == 4

    def test_failed_effect_is_not_recorded(self):
        """Breakdown with no trucks reports failure and leaves no trace"""
        state = GameState()
        assert trigger_event(state, catalog_event('equipment_breakdown'), StubRng()) is None
        assert state.active_event is None
        assert state.event_history == []

    def test_sick_day_suspends_and_cleanup_restores(self, rng):
        state = GameState()
        employee = create_employee(rng, SkillTier.JUNIOR)
        client = create_client(rng)
        employee.assigned_clients.append(client.id)
        state.employees.append(employee)
        state.clients.append(client)

        active = trigger_event(state, catalog_event('employee_sick'), StubRng())
        assert active.restore_next_turn == employee.id
        assert employee.assigned_clients == []
        assert employee.temporarily_unassigned == [client.id]

        recovered = process_turn_cleanup(state)
        assert recovered == [employee.name]
        assert employee.assigned_clients == [client.id]
        assert employee.temporarily_unassigned is None
        assert state.active_event is None

    def test_cleanup_drops_clients_that_left(self, rng):
        state = GameState()
        employee = create_employee(rng, SkillTier.JUNIOR)
        employee.temporarily_unassigned = ['gone']
        state.employees.append(employee)
        process_turn_cleanup(state)
        assert employee.assigned_clients == []

    def test_cleanup_skips_clients_reassigned_while_sick(self, rng):
        """A client picked up by a colleague during the sick week stays with that colleague"""
        state = GameState()
        sick = create_employee(rng, SkillTier.JUNIOR)
        cover = create_employee(rng, SkillTier.JUNIOR)
        kept, moved = create_client(rng), create_client(rng)
        sick.temporarily_unassigned = [kept.id, moved.id]
        cover.assigned_clients = [moved.id]
        state.employees += [sick, cover]
        state.clients += [kept, moved]

        process_turn_cleanup(state)
        assert sick.assigned_clients == [kept.id]
        assert cover.assigned_clients == [moved.id]

    def test_pest_surge_hits_only_unassigned(self, rng):
        state = GameState()
        served = create_client(rng, ClientArchetype.RESIDENTIAL)
        neglected = create_client(rng, ClientArchetype.RESIDENTIAL)
        neglected.satisfaction = 10
        employee = create_employee(rng, SkillTier.JUNIOR)
        employee.assigned_clients.append(served.id)
        state.clients += [served, neglected]
        state.employees.append(employee)

        trigger_event(state, catalog_event('pest_surge'), StubRng())
        assert served.satisfaction == 100
        assert neglected.satisfaction == 0

    def test_money_events(self):
        state = GameState(money=1000, week=12)
        trigger_event(state, catalog_event('regulation_fine'), StubRng())
        assert state.money == 500
        trigger_event(state, catalog_event('business_loan_offer'), StubRng())
        assert state.money == 2500
