"""
Tests for the turn engine and the player command API

Tests cover:
- New game setup and a first empty turn
- Bankruptcy and victory conditions
- Churn removal and reference cleanup
- Player commands and their rejections
- Automation phase
"""

import pytest

from pest_empire.catalog import ClientArchetype, SkillTier
from pest_empire.engine import PestControlGame
from pest_empire.factories import create_client, create_employee
from pest_empire.models import ActiveEvent

from conftest import StubRng


def add_client(game, archetype=ClientArchetype.RESIDENTIAL, satisfaction=100):
    client = create_client(game.rng, archetype)
    client.satisfaction = satisfaction
    game.state.clients.append(client)
    return client


def add_employee(game, tier=SkillTier.JUNIOR):
    employee = create_employee(game.rng, tier)
    game.state.employees.append(employee)
    return employee


class TestNewGame:

    def test_starting_state(self, game):
        s = game.state
        assert s.week == 1
        assert s.money == 2000
        assert s.clients == []
        assert len(s.employees) == 1
        assert len(s.trucks) == 1

        owner = s.employees[0]
        assert owner.tier == SkillTier.JUNIOR
        assert owner.name == "You (Owner)"
        assert owner.truck_id == s.trucks[0].id
        assert s.trucks[0].assigned_employee == owner.id

    def test_first_turn_without_clients(self, game):
        """Only the owner's salary is spent, and the week advances"""
        report = game.execute_turn()

        assert game.state.weekly_revenue == 0
        assert game.state.weekly_expenses == 600
        assert game.state.week == 2
        assert game.state.money == 1400
        assert report.week == 1
        assert report.net_profit == -600

    def test_overhead_from_week_five(self, game):
        game.state.week = 5
        game.state.money = 10000
        game.execute_turn()
        assert game.state.weekly_expenses == 600 + 300

    def test_log_entries_are_week_tagged(self, game):
        game.execute_turn()
        messages = [e.message for e in game.log.for_week(1)]
        assert any("Employee salaries" in m for m in messages)
        assert any("Week 1 complete" in m for m in messages)


class TestTurnPipeline:

    def test_serviced_client_pays_and_recovers(self, game):
        owner = game.state.employees[0]
        client = add_client(game, satisfaction=60)
        owner.assigned_clients.append(client.id)

        game.execute_turn()

        # Job: 60 + 15 = 75 (revenue at 75 is base), weekly update: +15 = 90
        assert game.state.weekly_revenue == 300
        assert client.total_revenue == 300
        assert client.weeks_active == 1
        assert client.satisfaction == 90
        assert owner.total_jobs_completed == 1
        assert owner.xp == 3
        assert owner.weeks_employed == 1
        assert game.state.stats.total_jobs == 1

    def test_unserviced_client_decays(self, game):
        client = add_client(game, satisfaction=60)
        game.execute_turn()
        assert client.total_revenue == 0
        assert client.weeks_active == 1
        assert client.satisfaction == 54

    def test_employee_services_all_assignments(self, game):
        owner = game.state.employees[0]
        for _ in range(3):
            owner.assigned_clients.append(add_client(game).id)

        report = game.execute_turn()
        assert report.jobs_completed == 3
        assert owner.weeks_employed == 1
        assert game.state.weekly_revenue == 3 * 360

    def test_referral_spawns_free_client(self):
        g = PestControlGame(rng=StubRng(rolls=[0.01]), event_catalog=[])
        g.new_game()
        add_client(g, satisfaction=90)

        report = g.execute_turn()
        assert report.referrals == 1
        assert len(g.state.clients) == 2
        assert g.state.stats.clients_acquired == 1

    def test_churn_strips_assignments(self, game):
        """A sick employee's restored roster must not keep a client that churned"""
        owner = game.state.employees[0]
        client = add_client(game, satisfaction=20)
        owner.temporarily_unassigned = [client.id]

        report = game.execute_turn()

        assert report.clients_lost == 1
        assert game.state.clients == []
        assert owner.assigned_clients == []
        assert owner.temporarily_unassigned is None
        assert game.state.stats.clients_lost == 1

    def test_twenty_after_update_survives(self, game):
        client = add_client(game, satisfaction=26)
        game.execute_turn()
        assert client.satisfaction == 20
        assert game.state.clients == [client]

    def test_stats_accumulate(self, game):
        owner = game.state.employees[0]
        owner.assigned_clients.append(add_client(game).id)
        game.execute_turn()
        game.execute_turn()
        stats = game.state.stats
        assert stats.total_revenue == 720
        assert stats.total_expenses == 1200
        assert stats.total_profit == -480


class TestTerminalConditions:

    def test_bankruptcy_ends_game(self, game):
        game.state.money = 100
        report = game.execute_turn()

        assert report.game_over
        assert game.state.game_over is True
        assert game.state.game_over_reason == 'bankruptcy'
        assert game.state.week == 2

        assert game.execute_turn() is None
        assert game.state.week == 2

    def _build_empire(self, game, clients):
        game.state.employees = []
        for _ in range(6):
            add_employee(game, SkillTier.EXPERT)
        for i in range(clients):
            client = add_client(game, ClientArchetype.COMMERCIAL)
            client.base_revenue = 3000
            game.state.employees[i % 6].assigned_clients.append(client.id)

    def test_victory(self, game):
        """12 clients at 3600 each minus 6 Expert salaries: 43200 - 7200 = 36000"""
        self._build_empire(game, clients=12)
        report = game.execute_turn()
        assert report.net_profit == 36000
        assert game.state.game_over_reason == 'victory'

    def test_no_victory_with_eleven_clients(self, game):
        self._build_empire(game, clients=11)
        report = game.execute_turn()
        assert report.net_profit >= 25000
        assert game.state.game_over is False

    def test_no_victory_with_five_employees(self, game):
        self._build_empire(game, clients=12)
        dropped = game.state.employees.pop()
        for client_id in dropped.assigned_clients:
            game.state.employees[0].assigned_clients.append(client_id)
        report = game.execute_turn()
        assert report.net_profit >= 25000
        assert game.state.game_over is False

    def test_reentry_is_a_defect(self, game):
        game._turn_in_progress = True
        with pytest.raises(RuntimeError):
            game.execute_turn()


class TestCommands:

    def test_acquisition_costs_grow(self, game):
        game.state.money = 100000
        costs = []
        for _ in range(5):
            before = game.state.money
            assert game.acquire_client(ClientArchetype.RESIDENTIAL)
            costs.append(before - game.state.money)

        assert costs == [200, 260, 338, 439, 571]
        assert len(game.state.clients) == 5
        assert game.state.stats.clients_acquired == 5

    def test_acquisition_rejected_when_broke(self, game):
        game.state.money = 199
        assert not game.acquire_client('RESIDENTIAL')
        assert game.state.money == 199
        assert game.state.clients == []
        assert "insufficient funds" in game.log.entries[-1].message

    def test_unknown_archetype(self, game):
        assert not game.acquire_client('MANSION')

    def test_hire_links_truck(self, game):
        game.state.money = 5000
        assert game.hire_employee(SkillTier.TRAINEE)
        hired = game.state.employees[-1]
        truck = game.state.trucks[-1]
        assert game.state.money == 5000 - 1800
        assert hired.truck_id == truck.id
        assert truck.assigned_employee == hired.id

    def test_hire_rejected_when_broke(self, game):
        assert not game.hire_employee(SkillTier.EXPERT)
        assert len(game.state.employees) == 1

    def test_assign_and_unassign(self, game):
        owner = game.state.employees[0]
        client = add_client(game)
        assert game.assign_employee(owner.id, client.id)
        assert not game.assign_employee(owner.id, client.id)
        assert game.unassign_employee(owner.id, client.id)
        assert not game.unassign_employee(owner.id, client.id)

    def test_assign_rejections(self, game):
        owner = game.state.employees[0]
        assert not game.assign_employee(owner.id, 'nope')
        assert not game.assign_employee('nobody', 'nope')

        for _ in range(3):
            assert game.assign_employee(owner.id, add_client(game).id)
        assert not game.assign_employee(owner.id, add_client(game).id)
        assert "full capacity" in game.log.entries[-1].message

    def test_sick_employee_rejected(self, game):
        owner = game.state.employees[0]
        owner.temporarily_unassigned = []
        assert not game.assign_employee(owner.id, add_client(game).id)
        assert "sick" in game.log.entries[-1].message

    def test_purchase_without_prerequisite(self, game):
        game.state.money = 10000
        assert not game.purchase_equipment('ADVANCED_SPRAYER')
        assert not game.purchase_upgrade('SPEED_2')
        assert game.state.owned_equipment == []
        assert game.state.owned_upgrades == []
        assert game.state.money == 10000

    def test_purchase_chain(self, game):
        game.state.money = 10000
        assert game.purchase_equipment('BASIC_SPRAYER')
        assert game.purchase_equipment('ADVANCED_SPRAYER')
        assert not game.purchase_equipment('BASIC_SPRAYER')
        assert game.state.money == 10000 - 500 - 1500

    def test_purchase_rejected_when_broke(self, game):
        game.state.money = 400
        assert not game.purchase_upgrade('SPEED_1')
        assert game.state.owned_upgrades == []

    def test_equipment_deal_discount(self, game):
        game.state.active_event = ActiveEvent(
            event_id='equipment_deal', name='Equipment Sale', description='',
            kind='positive', message='', week=1, discount=0.3
        )
        assert game.purchase_equipment('BASIC_SPRAYER')
        assert game.state.money == 2000 - 350

    def test_discount_survives_dismissal_until_next_turn(self, game):
        game.state.active_event = ActiveEvent(
            event_id='equipment_deal', name='Equipment Sale', description='',
            kind='positive', message='', week=1, discount=0.3
        )
        game.dismiss_event()
        assert game.get_active_event() is None
        assert game.purchase_equipment('BASIC_TRAP_KIT')
        assert game.state.money == 2000 - 280

        game.execute_turn()
        assert game.state.active_event is None

    def test_promotion(self, game):
        owner = game.state.employees[0]
        assert not game.promote_employee(owner.id)

        owner.xp = 60
        assert game.promote_employee(owner.id)
        assert owner.tier == SkillTier.EXPERIENCED
        assert owner.xp == 0
        assert owner.max_clients == 4
        assert game.state.money == 1000

    def test_promotion_at_max_tier(self, game):
        expert = add_employee(game, SkillTier.EXPERT)
        expert.xp = 500
        assert not game.promote_employee(expert.id)

    def test_get_state_is_a_copy(self, game):
        snapshot = game.get_state()
        snapshot.money = 0
        snapshot.employees.clear()
        assert game.state.money == 2000
        assert len(game.state.employees) == 1


class TestAutomation:

    def test_first_fit_assignment(self, game):
        game.state.owned_upgrades = ['AUTO_1']
        owner = game.state.employees[0]
        expert = add_employee(game, SkillTier.EXPERT)
        clients = [add_client(game, a) for a in
                   (ClientArchetype.RESIDENTIAL, ClientArchetype.COMMERCIAL, ClientArchetype.SPEED_FOCUSED)]

        report = game.execute_turn()

        assert report.automation_actions == 3
        assert owner.assigned_clients == [c.id for c in clients]
        assert expert.assigned_clients == []

    def test_smart_matching_pairs_hardest_with_best(self, game):
        game.state.owned_upgrades = ['AUTO_1', 'AUTO_2']
        owner = game.state.employees[0]
        trainee = add_employee(game, SkillTier.TRAINEE)
        expert = add_employee(game, SkillTier.EXPERT)
        residential = add_client(game, ClientArchetype.RESIDENTIAL)
        commercial = add_client(game, ClientArchetype.COMMERCIAL)
        speed = add_client(game, ClientArchetype.SPEED_FOCUSED)

        game.execute_turn()

        assert expert.assigned_clients == [commercial.id, speed.id, residential.id]
        assert owner.assigned_clients == []
        assert trainee.assigned_clients == []

    def test_toggle_off_disables_capability(self, game):
        game.state.owned_upgrades = ['AUTO_1']
        assert game.set_automation(auto_assign=False)
        add_client(game)
        report = game.execute_turn()
        assert report.automation_actions == 0
        assert game.state.employees[0].assigned_clients == []

    def test_unknown_setting_rejected(self, game):
        assert not game.set_automation(auto_everything=True)

    def test_wrongly_typed_setting_rejected(self, game):
        """A bad buffer value is refused and the next turn still runs"""
        game.state.owned_upgrades = ['AUTO_4']
        before = game.state.automation_settings.model_dump()

        assert not game.set_automation(hire_cash_buffer="lots")
        assert not game.set_automation(auto_hire=False, promote_cash_buffer=[1])
        assert game.state.automation_settings.model_dump() == before

        owner = game.state.employees[0]
        for _ in range(3):
            owner.assigned_clients.append(add_client(game).id)
        add_client(game)
        assert game.execute_turn() is not None

    def test_valid_settings_applied(self, game):
        assert game.set_automation(hire_cash_buffer=500, auto_promote=False)
        settings = game.state.automation_settings
        assert settings.hire_cash_buffer == 500
        assert settings.auto_promote is False
        assert settings.auto_hire is True

    def test_sick_employee_does_not_reclaim_reassigned_client(self, game):
        """Auto-assign covers a sick owner's client; it must not end up on two rosters"""
        game.state.owned_upgrades = ['AUTO_1']
        owner = game.state.employees[0]
        cover = add_employee(game, SkillTier.JUNIOR)
        client = add_client(game)
        owner.temporarily_unassigned = [client.id]

        game.execute_turn()

        holders = [e for e in game.state.employees if client.id in e.assigned_clients]
        assert holders == [cover]
        assert owner.temporarily_unassigned is None

        report = game.execute_turn()
        assert report.jobs_completed == 1

    def test_auto_hire_when_fully_booked(self, game):
        game.state.owned_upgrades = ['AUTO_4']
        game.state.money = 10000
        owner = game.state.employees[0]
        for _ in range(3):
            owner.assigned_clients.append(add_client(game).id)
        add_client(game)

        game.execute_turn()

        # The stub rng draws an Expert: 2500 + 1000 truck
        assert len(game.state.employees) == 2
        assert len(game.state.trucks) == 2
        assert game.state.employees[1].tier == SkillTier.EXPERT

    def test_auto_hire_respects_cash_buffer(self, game):
        game.state.owned_upgrades = ['AUTO_4']
        game.state.money = 5500
        owner = game.state.employees[0]
        for _ in range(3):
            owner.assigned_clients.append(add_client(game).id)
        add_client(game)

        game.execute_turn()
        assert len(game.state.employees) == 1

    def test_auto_promote(self, game):
        game.state.owned_upgrades = ['AUTO_3']
        game.state.money = 5000
        owner = game.state.employees[0]
        owner.xp = 60

        game.execute_turn()
        assert owner.tier == SkillTier.EXPERIENCED
        assert game.state.weekly_expenses == 900
