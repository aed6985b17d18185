# pest_empire/scorer.py
from typing import List

from .catalog import EQUIPMENT
from .config import TRUCK_COST
from .models import GameState


def format_money(amount: int) -> str:
    return f"-${abs(amount):,}" if amount < 0 else f"${amount:,}"


def calculate_company_value(state: GameState) -> int:
    """
    Value = Cash + Fleet_Value + Equipment_Value
    Trucks are worth their purchase price scaled by condition, equipment
    resells at half price. Upgrades are sunk cost.
    """
    fleet = sum(TRUCK_COST * t.condition / 100.0 for t in state.trucks)
    gear = sum(EQUIPMENT[e].cost * 0.5 for e in state.owned_equipment if e in EQUIPMENT)
    return int(round(state.money + fleet + gear))


def game_over_summary(state: GameState) -> List[str]:
    """Title line followed by the final statistics."""
    s = state.stats
    if state.game_over_reason == 'bankruptcy':
        return [
            "GAME OVER - Bankruptcy",
            f"Your business went bankrupt in week {state.week}!",
            f"Total Revenue: {format_money(s.total_revenue)}",
            f"Total Expenses: {format_money(s.total_expenses)}",
            f"Clients Acquired: {s.clients_acquired}",
            f"Jobs Completed: {s.total_jobs}",
        ]
    if state.game_over_reason == 'victory':
        return [
            "VICTORY!",
            "You've built a successful pest control empire!",
            f"Weeks Survived: {state.week}",
            f"Total Profit: {format_money(s.total_profit)}",
            f"Clients: {len(state.clients)}",
            f"Employees: {len(state.employees)}",
            f"Jobs Completed: {s.total_jobs}",
        ]
    return []
