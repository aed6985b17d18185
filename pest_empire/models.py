# pest_empire/models.py
from typing import Literal, List, Optional
from pydantic import BaseModel, Field

from .catalog import ClientArchetype, SkillTier, UpgradeEffects
from .config import (
    INITIAL_CASH, DEFAULT_HIRE_CASH_BUFFER, DEFAULT_PROMOTE_CASH_BUFFER
)

GameOverReason = Literal['bankruptcy', 'victory']


class Client(BaseModel):
    id: str
    archetype: ClientArchetype
    name: str
    satisfaction: int = 100  # Always within [0, 100]
    base_revenue: int
    weeks_active: int = 0
    total_revenue: int = 0
    demands: List[str] = []
    serviced: bool = False  # Set by a job, cleared by the weekly update


class Employee(BaseModel):
    id: str
    name: str
    tier: SkillTier
    salary: int
    max_clients: int
    assigned_clients: List[str] = []  # Client ids, no duplicates
    weeks_employed: int = 0
    total_jobs_completed: int = 0
    xp: int = 0
    truck_id: Optional[str] = None
    temporarily_unassigned: Optional[List[str]] = None  # Sick-day snapshot


class Truck(BaseModel):
    id: str
    condition: int = 100
    assigned_employee: Optional[str] = None


class GameStats(BaseModel):
    total_revenue: int = 0
    total_expenses: int = 0
    total_profit: int = 0
    clients_acquired: int = 0
    clients_lost: int = 0
    total_jobs: int = 0


class AutomationSettings(BaseModel):
    auto_assign: bool = True
    auto_promote: bool = True
    auto_hire: bool = True
    hire_cash_buffer: int = DEFAULT_HIRE_CASH_BUFFER
    promote_cash_buffer: int = DEFAULT_PROMOTE_CASH_BUFFER


class ActiveEvent(BaseModel):
    event_id: str
    name: str
    description: str
    kind: Literal['positive', 'negative', 'neutral']
    message: str
    week: int
    discount: Optional[float] = None
    restore_next_turn: Optional[str] = None
    dismissed: bool = False


class EventHistoryEntry(BaseModel):
    event_id: str
    week: int
    message: str


class GameState(BaseModel):
    week: int = 1
    money: int = INITIAL_CASH
    clients: List[Client] = []
    employees: List[Employee] = []
    trucks: List[Truck] = []
    owned_equipment: List[str] = []
    owned_upgrades: List[str] = []
    weekly_revenue: int = 0
    weekly_expenses: int = 0
    stats: GameStats = Field(default_factory=GameStats)
    game_over: bool = False
    game_over_reason: Optional[GameOverReason] = None
    automation_settings: AutomationSettings = Field(default_factory=AutomationSettings)
    active_event: Optional[ActiveEvent] = None
    event_history: List[EventHistoryEntry] = []

    def find_client(self, client_id: str) -> Optional[Client]:
        return next((c for c in self.clients if c.id == client_id), None)

    def find_employee(self, employee_id: str) -> Optional[Employee]:
        return next((e for e in self.employees if e.id == employee_id), None)

    def is_client_assigned(self, client_id: str) -> bool:
        return any(client_id in e.assigned_clients for e in self.employees)


class EquipmentBonuses(BaseModel):
    satisfaction_bonus: int = 0
    speed_bonus: int = 0
    eco_bonus: int = 0


class PromotionInfo(BaseModel):
    next_tier: SkillTier
    xp_required: int
    cost: int
    can_promote: bool


class SatisfactionStatus(BaseModel):
    label: str
    severity: Literal['excellent', 'good', 'fair', 'poor', 'critical']


class ServiceResult(BaseModel):
    satisfaction_gain: int
    success: bool = True


class EventResult(BaseModel):
    success: bool
    message: str = ""
    discount: Optional[float] = None
    restore_next_turn: Optional[str] = None


class LogEntry(BaseModel):
    week: int
    message: str


class TurnReport(BaseModel):
    week: int
    revenue: int
    expenses: int
    net_profit: int
    jobs_completed: int = 0
    referrals: int = 0
    clients_lost: int = 0
    automation_actions: int = 0
    event: Optional[ActiveEvent] = None
    game_over: bool = False
    game_over_reason: Optional[GameOverReason] = None


__all__ = [
    'Client', 'Employee', 'Truck', 'GameStats', 'AutomationSettings',
    'ActiveEvent', 'EventHistoryEntry', 'GameState', 'EquipmentBonuses',
    'UpgradeEffects', 'PromotionInfo', 'SatisfactionStatus', 'ServiceResult',
    'EventResult', 'LogEntry', 'TurnReport', 'GameOverReason',
]
