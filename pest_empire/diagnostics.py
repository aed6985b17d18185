# pest_empire/diagnostics.py
from typing import Dict, Any
import numpy as np

from .models import GameState, TurnReport


class Diagnostics:
    def __init__(self, run_id: str):
        self.run_id = run_id

        # Tracking Data
        self.history = []
        self.events = []

        # Metrics
        self.total_jobs = 0
        self.total_referrals = 0
        self.total_churn = 0
        self.automation_actions = 0

    def record_turn(self, state: GameState, report: TurnReport):
        """Record a single completed week"""
        step_data = {
            'week': report.week,
            'money': state.money,
            'revenue': report.revenue,
            'expenses': report.expenses,
            'net_profit': report.net_profit,
            'clients': len(state.clients),
            'employees': len(state.employees),
            'avg_satisfaction': np.mean([c.satisfaction for c in state.clients]) if state.clients else 0.0,
        }
        self.history.append(step_data)

        self.total_jobs += report.jobs_completed
        self.total_referrals += report.referrals
        self.total_churn += report.clients_lost
        self.automation_actions += report.automation_actions
        if report.event:
            self.events.append(report.event.event_id)

    def classify_strategy(self) -> str:
        """Classify the player's strategy based on how the company grew"""
        if not self.history:
            return "Unknown"

        avg_sat = np.mean([d['avg_satisfaction'] for d in self.history])
        peak_clients = max(d['clients'] for d in self.history)
        peak_staff = max(d['employees'] for d in self.history)

        if self.total_churn > peak_clients:
            return "Churn Machine (Neglect)"
        elif peak_clients > peak_staff * 3:
            return "Overextended"
        elif self.automation_actions > len(self.history):
            return "Automated"
        elif avg_sat > 80:
            return "Service First"
        else:
            return "Steady Growth"

    def generate_report(self) -> Dict[str, Any]:
        """Generate final diagnostic report"""
        last = self.history[-1] if self.history else {}
        return {
            'run_id': self.run_id,
            'strategy': self.classify_strategy(),
            'weeks_played': len(self.history),
            'final_money': last.get('money', 0),
            'final_clients': last.get('clients', 0),
            'final_employees': last.get('employees', 0),
            'best_week_profit': max((d['net_profit'] for d in self.history), default=0),
            'event_counts': self._event_counts(),
            'metrics': {
                'jobs': self.total_jobs,
                'referrals': self.total_referrals,
                'churned': self.total_churn,
                'automation_actions': self.automation_actions,
            }
        }

    def _event_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for event_id in self.events:
            counts[event_id] = counts.get(event_id, 0) + 1
        return counts
