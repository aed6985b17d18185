# pest_empire/config.py

# Base Economic Constants
INITIAL_CASH = 2000
TRUCK_COST = 1000            # Added to every hire
OWNER_NAME = "You (Owner)"

# Weekly Operating Costs
WEEKLY_OVERHEAD = 300        # Rent, insurance, utilities
OVERHEAD_START_WEEK = 5      # Early game breathing room

# Client Acquisition
ACQUISITION_GROWTH = 1.3     # Cost multiplier per client acquired so far

# Satisfaction Thresholds
SATISFACTION_MAX = 100
SATISFACTION_MIN = 0
SERVICE_RESTORE = 15         # Restored by the weekly update when serviced
NEGLECT_DECAY_MULT = 2       # Unserviced clients decay twice as fast
CHURN_THRESHOLD = 20         # Strictly below this, the client leaves
HIGH_SATISFACTION = 80       # Revenue bonus and referral eligibility
LOW_SATISFACTION = 50        # Revenue penalty below this

# Revenue Modifiers
HIGH_SATISFACTION_PCT = 120   # Percent of base revenue
LOW_SATISFACTION_PCT = 70

# Referrals
REFERRAL_THRESHOLD = HIGH_SATISFACTION
REFERRAL_CHANCE = 0.03       # Per satisfied client per week

# Employees
XP_PER_JOB = 3
SYNERGY_BONUS = 5            # Speed/Eco client matched with the right tier

# Events
SEASONAL_MULTIPLIER = 1.5
WEEKS_PER_YEAR = 52
EQUIPMENT_DEAL_DISCOUNT = 0.3

# Victory Conditions (all in the same turn)
VICTORY_WEEKLY_PROFIT = 25000
VICTORY_MIN_CLIENTS = 12
VICTORY_MIN_EMPLOYEES = 6

# Automation Defaults
DEFAULT_HIRE_CASH_BUFFER = 2000
DEFAULT_PROMOTE_CASH_BUFFER = 1000

# Persistence
SAVE_VERSION = "1.0"
DEFAULT_SAVE_PATH = "saves/pest_empire_save.json"

# Log Sink
MAX_LOG_ENTRIES = 200
