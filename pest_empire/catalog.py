# pest_empire/catalog.py
"""
Static game catalog: client archetypes, skill tiers, equipment and the
upgrade tree. Pure data, loaded once and never mutated.
"""
from enum import Enum
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict


class ClientArchetype(str, Enum):
    RESIDENTIAL = 'RESIDENTIAL'
    SPEED_FOCUSED = 'SPEED_FOCUSED'
    ECO_FOCUSED = 'ECO_FOCUSED'
    COMMERCIAL = 'COMMERCIAL'


class SkillTier(str, Enum):
    TRAINEE = 'TRAINEE'
    JUNIOR = 'JUNIOR'
    EXPERIENCED = 'EXPERIENCED'
    EXPERT = 'EXPERT'


class EquipmentCategory(str, Enum):
    TOOL = 'tool'
    TRAP = 'trap'
    SAFETY = 'safety'


class UpgradePath(str, Enum):
    SPEED = 'speed'
    SERVICE = 'service'
    ECO = 'eco'
    AUTOMATION = 'automation'


class Season(str, Enum):
    SPRING = 'spring'
    SUMMER = 'summer'
    FALL = 'fall'
    WINTER = 'winter'


class ArchetypeDef(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    base_revenue: int
    acquisition_cost: int
    satisfaction_decay: int
    difficulty: int  # Used by smart matching, higher = harder
    demands: Tuple[str, ...]
    commercial: bool = False


class TierDef(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    rank: int
    hire_cost: int
    weekly_salary: int
    satisfaction_bonus: int
    max_clients: int
    xp_required: int = 0      # XP needed in the previous tier to be promoted into this one
    promotion_cost: int = 0


class EquipmentDef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    cost: int
    category: EquipmentCategory
    tier: int
    satisfaction_bonus: int = 0
    speed_bonus: int = 0
    eco_bonus: int = 0
    requires: Optional[str] = None


class UpgradeEffects(BaseModel):
    """Fixed set of upgrade effects. Numbers stack, capabilities OR together."""
    job_speed: int = 0
    satisfaction_bonus: int = 0
    revenue_bonus: float = 0.0
    eco_client_bonus: int = 0
    speed_client_bonus: int = 0
    auto_assign: bool = False
    smart_matching: bool = False
    auto_promote: bool = False
    auto_hire: bool = False


class UpgradeDef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    cost: int
    path: UpgradePath
    tier: int
    effects: UpgradeEffects
    requires: Optional[str] = None


ARCHETYPES: Dict[ClientArchetype, ArchetypeDef] = {
    ClientArchetype.RESIDENTIAL: ArchetypeDef(
        name='Residential', base_revenue=300, acquisition_cost=200,
        satisfaction_decay=3, difficulty=1, demands=('affordable', 'reliable')
    ),
    ClientArchetype.SPEED_FOCUSED: ArchetypeDef(
        name='Speed Priority', base_revenue=450, acquisition_cost=350,
        satisfaction_decay=5, difficulty=3, demands=('fast', 'responsive')
    ),
    ClientArchetype.ECO_FOCUSED: ArchetypeDef(
        name='Eco-Conscious', base_revenue=500, acquisition_cost=400,
        satisfaction_decay=4, difficulty=2, demands=('eco-friendly', 'humane')
    ),
    ClientArchetype.COMMERCIAL: ArchetypeDef(
        name='Commercial', base_revenue=800, acquisition_cost=600,
        satisfaction_decay=6, difficulty=4, demands=('professional', 'discreet'),
        commercial=True
    ),
}

TIERS: Dict[SkillTier, TierDef] = {
    SkillTier.TRAINEE: TierDef(
        name='Trainee', rank=0, hire_cost=800, weekly_salary=400,
        satisfaction_bonus=10, max_clients=2
    ),
    SkillTier.JUNIOR: TierDef(
        name='Junior', rank=1, hire_cost=1200, weekly_salary=600,
        satisfaction_bonus=15, max_clients=3, xp_required=30, promotion_cost=500
    ),
    SkillTier.EXPERIENCED: TierDef(
        name='Experienced', rank=2, hire_cost=1800, weekly_salary=900,
        satisfaction_bonus=20, max_clients=4, xp_required=60, promotion_cost=1000
    ),
    SkillTier.EXPERT: TierDef(
        name='Expert', rank=3, hire_cost=2500, weekly_salary=1200,
        satisfaction_bonus=25, max_clients=5, xp_required=90, promotion_cost=1500
    ),
}

TIER_ORDER: List[SkillTier] = sorted(TIERS, key=lambda t: TIERS[t].rank)

# New hire distribution, lowest tier most common (percent)
HIRE_DISTRIBUTION: Dict[SkillTier, int] = {
    SkillTier.TRAINEE: 50,
    SkillTier.JUNIOR: 30,
    SkillTier.EXPERIENCED: 15,
    SkillTier.EXPERT: 5,
}

EQUIPMENT: Dict[str, EquipmentDef] = {e.id: e for e in [
    EquipmentDef(
        id='BASIC_SPRAYER', name='Basic Sprayer',
        description='Standard pest control sprayer',
        cost=500, category=EquipmentCategory.TOOL, tier=1, satisfaction_bonus=5
    ),
    EquipmentDef(
        id='ADVANCED_SPRAYER', name='Advanced Sprayer',
        description='Professional-grade sprayer with better coverage',
        cost=1500, category=EquipmentCategory.TOOL, tier=2,
        satisfaction_bonus=10, speed_bonus=5, requires='BASIC_SPRAYER'
    ),
    EquipmentDef(
        id='ECO_SPRAYER', name='Eco-Friendly Sprayer',
        description='Uses organic solutions, loved by eco-conscious clients',
        cost=2000, category=EquipmentCategory.TOOL, tier=3,
        satisfaction_bonus=15, eco_bonus=20, requires='ADVANCED_SPRAYER'
    ),
    EquipmentDef(
        id='BASIC_TRAP_KIT', name='Basic Trap Kit',
        description='Humane traps for rodents and pests',
        cost=400, category=EquipmentCategory.TRAP, tier=1, satisfaction_bonus=5
    ),
    EquipmentDef(
        id='SMART_TRAP_SYSTEM', name='Smart Trap System',
        description='IoT-enabled traps with remote monitoring',
        cost=1800, category=EquipmentCategory.TRAP, tier=2,
        satisfaction_bonus=12, speed_bonus=10, requires='BASIC_TRAP_KIT'
    ),
    EquipmentDef(
        id='PROTECTIVE_GEAR', name='Protective Gear Set',
        description='Professional safety equipment',
        cost=600, category=EquipmentCategory.SAFETY, tier=1, satisfaction_bonus=8
    ),
]}

UPGRADES: Dict[str, UpgradeDef] = {u.id: u for u in [
    # Speed Path
    UpgradeDef(
        id='SPEED_1', name='Efficient Routing',
        description='Optimize travel routes between jobs',
        cost=1000, path=UpgradePath.SPEED, tier=1,
        effects=UpgradeEffects(job_speed=10)
    ),
    UpgradeDef(
        id='SPEED_2', name='Quick Response Team',
        description='Faster job completion across all employees',
        cost=2500, path=UpgradePath.SPEED, tier=2,
        effects=UpgradeEffects(job_speed=20), requires='SPEED_1'
    ),
    UpgradeDef(
        id='SPEED_3', name='Express Service',
        description='Ultra-fast service for speed-focused clients',
        cost=5000, path=UpgradePath.SPEED, tier=3,
        effects=UpgradeEffects(job_speed=30, speed_client_bonus=15), requires='SPEED_2'
    ),
    # Customer Service Path
    UpgradeDef(
        id='SERVICE_1', name='Customer Training',
        description='Train employees in customer relations',
        cost=1200, path=UpgradePath.SERVICE, tier=1,
        effects=UpgradeEffects(satisfaction_bonus=5)
    ),
    UpgradeDef(
        id='SERVICE_2', name='Premium Service Package',
        description='Offer premium services that delight clients',
        cost=3000, path=UpgradePath.SERVICE, tier=2,
        effects=UpgradeEffects(satisfaction_bonus=10, revenue_bonus=0.1), requires='SERVICE_1'
    ),
    UpgradeDef(
        id='SERVICE_3', name='VIP Client Program',
        description='Exclusive benefits for high-value clients',
        cost=6000, path=UpgradePath.SERVICE, tier=3,
        effects=UpgradeEffects(satisfaction_bonus=20, revenue_bonus=0.25), requires='SERVICE_2'
    ),
    # Eco-Friendly Path
    UpgradeDef(
        id='ECO_1', name='Green Certification',
        description='Certified eco-friendly pest control methods',
        cost=1500, path=UpgradePath.ECO, tier=1,
        effects=UpgradeEffects(eco_client_bonus=10)
    ),
    UpgradeDef(
        id='ECO_2', name='Organic Solutions',
        description='Use only organic, pet-safe products',
        cost=3500, path=UpgradePath.ECO, tier=2,
        effects=UpgradeEffects(eco_client_bonus=20, satisfaction_bonus=5), requires='ECO_1'
    ),
    UpgradeDef(
        id='ECO_3', name='Zero-Harm Initiative',
        description='Revolutionary humane pest management',
        cost=7000, path=UpgradePath.ECO, tier=3,
        effects=UpgradeEffects(eco_client_bonus=35, satisfaction_bonus=10, revenue_bonus=0.15),
        requires='ECO_2'
    ),
    # Automation Path
    UpgradeDef(
        id='AUTO_1', name='Dispatch Software',
        description='Unserviced clients are assigned to free employees each week',
        cost=2000, path=UpgradePath.AUTOMATION, tier=1,
        effects=UpgradeEffects(auto_assign=True)
    ),
    UpgradeDef(
        id='AUTO_2', name='Smart Scheduling',
        description='Dispatch pairs the toughest clients with your best people',
        cost=4000, path=UpgradePath.AUTOMATION, tier=2,
        effects=UpgradeEffects(smart_matching=True), requires='AUTO_1'
    ),
    UpgradeDef(
        id='AUTO_3', name='Training Program',
        description='Eligible employees are promoted automatically',
        cost=5000, path=UpgradePath.AUTOMATION, tier=3,
        effects=UpgradeEffects(auto_promote=True), requires='AUTO_2'
    ),
    UpgradeDef(
        id='AUTO_4', name='HR Department',
        description='Hire new technicians when the crew is fully booked',
        cost=8000, path=UpgradePath.AUTOMATION, tier=4,
        effects=UpgradeEffects(auto_hire=True), requires='AUTO_3'
    ),
]}

FIRST_NAMES = [
    'Alex', 'Jordan', 'Taylor', 'Morgan', 'Casey',
    'Riley', 'Jamie', 'Quinn', 'Avery', 'Charlie',
    'Sam', 'Drew', 'Reese', 'Parker', 'Skyler',
]

LAST_NAMES = [
    'Smith', 'Johnson', 'Williams', 'Brown', 'Jones',
    'Garcia', 'Martinez', 'Davis', 'Rodriguez', 'Wilson',
    'Anderson', 'Taylor', 'Thomas', 'Moore', 'Jackson',
]

RESIDENTIAL_NAMES = [
    'Johnson Family', 'Martinez Residence', 'Chen Household', 'Smith Home',
    'Garcia Family', 'Patel Residence', 'Williams Home', 'Brown Family',
    'Davis Household', 'Rodriguez Home', 'Wilson Estate', 'Anderson Residence',
    'Taylor Home', 'Thomas Family', 'Moore Household', 'Jackson Residence',
    'Lee Family', 'White Home', 'Harris Residence', 'Clark Family',
    'Lewis Household', 'Walker Home', 'Hall Residence', 'Allen Family',
    'Young Household', 'King Residence', 'Wright Home', 'Lopez Family',
    'Hill Residence', 'Green Household', 'Adams Family', 'Baker Residence',
    'Nelson Home', 'Carter Household', 'Mitchell Residence',
]

COMMERCIAL_NAMES = [
    'Sunrise Cafe', 'Metro Office Plaza', 'Green Valley Apartments',
    'Downtown Restaurant', 'Riverside Hotel', 'Oak Street Bakery',
    'Maple Grove Mall', 'City Center Gym', 'Harbor View Condos',
    'Westside Warehouse', 'Pinewood Medical Center', 'Summit Tech Building',
    'Lakeside Bistro', 'Parkview Shopping Center', 'Grand Hotel & Suites',
    'Main Street Deli', 'Cornerstone Office Park', 'Sunset Apartments',
    'Valley View Restaurant', 'Hillside Dental Clinic', 'Eastside Fitness Club',
    'Pioneer Business Center', 'Bayshore Condominiums', 'Crossroads Cafe',
    'Heritage Office Tower', 'Mountain View Lodge', 'Central Storage Facility',
    'Northgate Shopping Plaza', 'Riverside Veterinary Clinic',
    'Skyline Office Complex', 'Oceanfront Resort', 'Broadway Theater',
    'Industrial Park East', 'Gateway Conference Center', 'Lakeview Retirement Home',
]


def name_pool(archetype: ClientArchetype) -> List[str]:
    return COMMERCIAL_NAMES if ARCHETYPES[archetype].commercial else RESIDENTIAL_NAMES


def next_tier(tier: SkillTier) -> Optional[SkillTier]:
    """The tier above ``tier``, or None at the top."""
    idx = TIER_ORDER.index(tier)
    if idx + 1 >= len(TIER_ORDER):
        return None
    return TIER_ORDER[idx + 1]
