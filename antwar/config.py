"""Shared constants for Ant War. All game-wide balance values live here."""

# --- Rounds ---
MAX_ROUND = 512

# --- Map ---
EDGE = 10                  # length of one hexagon edge (must be even)
MAP_SIZE = 2 * EDGE - 1    # board is MAP_SIZE x MAP_SIZE, corners are void

# --- Economy ---
COIN_INIT = 50
BASIC_INCOME = 1           # coins per round per player
TOWER_BUILD_PRICE_BASE = 15
TOWER_BUILD_PRICE_RATIO = 2
LEVEL2_TOWER_UPGRADE_PRICE = 60
LEVEL3_TOWER_UPGRADE_PRICE = 200
TOWER_DOWNGRADE_REFUND_RATIO = 0.8
LEVEL2_BASE_UPGRADE_PRICE = 200
LEVEL3_BASE_UPGRADE_PRICE = 250

# --- Pheromone ---
PHEROMONE_INIT = 10.0
PHEROMONE_MIN = 0.0
PHEROMONE_ATTENUATING_RATIO = 0.97
# Delta applied along a dead ant's path, indexed by AntState value
# (Alive, Success, Fail, TooOld).
PHEROMONE_TAU = (0.0, 10.0, -5.0, -3.0)
# Attraction multipliers for (closer, same distance, farther) neighbours
NAVIGATION_ETA = (1.25, 1.00, 0.75)

# --- Ant ---
ANT_AGE_LIMIT = 32
ANT_MAX_HP = (10, 25, 50)  # by level
ANT_REWARD = (3, 5, 7)     # coins for killing an ant, by level
EVASION_CHARGES = 2        # hits negated by an emergency evasion

# --- Base ---
BASE_MAX_HP = 50
BASE_POSITIONS = ((2, EDGE - 1), ((MAP_SIZE - 1) - 2, EDGE - 1))
BASE_GENERATION_CYCLE = (4, 2, 1)  # spawn when round % cycle == 0, by level
BASE_MAX_LEVEL = 2

# --- Transcript ---
TRANSCRIPT_PRECISION = 4
