"""Rating and library constants"""

INITIAL_MU = 25.0
INITIAL_SIGMA = 8.333
BETA = 4.167  # performance variance / class width
TAU = 0.083   # dynamics noise re-injected after every match
TARGET_SIGMA = 1.8

# Draws are not produced by the voting flow; kept for the legacy draw path
DRAW_SHRINK = 0.95
MIN_SIGMA = 0.001

DB_FILENAME = "rankmaster_db.json"
DB_VERSION = 1
SUPPORTED_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "bmp", "webp"})

RECENT_CAPACITY = 30
AUTO_SAVE_INTERVAL_MATCHES = 20
