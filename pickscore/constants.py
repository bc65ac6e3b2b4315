"""Constants and mappings for the pickscore engine."""

# Game states after normalization
STATE_SCHEDULED = 'scheduled'
STATE_IN_PROGRESS = 'in_progress'
STATE_FINAL = 'final'
STATE_UNKNOWN = 'unknown'

# Upstream numeric status codes (ESPN status.type.id)
STATUS_TYPE_CODES = {
    1: STATE_SCHEDULED,
    2: STATE_IN_PROGRESS,
    3: STATE_FINAL,
}

# Exact state tokens, checked before substring containment
STATUS_EXACT_TOKENS = {
    'pre': STATE_SCHEDULED,
    'scheduled': STATE_SCHEDULED,
    'in': STATE_IN_PROGRESS,
    'live': STATE_IN_PROGRESS,
    'in_progress': STATE_IN_PROGRESS,
    'in progress': STATE_IN_PROGRESS,
    'post': STATE_FINAL,
    'final': STATE_FINAL,
}

# Substring fallbacks, in priority order
STATUS_SUBSTRINGS = [
    ('scheduled', STATE_SCHEDULED),
    ('pre', STATE_SCHEDULED),
    ('in progress', STATE_IN_PROGRESS),
    ('in_progress', STATE_IN_PROGRESS),
    ('live', STATE_IN_PROGRESS),
    ('final', STATE_FINAL),
    ('post', STATE_FINAL),
]

# Game results
WIN_A = 'win_a'
WIN_B = 'win_b'
TIE = 'tie'

# Round buckets
GROUP_STAGE = 'groupStage'
KNOCKOUT_ROUND = 'knockoutRound'
MEDAL_ROUND = 'medalRound'
ROUND_TYPES = (GROUP_STAGE, KNOCKOUT_ROUND, MEDAL_ROUND)

# Brier multiplier buckets
PLAYOFF = 'playoff'
BRIER_BUCKETS = {
    GROUP_STAGE: GROUP_STAGE,
    KNOCKOUT_ROUND: PLAYOFF,
    MEDAL_ROUND: PLAYOFF,
}

# Built-in round keywords, checked after any configured mappings
MEDAL_KEYWORDS = ('gold', 'bronze')
KNOCKOUT_KEYWORDS = ('semifinal', 'quarterfinal', 'knockout')
GROUP_KEYWORDS = ('group',)

# Scoring modes
MODE_CLASSIC = 'classic'
MODE_BRIER = 'brier'

# Confidence bounds
MIN_CONFIDENCE = 0.5
MAX_CONFIDENCE = 1.0
DEFAULT_CONFIDENCE = 0.5

# Overtime kinds reported in pick details
OVERTIME = 'overtime'
SHOOTOUT = 'shootout'

# Neutral result reasons
REASON_NOT_STARTED = 'Game not started'
REASON_MISSING_SCORES = 'Missing actual scores'
REASON_GAME_NOT_FOUND = 'Game not found'
