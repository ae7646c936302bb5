"""Game constants: difficulty ranges, limits, outcome kinds and feedback categories.

Pure data module -- no imports, no logic. Safe to import from any guessgame
module without risk of circular dependencies.
"""

# ── Difficulty levels ─────────────────────────────────────────────────

DIFFICULTY_EASY = "easy"
DIFFICULTY_MEDIUM = "medium"
DIFFICULTY_HARD = "hard"

EASY_MAX_RANGE = 50
MEDIUM_MAX_RANGE = 100
HARD_MAX_RANGE = 200

# ── Session limits ────────────────────────────────────────────────────

BASE_SCORE = 1000
DEFAULT_TIME_LIMIT = 10.0  # seconds per turn
MAX_PLAYERS = 10
MAX_INVALID_DIFFICULTY_CHOICES = 5

HELP_TOKEN = "help"

# ── Turn outcome kinds ────────────────────────────────────────────────

OUTCOME_CORRECT = "correct"
OUTCOME_VALID_INCORRECT = "valid_incorrect"
OUTCOME_INVALID_FORMAT = "invalid_format"
OUTCOME_OUT_OF_RANGE = "out_of_range"
OUTCOME_TIMED_OUT = "timed_out"
OUTCOME_HELP = "help"

DIRECTION_TOO_LOW = "too low"
DIRECTION_TOO_HIGH = "too high"

# ── Feedback categories (consumed by the presentation layer) ──────────

FEEDBACK_ERROR = "error"
FEEDBACK_INFO = "info"
FEEDBACK_SUCCESS = "success"
FEEDBACK_PROMPT = "prompt"
FEEDBACK_HELP = "help"
FEEDBACK_HEADER = "header"

# ── Player-facing hint text ───────────────────────────────────────────

HINT_INVALID_FORMAT = "Please enter a valid number (digits only)"
HINT_TIMED_OUT = "Timeout - turn skipped"
HINT_INPUT_UNAVAILABLE = "Input unavailable - turn skipped"

IN_GAME_HELP = """Quick Help
Basic Commands:
  • Enter a number within the given range
  • Type 'help' for this assistance

Scoring Tips:
  • Fewer attempts = Higher score
  • Faster completion = Bonus points
  • Higher difficulty = Score multiplier

Strategy:
  • Start with middle values
  • Pay attention to proximity hints
  • Manage your time wisely"""
