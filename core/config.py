"""Configuration constants for lexiclimb application."""

MIN_DIFFICULTY = 0
MAX_DIFFICULTY = 100
DEFAULT_DIFFICULTY = 50

# Round defaults
DEFAULT_ROUND_LENGTH = 100
DEFAULT_AUTO_REMOVE_COUNT = 2  # Correct answers after which a word is dropped (0 = never)

# Lexicon
ACADEMIC_RANK_OFFSET = 3000   # Academic ranks sort after general words when both are used

# Calibration quiz
ASSESSMENT_LENGTH = 70        # Number of words rated in a full calibration
ASSESSMENT_BATCH_SIZE = 10    # Ratings between level adjustments
MIN_RATING = 1
MAX_RATING = 4
DEFAULT_ASSESSMENT_BAND = (0, 100)  # (base, span) remap of the level before sampling
HARDEST_DECILE_BAND = (90, 10)

# Mid-round auto-adjustment
BATCH_SIZE = 10               # Words per reveal-rate batch
REVEAL_HIGH_THRESHOLD = 7     # Reveals at or above this make the round easier
REVEAL_LOW_THRESHOLD = 2      # Reveals at or below this make the round harder
DIFFICULTY_STEP_DOWN = 5
DIFFICULTY_STEP_UP = 3

# Slider resampling
RESAMPLE_DEBOUNCE_SECONDS = 0.5

# Grading
GRADE_PASS_SCORE = 70         # AI grader score needed to count an answer as correct
