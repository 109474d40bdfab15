"""
Shared constants for the visualizers. Values mirror the classroom
defaults: narration every 950ms, 0-99 node payloads, 1-20 sort inputs.
"""

STEP_INTERVAL_MS = 950  # list narration cadence
SORT_STEP_INTERVAL_MS = 500  # sort playback cadence at 1.0x

VALUE_MIN = 0
VALUE_MAX = 99

ARRAY_MIN_LENGTH = 1
ARRAY_MAX_LENGTH = 20

RANDOM_SIZE_RANGE = (8, 12)
RANDOM_VALUE_RANGE = (1, 100)

DEFAULT_ARRAY = (64, 34, 25, 12, 22, 11, 90)
CIRCULAR_SEED = (10, 20, 30, 50)

SPEED_MIN = 0.5
SPEED_MAX = 3.0
