from enum import Enum

class ValidationStatus(str, Enum):
    VALID = "VALID"
    INVALID = "INVALID"
    UNCERTAIN = "UNCERTAIN" # Inconclusive, defer to the next validator
    ERROR = "ERROR" # Configuration/data defect, e.g. unknown category

class RoundState(str, Enum):
    INIT = "INIT" # Round being prepared, no letter yet
    RUNNING = "RUNNING" # Timer counting, inputs enabled
    FINISHED = "FINISHED" # Timer stopped, scored exactly once
    DIALOG_SHOWN = "DIALOG_SHOWN" # Results presented
    TRANSITIONING = "TRANSITIONING" # Moving to the next round or ending the game

class RoundEndTrigger(str, Enum):
    TIMER_EXPIRED = "timer_expired"
    MANUAL_STOP = "manual_stop"
