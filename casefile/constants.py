from casefile.models.ids import CharacterID

JUDGE_CHARACTER_ID = CharacterID("judge")
JUDGE_VOICE_ID = "6sFKzaJr574YWVu4UuJF"
JUDGE_VOICE_NAME = "Cornelius"

DEFAULT_MODEL = "google/gemini-2.0-flash-001"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"

MIN_LOCATIONS = 5
MIN_CHARACTERS = 8
MIN_CLUES = 15

MAX_GENERATION_ATTEMPTS = 5
GENERATION_TEMPERATURE = 1.5  # 0-2, higher is more creative

VICTIM_REFUSAL = "You cannot speak with the victim."
