from pathlib import Path

_PROMPTS_DIR = Path(__file__).resolve().parent
_CASE_DETAILS_PLACEHOLDER = "{case_details}"


def load_prompt_file(name: str) -> str:
    path = _PROMPTS_DIR / name
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to load prompt file: {path}") from exc


SCHEDULE_SYSTEM_PROMPT = load_prompt_file("system.md")
SCHEDULE_USER_PROMPT = load_prompt_file("schedule_user.md")


def build_user_prompt(case_details: str) -> str:
    # The template embeds a literal JSON example, so str.format is not usable here.
    return SCHEDULE_USER_PROMPT.replace(_CASE_DETAILS_PLACEHOLDER, case_details, 1)
