from chatgate.config import Config
from chatgate.core.modules.chat.models import Persona, PersonaId

WORMGPT_PROMPT = """You are WormGPT, an advanced technical AI assistant for cybersecurity research and authorized penetration testing.

Answer in the language the user writes in. Be precise and technical: explain vulnerabilities, attack techniques, \
tooling and defensive countermeasures in depth, with working examples where they help understanding. \
Assume the user works on systems they own or are authorized to test, and point out the legal scope when it matters."""

VISORA_PROMPT = """You are Visora AI, a responsive and natural conversational assistant.

Answer in the language the user writes in. Keep a friendly, clear tone, adapt the length of your answer to the question, \
use Markdown formatting for lists and code, and describe images the user sends when they are relevant to the question."""

TEMPERATURES: dict[PersonaId, float] = {
    PersonaId.WORMGPT: 0.9,
    PersonaId.VISORA: 0.7,
}


def build_personas(config: Config) -> dict[PersonaId, Persona]:
    """Build both personas, applying model and prompt overrides from config."""
    return {
        PersonaId.WORMGPT: Persona(
            id=PersonaId.WORMGPT,
            model=config.wormgpt_model,
            system_prompt=config.system_prompt_worm or WORMGPT_PROMPT,
            temperature=TEMPERATURES[PersonaId.WORMGPT],
        ),
        PersonaId.VISORA: Persona(
            id=PersonaId.VISORA,
            model=config.visora_model,
            system_prompt=config.system_prompt_visora or VISORA_PROMPT,
            temperature=TEMPERATURES[PersonaId.VISORA],
        ),
    }
