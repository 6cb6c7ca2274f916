"""Prompt construction for the scene breakdown request."""

from __future__ import annotations

from typing import Dict, List

SYSTEM_PROMPT = """
You are an expert screenwriter and film analyst. Analyze scenes and provide comprehensive breakdowns.
Respond STRICTLY with a JSON object in this format:

{
  "characters": ["character1", "character2"],
  "locations": ["location1", "location2"],
  "themes": ["theme1", "theme2"],
  "tone": "description",
  "structure": "setup, conflict, resolution",
  "technicalNotes": "camera, lighting, sound",
  "visualElements": "key visual elements",
  "emotionalArc": "emotional journey"
}
""".strip()

USER_PROMPT_PREFIX = "Analyze this scene and return ONLY JSON:\n\n"

Message = Dict[str, str]


def build_breakdown_messages(scene_text: str) -> List[Message]:
    """Return the system and user messages for one scene.

    The scene text is embedded verbatim after a fixed instruction line, so the
    same input always produces the same prompt.
    """

    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": f"{USER_PROMPT_PREFIX}{scene_text}"},
    ]
