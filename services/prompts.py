"""Prompt assembly for the interviewer model."""
from __future__ import annotations

from typing import Dict, Optional

from engines.adaptive import QuestionConfig

START_MESSAGE = "__start__"
END_MESSAGE = "__end__"
TIMEOUT_MESSAGE = "__timeout__"

CONTROL_PROMPTS: Dict[str, str] = {
    START_MESSAGE: "Start the interview now.",
    END_MESSAGE: "End the interview now and provide final rating in the required format.",
    TIMEOUT_MESSAGE: "The candidate did not answer. Ask a new question now.",
}

BASE_SYSTEM_PROMPT = """You are a professional technical interview conductor. Your behavior:
1. Ask probing technical and behavioral questions to assess candidates
2. Be direct and professional - like a real interviewer, not a coach
3. Listen carefully and ask follow-up questions based on responses
4. Provide critical but constructive feedback
5. After EVERY answer, include a score marker at the very end: "SCORE|X/10" where X is 0-10
6. After 8-10 exchanges, conclude with: "INTERVIEW_COMPLETE|[score]/10|[passed]" (passed: true/false if score >= 6)
7. Keep responses to 1-2 sentences max for speech clarity
8. Ask about: background, technical skills, problem-solving, weaknesses, career goals
9. Challenge vague answers with "Can you elaborate?" or "Give me a specific example"

Start with: "Hello. I'm conducting your technical interview today. First, tell me about your professional background and key technical skills."
Make sure the SCORE marker is always present after your response."""


def is_control(message: str) -> bool:
    return message in CONTROL_PROMPTS


def prompt_for(message: str) -> str:
    """Map control messages to their fixed instruction; real answers pass through."""

    return CONTROL_PROMPTS.get(message, message)


def domain_prompt(domain: Optional[str]) -> Optional[str]:
    if not domain or domain.strip().lower() == "general":
        return None
    domain = domain.strip()
    return (
        f"\nINTERVIEW DOMAIN: {domain}\n"
        f"Focus ALL questions specifically on {domain}. Ask technical and role-specific questions relevant to a "
        f"{domain} position. Tailor difficulty, terminology, and scenarios to this domain."
    )


def build_system_prompt(
    config: Optional[QuestionConfig],
    *,
    domain: Optional[str] = None,
    resume_prompt: Optional[str] = None,
) -> str:
    """System prompt for the next model call: base rules, difficulty directive, domain and resume context."""

    prompt = BASE_SYSTEM_PROMPT
    if config is not None:
        prompt += f"\n\nDIFFICULTY INSTRUCTION: {config.prompt}"
        prompt += f"\nCurrent difficulty level: {config.difficulty_name} ({config.difficulty}/3)"
        if config.is_follow_up:
            prompt += "\nThis should be a FOLLOW-UP question based on the candidate's previous answer."
    focus = domain_prompt(domain)
    if focus:
        prompt += f"\n\n{focus}"
    if resume_prompt:
        prompt += f"\n\n{resume_prompt}"
    return prompt


__all__ = [
    "START_MESSAGE",
    "END_MESSAGE",
    "TIMEOUT_MESSAGE",
    "CONTROL_PROMPTS",
    "BASE_SYSTEM_PROMPT",
    "is_control",
    "prompt_for",
    "domain_prompt",
    "build_system_prompt",
]
