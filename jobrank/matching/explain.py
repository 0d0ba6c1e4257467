"""Template explanations for match results."""
from __future__ import annotations

from jobrank.matching.context import ContextMatch
from jobrank.matching.skills import SkillMatch


def _skills_sentence(skills: SkillMatch) -> str:
    if skills.exact_count:
        shown = ", ".join(skills.matched_skills[:3])
        noun = "match" if skills.exact_count == 1 else "matches"
        return f"Strong skill match with {skills.exact_count} exact {noun} including {shown}."
    if skills.partial_count:
        return "Partial skill alignment through related skills."
    return "Limited skill overlap."


def _experience_sentence(score: float) -> str:
    if score >= 80:
        return "Experience level fits the role."
    if score >= 60:
        return "Experience level is close to what the role asks for."
    return "Experience gap against the role's seniority."


def _context_sentence(context: ContextMatch) -> str:
    if context.location >= 90:
        sentence = "Excellent location fit."
    elif context.location >= 70:
        sentence = "Good location fit."
    else:
        sentence = "Location may need relocation or remote work."
    if context.salary < 60:
        sentence += " Salary expectations exceed the advertised range."
    return sentence


def _overall_sentence(final_score: float) -> str:
    if final_score >= 0.85:
        return "Excellent overall match."
    if final_score >= 0.7:
        return "Good overall match."
    return "Moderate overall match."


def build_explanation(
    skills: SkillMatch,
    experience_score: float,
    context: ContextMatch,
    final_score: float,
    *,
    verified_active: bool = False,
) -> str:
    """Assemble a deterministic explanation from which sub-scores were strong or weak."""

    parts = [
        _skills_sentence(skills),
        _experience_sentence(experience_score),
        _context_sentence(context),
        _overall_sentence(final_score),
    ]
    if verified_active:
        parts.append("Posting recently verified as open.")
    return " ".join(parts)
