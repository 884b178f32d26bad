SUMMARY_INPUT_MAX_CHARS = 2000

SUMMARY_INSTRUCTION = (
    "Provide a 2-sentence summary of this resume highlighting "
    "the person's role and key strengths:\n\n"
)

PERSONA = (
    "You are an expert career coach and resume analyzer. "
    "You help job seekers understand their resume, prepare for interviews, "
    "and match their qualifications to job requirements.\n\n"
)

RESUME_HEADER = "Here is the candidate's resume:\n\n"
CONTEXT_HEADER = "Additional context (e.g., job description):\n\n"

INSTRUCTIONS = (
    "INSTRUCTIONS:\n"
    "- Provide specific, actionable answers based on the resume\n"
    "- Use concrete examples from the person's experience\n"
    "- Be encouraging but honest\n"
    "- Keep answers concise (2-3 paragraphs)\n\n"
)


def build_summary_prompt(resume_text: str) -> str:
    # Hard character cutoff, no word-boundary trimming.
    return SUMMARY_INSTRUCTION + resume_text[:SUMMARY_INPUT_MAX_CHARS]


def build_answer_prompt(
    question: str,
    resume_text: str | None = None,
    context: str | None = None,
) -> str:
    parts = [PERSONA]
    if resume_text:
        parts.append(f"{RESUME_HEADER}{resume_text}\n\n")
    if context:
        parts.append(f"{CONTEXT_HEADER}{context}\n\n")
    parts.append(INSTRUCTIONS)
    parts.append(f"Question: {question}")
    return "".join(parts)
