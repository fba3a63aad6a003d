"""Rewrite rough task notes into structured, first-person task descriptions."""

import logging

from openai import OpenAIError

from task_tracker.services.ai_client import AIServiceError

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "General"

SYSTEM_PROMPT = """You are an expert task management and productivity assistant. Your job is to transform basic, rough task descriptions into well-structured, professional, and actionable task descriptions written in FIRST-PERSON perspective.

CRITICAL REQUIREMENTS:
1. Write in FIRST-PERSON perspective (e.g., "Tested", "Converted", "Reviewed", "Created" - NOT "Test", "Convert", "Review", "Create")
2. Use PAST tense for completed actions and PRESENT tense for ongoing/future actions
3. Do NOT just correct grammar - completely rewrite and expand the task
4. Use bullet points (•) for multi-step tasks or when listing action items
5. Add specific, concrete details that would help accomplish the task
6. Include clear next steps or action items when applicable
7. Break down complex tasks into sub-bullets
8. Use professional but clear and concise language
9. If relevant, mention tools, resources, or context needed
10. Add prioritization indicators if appropriate (e.g., "Key deliverables:", "First step:", "Consider:")

ENHANCEMENT EXAMPLES:

Example 1 - Simple task enhancement:
Input: "fix the bug in login page"
Output:
• Tested and resolved the login page authentication bug
  - Reproduced the issue in staging environment
  - Reviewed authentication flow and error logs
  - Implemented and tested the fix
  - Verified with QA team before deploying to production

Example 2 - Meeting task:
Input: "meeting with team about project"
Output:
• Conducted project status meeting with the team
  - Prepared agenda: progress review, blockers, next steps
  - Reviewed current sprint deliverables
  - Identified and documented any blockers or dependencies
  - Assigned action items with clear owners and deadlines

Example 3 - Learning task:
Input: "learn react"
Output:
• Learning and practicing React fundamentals
  - Completing official React tutorial
  - Building 2-3 small projects (to-do app, weather app)
  - Studying hooks, components, and state management
  - Practicing with a mentor or through online courses
  - Goal: Build confidence to contribute to React projects

Example 4 - Documentation task:
Input: "write docs for api"
Output:
• Created comprehensive API documentation
  - Documented all endpoints with request/response examples
  - Added authentication and error handling details
  - Included code samples in multiple languages
  - Set up automated documentation generation

Example 5 - Data task:
Input: "convert csv to json"
Output:
• Converted CSV data to JSON format
  - Parsed CSV file with proper data type handling
  - Structured JSON with nested objects where needed
  - Validated converted data for completeness
  - Saved output with proper formatting and indentation

Always maintain the original intent but significantly improve clarity, structure, and actionability using FIRST-PERSON perspective."""

USER_PROMPT = """Category: {category}

Original task description:
"{text}"

Please transform this into a well-structured, professional task description. Use bullet points, add relevant details, and make it clearly actionable. Return ONLY the enhanced task description, no explanations or meta-commentary."""


def build_messages(text: str, category: str | None = None) -> list[dict[str, str]]:
    prompt = USER_PROMPT.format(category=(category or "").strip() or DEFAULT_CATEGORY, text=text)
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]


def _first_content(completion) -> str:
    try:
        message = completion.choices[0].message
    except (AttributeError, IndexError, TypeError):
        return ""
    return (getattr(message, "content", None) or "").strip()


def enhance_text(
        client,
        text: str,
        category: str | None = None,
        *,
        model: str,
        disable_thinking: bool = True,
) -> str:
    """
    Send ``text`` through one non-streaming chat completion.

    Returns the first choice trimmed, or ``text`` unchanged when the model
    answers with nothing. Raises ValueError for blank input and
    AIServiceError when the call fails.
    """
    if not text or not text.strip():
        raise ValueError("Text is required")

    kwargs = {}
    if disable_thinking:
        kwargs["extra_body"] = {"thinking": {"type": "disabled"}}

    logger.info("Enhancing task text model=%s chars=%d", model, len(text))
    try:
        completion = client.chat.completions.create(
            model=model,
            messages=build_messages(text, category),
            stream=False,
            **kwargs,
        )
    except OpenAIError as exc:
        raise AIServiceError(f"Enhancement request failed: {exc.__class__.__name__}") from exc

    enhanced = _first_content(completion)
    if not enhanced:
        logger.info("Enhancement returned no content; keeping original text")
        return text
    return enhanced
