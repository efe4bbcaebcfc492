"""Prompt templates for Lumina's LLM calls.

Each template uses ``{placeholder}`` syntax for variable substitution via
``str.format()``. Literal braces in the JSON example are doubled.
"""

# ---------------------------------------------------------------------------
# Sentiment and theme extraction
# ---------------------------------------------------------------------------

ANALYSIS_PROMPT = """\
Analyze this journal entry for sentiment and themes. Return JSON only.

Entry: "{content}"

Return format:
{{
  "sentiment": {{
    "score": <-1 to 1>,
    "label": "positive|neutral|negative"
  }},
  "themes": ["theme1", "theme2"],
  "emotions": ["emotion1", "emotion2"]
}}
"""

ANALYSIS_TEMPERATURE = 0.3

# ---------------------------------------------------------------------------
# Follow-up question
# ---------------------------------------------------------------------------

FOLLOW_UP_PROMPT = """\
Based on this journal entry and recent context, generate ONE empathetic \
follow-up question.

Current entry: "{content}"
Recent themes: {recent_themes}

Generate a thoughtful question that encourages deeper reflection. Be warm \
and conversational. Return only the question.
"""

FOLLOW_UP_TEMPERATURE = 0.7
