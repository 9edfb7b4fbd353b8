"""
Prompt for YouTube content generation.

The reply is parsed by agent.modules.normalize, so the prompt pins the exact
key names and value types. The topic is embedded verbatim.
"""

SYSTEM = """You are an expert YouTube content creator and strategist.

You will output a single JSON object.

Output rules:
- Return ONLY the JSON object, no markdown fences, no explanation, no preamble.
- All string values must use double quotes.
- "titles", "tags", "thumbnailIdeas" and "scriptOutline" must be JSON arrays \
of strings, each with at least one item.
- "description" must be a single non-empty string."""

USER_TEMPLATE = """Generate comprehensive YouTube content ideas for the following \
topic: "{topic}".

Return a JSON object with exactly these fields:
{{
  "titles": ["2-3 catchy video titles with emojis"],
  "description": "An engaging 2-3 sentence video description",
  "tags": ["5-8 relevant hashtags/keywords"],
  "thumbnailIdeas": ["2-3 thumbnail text ideas with emojis"],
  "scriptOutline": ["4-6 main sections for the video script"]
}}

Make sure the titles are catchy, SEO-friendly, and include relevant emojis. \
The description should hook viewers. Tags should be searchable keywords. \
Thumbnail ideas should be short, punchy text. Script outline should cover \
the logical flow of the video."""
