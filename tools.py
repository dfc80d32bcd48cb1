# ─────────────────────────────────────────────────────────────────────────────
#  Tool registry
#
#  Each tool is served at its own route path and maps to one prompt template.
#  The user's text is appended to the template (separated by a blank line)
#  and the result is sent upstream with the tool's generation parameters.
#
#  Per-tool fields:
#    route_path        : URL path the tool is served at (unique)
#    display_name      : title returned in the "tool" field of a response
#    prompt_template   : instructions placed before the user's text
#    generation_params : sampling / length / safety settings
# ─────────────────────────────────────────────────────────────────────────────
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field


class GenerationParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    temperature:       float = Field(default=0.7, ge=0.0, le=2.0)
    top_k:             int   = Field(default=40, ge=1)
    top_p:             float = Field(default=0.95, gt=0.0, le=1.0)
    max_output_tokens: int   = Field(default=8192, ge=1)
    stop_sequences:    tuple[str, ...] = ()
    # Applied to every harm category the upstream API supports
    safety_threshold:  str   = "BLOCK_MEDIUM_AND_ABOVE"


class ToolDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    route_path:        str
    display_name:      str
    prompt_template:   str
    generation_params: GenerationParams = GenerationParams()

    @property
    def key(self) -> str:
        """Short name used by clients, e.g. "seo-write" for /ai/seo-write."""
        return self.route_path.rsplit("/", 1)[-1]

    def compose_prompt(self, input_text: str) -> str:
        return f"{self.prompt_template}\n\n{input_text}"


def build_registry(tools) -> Mapping[str, ToolDefinition]:
    """Index tools by route path. Raises ValueError on a duplicate path."""
    registry: dict[str, ToolDefinition] = {}
    for tool in tools:
        if tool.route_path in registry:
            raise ValueError(f"Duplicate tool route path: {tool.route_path}")
        registry[tool.route_path] = tool
    return MappingProxyType(registry)


def _numbered(intro: str, points: list[str], outro: str) -> str:
    lines = "\n".join(f"{i}. {p}" for i, p in enumerate(points, 1))
    return f"{intro}\n\n{lines}\n\n{outro}"


TOOLS: Mapping[str, ToolDefinition] = build_registry([

    ToolDefinition(
        route_path="/ai/seo-write",
        display_name="AI SEO Writer",
        prompt_template=_numbered(
            "You are a professional SEO content writer and expert. Write comprehensive, "
            "SEO-optimized articles that rank well in search engines. Your writing should be "
            "engaging, informative, and valuable to readers. Follow these guidelines:",
            [
                "Create a compelling title and introduction",
                "Use proper H2 and H3 headings for structure",
                "Include bullet points and numbered lists for readability",
                "Integrate keywords naturally without stuffing",
                "Maintain a human, conversational tone throughout",
                "Include actionable insights and practical tips",
                "Write 2000-5000 words with comprehensive coverage",
                "Avoid AI-like patterns and robotic language",
                "Make it sound 100% human-written",
                "Focus on providing real value to readers",
            ],
            "Write a complete, well-structured article about the following topic:",
        ),
    ),

    ToolDefinition(
        route_path="/ai/humanize",
        display_name="AI Humanizer",
        prompt_template=_numbered(
            "You are an expert at transforming AI-generated text to sound completely "
            "human-written. Your task is to rewrite the given text with these characteristics:",
            [
                "Add natural contractions (don't, won't, can't, etc.)",
                "Include conversational language and casual phrases",
                "Add slight imperfections and natural flow",
                "Use varied sentence lengths and structures",
                "Include personal touches and relatable examples",
                "Remove robotic or overly formal language",
                "Add emotional undertones where appropriate",
                "Use active voice instead of passive",
                "Include transitional phrases and connectors",
                "Make it completely undetectable as AI content",
            ],
            "Rewrite the following text to sound 100% human-written:",
        ),
    ),

    ToolDefinition(
        route_path="/ai/detect",
        display_name="AI Detector",
        prompt_template=_numbered(
            "You are an AI detection specialist with expertise in identifying AI-generated "
            "content. Analyze the given text for AI patterns and characteristics. Look for:",
            [
                "Repetitive phrasing or structures",
                "Unnatural transitions between ideas",
                "Overly perfect grammar and punctuation",
                "Lack of personal experience or opinion",
                "Generic statements without specificity",
                "AI-typical sentence patterns",
                "Overuse of certain phrases",
                "Lack of emotional depth",
                "Too formal or academic tone",
                "Missing human imperfections",
            ],
            "Provide your analysis in this exact format:\n\n"
            "AI Probability: [X]%\n\n"
            "[Provide a detailed 2-3 sentence explanation of your analysis, highlighting the "
            "specific indicators that influenced your assessment]\n\n"
            "Analyze this text:",
        ),
        # Lower temperature keeps the probability format stable
        generation_params=GenerationParams(temperature=0.3),
    ),

    ToolDefinition(
        route_path="/ai/paraphrase",
        display_name="Paraphrasing Tool",
        prompt_template=_numbered(
            "You are a professional text rewriter specializing in creating unique, "
            "human-sounding content. Your task is to completely rewrite the given text while:",
            [
                "Maintaining the original meaning and intent",
                "Changing sentence structure and vocabulary",
                "Using synonyms and alternative expressions",
                "Varying sentence lengths and flow",
                "Adding natural human touches",
                "Ensuring 100% uniqueness from the original",
                "Making it sound naturally written",
                "Avoiding AI-like patterns",
                "Preserving the core message",
                "Creating engaging, readable content",
            ],
            "Completely rewrite the following text to make it 100% unique and human-sounding:",
        ),
    ),

    ToolDefinition(
        route_path="/ai/grammar",
        display_name="Grammar Checker",
        prompt_template=_numbered(
            "You are a professional editor and grammar expert. Your task is to fix all "
            "grammar, spelling, punctuation, and style errors in the given text. Focus on:",
            [
                "Correcting grammatical mistakes",
                "Fixing spelling errors",
                "Improving punctuation",
                "Enhancing sentence structure",
                "Maintaining the original voice and tone",
                "Improving clarity and readability",
                "Ensuring proper word usage",
                "Fixing run-on sentences",
                "Correcting subject-verb agreement",
                "Improving overall flow",
            ],
            "Return ONLY the corrected text without any explanations, comments, or markup. "
            "Fix all errors in this text:",
        ),
        generation_params=GenerationParams(temperature=0.2),
    ),

    ToolDefinition(
        route_path="/ai/improve",
        display_name="Text Improver",
        prompt_template=_numbered(
            "You are a professional writing coach and editor. Your task is to enhance the "
            "given text for better clarity, fluency, and professionalism while preserving "
            "the core message. Focus on:",
            [
                "Improving clarity and readability",
                "Enhancing flow and transitions",
                "Making language more engaging",
                "Strengthening word choice",
                "Improving sentence variety",
                "Adding professional polish",
                "Maintaining the original voice",
                "Enhancing overall impact",
                "Making it more compelling",
                "Ensuring natural, human tone",
            ],
            "Enhance and improve the following text while keeping its meaning intact:",
        ),
    ),

])

# ── Tool used by clients that ask for an unknown tool key ───────────────────
DEFAULT_TOOL = "/ai/improve"
