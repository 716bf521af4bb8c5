"""Presentation schema models — the contract between validator, templates and assembler.

A presentation is a theme id, a title and an ordered list of slides. Each
slide is one variant of a tagged union: its ``type`` field selects which
other fields exist. Field names are snake_case in Python and camelCase on
the wire (``leftTitle``, ``mediaUrl``...); both spellings are accepted on
input.

Models are pydantic v2 so that validation reports a path for every issue
(see ``src.schema.validation``).
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class SlideKind(str, Enum):
    """Discriminant values for the slide union."""
    TITLE = "title"
    CONTENT = "content"
    MEDIA = "media"
    DATA = "data"
    QUOTE = "quote"
    TIMELINE = "timeline"
    COMPARISON = "comparison"
    PROCESS = "process"
    SECTION_HEADER = "section-header"
    BLANK = "blank"
    HERO = "hero"
    TWO_COLUMN = "two-column"
    THREE_COLUMN = "three-column"
    FOUR_COLUMN = "four-column"
    CHART_WITH_METRICS = "chart-with-metrics"
    PRODUCT_OVERVIEW = "product-overview"
    GRID = "grid"
    FEATURE_CARDS = "feature-cards"
    TEAM = "team"
    PRICING = "pricing"
    CODE = "code"


class ChartKind(str, Enum):
    BAR = "bar"
    LINE = "line"
    AREA = "area"
    PIE = "pie"
    DOUGHNUT = "doughnut"
    SCATTER = "scatter"


ASPECT_RATIOS = ("16:9", "4:3")
FONT_SIZES = ("default", "large", "xlarge")


# ---------------------------------------------------------------------------
# Field types
# ---------------------------------------------------------------------------

# http(s), protocol-relative, data URIs, or a relative path without spaces.
_URL_RE = re.compile(r"^(?:(?:https?:)?//\S+|data:[\w/+.-]+(?:;[\w=.-]+)*,\S*|[^\s:]+)$")


def _check_url(value: str) -> str:
    if not _URL_RE.match(value):
        raise ValueError("expected a URL (http(s)://, //, data: or a relative path)")
    return value


NonEmptyStr = Annotated[str, Field(min_length=1)]
UrlRef = Annotated[str, AfterValidator(_check_url)]
TextOrList = Union[str, list[str]]
PatternKind = Literal["dots", "grid", "diagonal-lines", "waves", "gradient-mesh", "hexagon", "circles"]
ChartValue = Union[float, tuple[float, float], None]


class _Model(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_dict(self) -> dict[str, Any]:
        """Wire-format dict (camelCase keys, unset optionals dropped)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Chart data
# ---------------------------------------------------------------------------

class ChartSeries(_Model):
    """One named series. ``values`` may hold ``[x, y]`` pairs for scatter."""
    name: str = Field(validation_alias=AliasChoices("name", "label"))
    values: list[ChartValue] = Field(validation_alias=AliasChoices("values", "data"))
    color: str | list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("color", "backgroundColor", "background_color"),
    )

    def numeric(self) -> list[float]:
        """Values as plain floats; None/NaN/inf count as 0."""
        return [_safe_number(v) for v in self.values if not isinstance(v, tuple)]

    def has_pairs(self) -> bool:
        return any(isinstance(v, tuple) for v in self.values)


class ChartDataset(_Model):
    labels: list[str] = Field(default_factory=list)
    series: list[ChartSeries] = Field(
        min_length=1,
        validation_alias=AliasChoices("series", "datasets"),
    )

    @field_validator("labels", mode="before")
    @classmethod
    def _stringify_labels(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [str(item) for item in v]
        return v


def _safe_number(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        if math.isnan(value) or math.isinf(value):
            return 0.0
        return float(value)
    return 0.0


# ---------------------------------------------------------------------------
# Slide variants
# ---------------------------------------------------------------------------

class _SlideBase(_Model):
    id: str | None = None
    notes: str | None = None
    state: Literal["generating", "complete", "error"] | None = None

    @property
    def kind(self) -> SlideKind:
        return SlideKind(self.type)  # type: ignore[attr-defined]

    @property
    def heading(self) -> str | None:
        """Best-effort title for outlines and QA."""
        return getattr(self, "title", None)


class TitleSlide(_SlideBase):
    type: Literal["title"]
    title: NonEmptyStr
    subtitle: str | None = None
    author: str | None = None
    date: str | None = None


class ContentSlide(_SlideBase):
    type: Literal["content"]
    title: NonEmptyStr
    content: TextOrList
    layout: Literal["single-column", "two-column"] = "single-column"


class VideoOptions(_Model):
    autoplay: bool = True
    loop: bool = True
    muted: bool = True
    controls: bool = False
    poster: UrlRef | None = None
    play_on: Literal["visible", "manual", "immediate"] = "visible"
    fallback_image: UrlRef | None = None


class Overlay(_Model):
    enabled: bool = True
    type: Literal["gradient", "solid", "none"] = "gradient"
    opacity: float = Field(default=0.7, ge=0, le=1)
    direction: str = "135deg"


class MediaSlide(_SlideBase):
    type: Literal["media"]
    title: str | None = None
    subtitle: str | None = None
    media_url: UrlRef
    media_type: Literal["image", "video", "embed"]
    caption: str | None = None
    layout: Literal["contained", "hero", "split", "full-bleed"] = "contained"
    overlay: Overlay | None = None
    video: VideoOptions | None = None


class DataSlide(_SlideBase):
    type: Literal["data"]
    title: NonEmptyStr
    data: Union[ChartDataset, list[dict[str, Any]], list[list[Any]]]
    data_type: Literal["table", "chart"]
    chart_type: Literal["bar", "line", "area", "pie", "doughnut", "scatter"] = "bar"


class QuoteSlide(_SlideBase):
    type: Literal["quote"]
    quote: NonEmptyStr
    author: NonEmptyStr
    context: str | None = None


class TimelineEvent(_Model):
    date: str
    title: str
    description: str | None = None
    quarter: str | None = None
    milestone: bool = False
    status: Literal["planned", "in-progress", "completed"] | None = None
    progress: float | None = Field(default=None, ge=0, le=100)


class TimelineSlide(_SlideBase):
    type: Literal["timeline"]
    title: NonEmptyStr
    events: list[TimelineEvent] = Field(default_factory=list)
    orientation: Literal["horizontal", "vertical"] = "horizontal"
    mode: Literal["timeline", "roadmap"] = "timeline"
    show_progress: bool = False
    group_by: Literal["none", "quarter", "month", "year"] = "none"


class ComparisonSlide(_SlideBase):
    type: Literal["comparison"]
    title: NonEmptyStr
    left_title: str = ""
    left_content: list[str] = Field(default_factory=list)
    right_title: str = ""
    right_content: list[str] = Field(default_factory=list)


class ProcessStep(_Model):
    title: str
    description: str | None = None


class ProcessSlide(_SlideBase):
    type: Literal["process"]
    title: NonEmptyStr
    steps: list[ProcessStep]
    layout: Literal["horizontal", "vertical", "grid"] = "horizontal"


class SectionHeaderSlide(_SlideBase):
    type: Literal["section-header"]
    title: NonEmptyStr
    subtitle: str | None = None


class BlankSlide(_SlideBase):
    type: Literal["blank"]
    content: str | None = None


class CallToAction(_Model):
    text: str
    url: UrlRef | None = None


class HeroSlide(_SlideBase):
    type: Literal["hero"]
    title: NonEmptyStr
    subtitle: str | None = None
    background_image: UrlRef | None = None
    background_gradient: str | None = None
    background_pattern: PatternKind | None = None
    call_to_action: CallToAction | None = None


class ColumnBlock(_Model):
    type: Literal["text", "image", "list"]
    content: TextOrList

    @field_validator("content")
    @classmethod
    def _image_urls(cls, v: TextOrList, info: ValidationInfo) -> TextOrList:
        if info.data.get("type") != "image":
            return v
        urls = [v] if isinstance(v, str) else v
        if not urls:
            raise ValueError("an image column needs a URL")
        for url in urls:
            _check_url(url)
        return v


class TwoColumnSlide(_SlideBase):
    type: Literal["two-column"]
    title: str | None = None
    left_column: ColumnBlock
    right_column: ColumnBlock
    column_ratio: Literal["50-50", "60-40", "40-60", "70-30", "30-70"] = "50-50"


class Column(_Model):
    heading: str | None = None
    icon: str | None = None
    content: TextOrList


class ThreeColumnSlide(_SlideBase):
    type: Literal["three-column"]
    title: str | None = None
    columns: list[Column] = Field(min_length=3, max_length=3)


class FourColumnSlide(_SlideBase):
    type: Literal["four-column"]
    title: str | None = None
    columns: list[Column] = Field(min_length=4, max_length=4)


class MetricChange(_Model):
    value: float
    direction: Literal["up", "down"]


class Metric(_Model):
    label: str
    value: str | float
    change: MetricChange | None = None


class MetricsChart(_Model):
    type: Literal["line", "bar", "pie", "area"]
    data: ChartDataset


class ChartWithMetricsSlide(_SlideBase):
    type: Literal["chart-with-metrics"]
    title: NonEmptyStr
    chart: MetricsChart
    metrics: list[Metric] = Field(default_factory=list)
    layout: Literal["chart-left", "chart-right", "chart-top"] = "chart-left"


class Pricing(_Model):
    price: str
    period: str | None = None
    cta: str | None = None


class ProductOverviewSlide(_SlideBase):
    type: Literal["product-overview"]
    title: NonEmptyStr
    product_image: UrlRef | None = None
    description: str | None = None
    features: list[str] = Field(min_length=1)
    pricing: Pricing | None = None
    layout: Literal["image-left", "image-right", "image-top"] = "image-left"


class GridItem(_Model):
    title: str
    description: str | None = None
    icon: str | None = None
    image: UrlRef | None = None


class GridSlide(_SlideBase):
    type: Literal["grid"]
    title: str | None = None
    subtitle: str | None = None
    items: list[GridItem] = Field(min_length=1)
    grid_type: Literal["2x2", "3x3", "2x3", "4x2", "auto"] = "auto"
    gap: Literal["compact", "normal", "spacious"] = "normal"


class FeatureCard(_Model):
    title: str
    description: str
    icon: str | None = None
    highlight: bool = False


class FeatureCardsSlide(_SlideBase):
    type: Literal["feature-cards"]
    title: str | None = None
    subtitle: str | None = None
    features: list[FeatureCard] = Field(min_length=1)
    columns: Literal[2, 3, 4, "auto"] = "auto"
    gap: Literal["compact", "normal", "spacious"] = "normal"


class SocialLinks(_Model):
    linkedin: UrlRef | None = None
    twitter: UrlRef | None = None
    github: UrlRef | None = None


class TeamMember(_Model):
    name: NonEmptyStr
    role: str
    bio: str | None = None
    photo: UrlRef | None = None
    social: SocialLinks | None = None


class TeamSlide(_SlideBase):
    type: Literal["team"]
    title: str | None = None
    members: list[TeamMember] = Field(min_length=1)
    layout: Literal["grid", "carousel", "highlight"] = "grid"


class PricingPlan(_Model):
    name: NonEmptyStr
    price: str | float
    period: str = "per month"
    features: list[str] = Field(default_factory=list)
    cta: str = "Get Started"
    recommended: bool = False


class PricingSlide(_SlideBase):
    type: Literal["pricing"]
    title: str | None = None
    plans: list[PricingPlan] = Field(min_length=1)
    highlight: int | None = Field(default=None, ge=0)


class CodeSlide(_SlideBase):
    type: Literal["code"]
    title: str | None = None
    code: str
    language: str = "text"
    filename: str | None = None
    highlights: list[int] = Field(default_factory=list)
    theme: Literal["dark", "light"] = "dark"


SLIDE_MODELS: dict[SlideKind, type[_SlideBase]] = {
    SlideKind.TITLE: TitleSlide,
    SlideKind.CONTENT: ContentSlide,
    SlideKind.MEDIA: MediaSlide,
    SlideKind.DATA: DataSlide,
    SlideKind.QUOTE: QuoteSlide,
    SlideKind.TIMELINE: TimelineSlide,
    SlideKind.COMPARISON: ComparisonSlide,
    SlideKind.PROCESS: ProcessSlide,
    SlideKind.SECTION_HEADER: SectionHeaderSlide,
    SlideKind.BLANK: BlankSlide,
    SlideKind.HERO: HeroSlide,
    SlideKind.TWO_COLUMN: TwoColumnSlide,
    SlideKind.THREE_COLUMN: ThreeColumnSlide,
    SlideKind.FOUR_COLUMN: FourColumnSlide,
    SlideKind.CHART_WITH_METRICS: ChartWithMetricsSlide,
    SlideKind.PRODUCT_OVERVIEW: ProductOverviewSlide,
    SlideKind.GRID: GridSlide,
    SlideKind.FEATURE_CARDS: FeatureCardsSlide,
    SlideKind.TEAM: TeamSlide,
    SlideKind.PRICING: PricingSlide,
    SlideKind.CODE: CodeSlide,
}

Slide = Annotated[
    Union[
        TitleSlide, ContentSlide, MediaSlide, DataSlide, QuoteSlide,
        TimelineSlide, ComparisonSlide, ProcessSlide, SectionHeaderSlide,
        BlankSlide, HeroSlide, TwoColumnSlide, ThreeColumnSlide,
        FourColumnSlide, ChartWithMetricsSlide, ProductOverviewSlide,
        GridSlide, FeatureCardsSlide, TeamSlide, PricingSlide, CodeSlide,
    ],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------

class GenerationOptions(_Model):
    """Per-call or per-spec overrides; ``None`` means "not set at this layer"."""
    aspect_ratio: Literal["16:9", "4:3"] | None = None
    font_size: Literal["default", "large", "xlarge"] | None = None
    minify: bool | None = None
    include_styles: bool | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "includeStyles", "include_styles", "includeSlideyUICSS", "embedStyles",
        ),
        serialization_alias="includeStyles",
    )
    embed_fonts: bool | None = None
    theme: str | None = None


class PresentationMetadata(_Model):
    author: str | None = None
    date: str | None = None
    version: str | None = None
    description: str | None = None
    tags: list[str] = Field(default_factory=list)


class PresentationSpec(_Model):
    """A validated presentation.

    Pass ``context={"themes": <names>}`` to ``model_validate`` to have the
    theme id checked against a registry.
    """
    theme: NonEmptyStr
    title: NonEmptyStr
    slides: list[Slide]
    options: GenerationOptions | None = None
    metadata: PresentationMetadata | None = None

    @field_validator("slides")
    @classmethod
    def _at_least_one(cls, v: list) -> list:
        if not v:
            raise ValueError("at least one slide required")
        return v

    @field_validator("theme")
    @classmethod
    def _known_theme(cls, v: str, info: ValidationInfo) -> str:
        themes = (info.context or {}).get("themes")
        if themes is not None and v not in themes:
            raise ValueError(
                f"unknown theme {v!r}; expected one of {', '.join(sorted(themes))}"
            )
        return v
