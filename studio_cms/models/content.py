"""
Content schemas for the site's JSON documents.

Each resource kind (hero, work, process, story, locations, contact, faq) has a
top-level document model. Document models reject unknown keys; nested objects
and collection items drop them. Keys are camelCase on the wire.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints
from pydantic.alias_generators import to_camel

IMAGE_PATH_PATTERN = r"(?i)^(?:/images/[a-zA-Z0-9_\-/.\s]+\.(?:jpg|jpeg|png|gif|webp))?$"
URL_PATTERN = r"^https?://\S+$"
PHONE_PATTERN = r"^[+]?[1-9][\d\s\-()]{0,20}$"

Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=1000)]
OptionalText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=1000)]
ShortText = Annotated[str, StringConstraints(max_length=50)]
ImageRef = Annotated[str, StringConstraints(min_length=1, max_length=2000)]
ImagePath = Annotated[str, StringConstraints(strip_whitespace=True, max_length=2000, pattern=IMAGE_PATH_PATTERN)]
Url = Annotated[str, StringConstraints(strip_whitespace=True, max_length=2000, pattern=URL_PATTERN)]
ItemId = Annotated[int, Field(gt=0)]
Order = Annotated[int, Field(ge=0)]
Year = Annotated[int, Field(ge=1900, le=2030)]

WorkCategory = Literal["EDITORIAL", "FILM & TV", "THEATRE", "CONCERT", "MUSIC VIDEO", "LIVE"]
Alignment = Literal["left", "right"]


class ContentModel(BaseModel):
    """Nested object or collection item: unknown keys are stripped"""

    model_config = ConfigDict(alias_generator=to_camel, extra="ignore")


class ContentDocument(ContentModel):
    """Top-level document: unknown keys are rejected"""

    model_config = ConfigDict(extra="forbid")

    id: Optional[ItemId] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# --- Shared building blocks ---

class Transform(ContentModel):
    scale: float = Field(default=1, ge=0.1, le=5)
    translate_x: float = Field(default=0, ge=-200, le=200)
    translate_y: float = Field(default=0, ge=-200, le=200)
    flip: bool = False


class Position(ContentModel):
    top: Optional[ShortText] = None
    bottom: Optional[ShortText] = None
    left: Optional[ShortText] = None
    right: Optional[ShortText] = None


class PageBanner(ContentModel):
    title: Text
    subtitle: OptionalText = ""
    desktop_image: ImagePath
    mobile_image: ImagePath
    transform: Transform


# --- Hero ---

class SizeSetting(ContentModel):
    scale: float = Field(default=1, ge=0.1, le=5)
    unit: str = "rem"


class HeroBanner(ContentModel):
    logo_size: Optional[SizeSetting] = None
    title_size: Optional[SizeSetting] = None


class HeroTransform(ContentModel):
    scale: float = Field(default=1, ge=0.1, le=5)
    translate_x: float = Field(default=0, ge=-500, le=500)
    translate_y: float = Field(default=0, ge=-500, le=500)
    flip: bool = False


class BackgroundImage(ContentModel):
    image: ImageRef
    alt: Text
    transform: Optional[HeroTransform] = None


class HeroPolaroid(ContentModel):
    image: ImageRef
    alt: Text
    rotation: float = Field(default=0, ge=-45, le=45)
    position: Optional[Dict[str, Any]] = None


class BannerHeight(ContentModel):
    min: float = Field(default=400, ge=100, le=2000)
    preferred: float = Field(default=45, ge=10, le=200)
    max: float = Field(default=800, ge=200, le=3000)


class HeroDocument(ContentDocument):
    title: Text
    subtitle: OptionalText = ""
    atelier_title: Text
    atelier_description: Text
    banner: Optional[HeroBanner] = None
    background_images: Optional[List[BackgroundImage]] = Field(default=None, max_length=10)
    polaroids: Optional[List[HeroPolaroid]] = Field(default=None, max_length=10)
    banner_height: Optional[BannerHeight] = None


# --- Work ---

class WorkProject(ContentModel):
    id: Optional[ItemId] = None
    title: Text
    client: Text
    category: WorkCategory
    year: Year
    image: ImagePath
    alt: OptionalText = ""
    description: OptionalText = ""
    featured: bool = False
    order: Order = 0


class SectionBanner(ContentModel):
    category: WorkCategory
    image: ImagePath
    transform: Transform


class WorkDocument(ContentDocument):
    banner: PageBanner
    section_banners: List[SectionBanner] = Field(default_factory=list, max_length=10)
    projects: List[WorkProject] = Field(max_length=50)


# --- Process ---

class ProcessStep(ContentModel):
    id: Optional[ItemId] = None
    title: Text
    description: Text
    image: ImagePath
    alt: Text
    alignment: Alignment
    order: Order = 0


class HeadingScale(ContentModel):
    mobile: float = Field(default=1, ge=0.5, le=2)
    desktop: float = Field(default=1, ge=0.5, le=2)


class ProcessBanner(PageBanner):
    circle_scale: float = Field(default=1, ge=0.5, le=2)
    heading_scale: HeadingScale = Field(default_factory=HeadingScale)


class TeamCircles(ContentModel):
    size: float = Field(default=1, ge=0.5, le=3)
    stroke_width: float = Field(default=2, ge=1, le=10)
    gap: float = Field(default=10, ge=0, le=50)
    position: Position = Field(default_factory=Position)


class ProcessDocument(ContentDocument):
    banner: ProcessBanner
    team_circles: TeamCircles = Field(default_factory=TeamCircles)
    process_steps: List[ProcessStep] = Field(max_length=20)


# --- Story ---

class DevicePosition(ContentModel):
    desktop: Position
    mobile: Position


class StoryItemPosition(DevicePosition):
    transform: Optional[Transform] = None


class DeviceRotation(ContentModel):
    desktop: float = Field(default=0, ge=-180, le=180)
    mobile: float = Field(default=0, ge=-180, le=180)


class DeviceFontSize(ContentModel):
    desktop: Text
    mobile: Text


class DeviceVisibility(ContentModel):
    desktop: bool = True
    mobile: bool = True


class PolaroidContent(ContentModel):
    image: ImagePath
    alt: Text
    year: Optional[Year] = None


class TextContent(ContentModel):
    content: Text
    font: Text = "default"
    rotation: float = Field(default=0, ge=-45, le=45)
    font_size: float = Field(default=16, ge=10, le=72)


class ButtonContent(ContentModel):
    text: Text
    action: Text
    href: Optional[Url] = None


class StoryItemBase(ContentModel):
    id: Optional[ItemId] = None
    position: StoryItemPosition
    rotation: Optional[DeviceRotation] = None
    font_size: Optional[DeviceFontSize] = None
    visibility: DeviceVisibility = Field(default_factory=DeviceVisibility)


class PolaroidStoryItem(StoryItemBase):
    type: Literal["polaroid"]
    content: PolaroidContent


class TextStoryItem(StoryItemBase):
    type: Literal["text"]
    content: TextContent


class ButtonStoryItem(StoryItemBase):
    type: Literal["button"]
    content: ButtonContent


StoryItem = Annotated[
    Union[PolaroidStoryItem, TextStoryItem, ButtonStoryItem],
    Field(discriminator="type"),
]


class Dimensions(ContentModel):
    width: Text
    height: Text


class CircleSize(ContentModel):
    desktop: Dimensions
    mobile: Dimensions


class CircleContent(ContentModel):
    title: Text
    description: OptionalText = ""


class StoryCircle(ContentModel):
    id: Optional[ItemId] = None
    name: Text
    type: Literal["simple", "dashed_rotating", "mixed"]
    position: DevicePosition
    size: CircleSize
    content: CircleContent
    items: List[StoryItem] = Field(max_length=10)


class StoryDocument(ContentDocument):
    circles: List[StoryCircle] = Field(max_length=20)


# --- Locations ---

class Location(ContentModel):
    id: Optional[ItemId] = None
    name: Text
    address: Text
    image: ImagePath
    alt: Text
    google_maps_url: Optional[Url] = None
    variant: Alignment = "left"
    order: Order = 0


class AnimationSettings(ContentModel):
    delay: float = Field(default=0, ge=0, le=5000)
    duration: float = Field(default=1000, ge=100, le=10000)
    circle_count: int = Field(default=3, ge=1, le=20)


class LocationsBanner(ContentModel):
    title: Text
    animation_settings: AnimationSettings = Field(default_factory=AnimationSettings)


class LocationsDocument(ContentDocument):
    banner: LocationsBanner
    locations: List[Location] = Field(max_length=10)


# --- Contact ---

class ContactEmails(ContentModel):
    brooklyn: EmailStr
    beverly_hills: EmailStr
    press: EmailStr


class ContactDocument(ContentDocument):
    emails: ContactEmails
    phone: Annotated[str, StringConstraints(strip_whitespace=True, pattern=PHONE_PATTERN)]
    locations: List[Location] = Field(default_factory=list, max_length=10)


# --- FAQ ---

class FAQItem(ContentModel):
    id: Optional[ItemId] = None
    question: Text
    answer: Text
    category: OptionalText = "general"
    order: Order = 0


class BannerImages(ContentModel):
    desktop: ImagePath
    mobile: ImagePath


class FAQBanner(ContentModel):
    background_image: BannerImages
    height: Annotated[str, StringConstraints(min_length=1)]
    object_position: Annotated[str, StringConstraints(min_length=1)]
    transform: Transform


class FAQDocument(ContentDocument):
    banner: FAQBanner
    items: List[FAQItem] = Field(max_length=50)
