"""
Content Schemas for the Portfolio API

Each Pydantic model mirrors one JSON content file (or one record inside it)
under the content directory. Field names follow the JSON keys.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Literal, Optional, Union

ContentKey = Literal["home", "cv", "portfolio"]
Lang = Literal["zh", "en"]


class ContentModel(BaseModel):
    # content files are hand-edited; keep keys we don't model
    model_config = ConfigDict(extra="allow")


# =====
# Works
# =====
class WorkLink(ContentModel):
    name: Optional[str] = None
    link: Optional[str] = None

class CoWorker(ContentModel):
    name: Optional[str] = None
    work: Optional[str] = None
    link: Optional[str] = None

class WorkDetail(ContentModel):
    fullName: Optional[str] = None
    h2Name: Optional[str] = None
    tableName: Optional[str] = None
    yearBegin: Optional[str] = None
    yearEnd: Optional[str] = None
    intro: Optional[str] = None
    introList: List[str] = []
    headPic: Optional[str] = None
    tags: List[str] = []
    links: List[WorkLink] = []
    coWorkers: List[CoWorker] = []
    content: Optional[str] = None
    # English fields
    fullNameEn: Optional[str] = None
    h2NameEn: Optional[str] = None
    tableNameEn: Optional[str] = None
    introEn: Optional[str] = None
    introListEn: List[str] = []
    tagsEn: List[str] = []

class PortfolioItem(BaseModel):
    code: str
    name: str
    category: str
    detail: WorkDetail

class PortfolioCategory(BaseModel):
    name: str
    items: List[PortfolioItem] = []
    itemsMap: Dict[str, PortfolioItem] = {}


# ===============
# Route / profile
# ===============
class BlobConfig(ContentModel):
    id: str
    label: str
    size: Literal["large", "small"] = "small"
    x: str  # CSS percentage relative to the blob container
    y: str
    width: Optional[str] = None
    color: Optional[str] = None  # large blobs only
    animDuration: Optional[float] = None  # seconds
    animDelay: Optional[float] = None

class HomeConfig(ContentModel):
    badge: Optional[str] = None
    title: Optional[str] = None
    intro: Union[str, List[str], None] = None
    blobs: Optional[List[BlobConfig]] = None

class HomeContent(BaseModel):
    badge: str
    title: str
    intro: List[str]
    blobs: List[BlobConfig]

class FooterConfig(ContentModel):
    title: Optional[str] = None
    message: Optional[str] = None
    email: Optional[str] = None

class FooterContent(BaseModel):
    title: str
    message: str
    email: str

class CvRouteConfig(ContentModel):
    asset: Optional[str] = None
    link: Optional[str] = None
    showGroups: Optional[List[Optional[str]]] = None
    showTypes: Optional[List[Optional[str]]] = None

class CvSettings(BaseModel):
    downloadUrl: Optional[str] = None
    link: Optional[str] = None
    groups: Optional[List[str]] = None

class CategoryRef(ContentModel):
    code: str
    name: Optional[str] = None

CategoryEntry = Union[str, CategoryRef]


# ======
# Skills
# ======
class SkillTool(BaseModel):
    name: str
    description: Optional[str] = None
    image: Optional[str] = None

class SkillCategory(BaseModel):
    name: str
    tools: List[SkillTool]

class SkillGroup(BaseModel):
    title: str
    categories: List[SkillCategory]


class RouteEntry(ContentModel):
    siteTitle: Optional[str] = None
    sidebarTitle: Optional[str] = None
    siteTitleEn: Optional[str] = None
    sidebarTitleEn: Optional[str] = None
    lang: Optional[Lang] = None
    cv: Union[str, CvRouteConfig, None] = None
    categories: Optional[Dict[str, List[CategoryEntry]]] = None
    home: Optional[HomeConfig] = None
    blobs: Optional[List[BlobConfig]] = None
    footer: Optional[FooterConfig] = None
    cvSummary: Optional[List[Union[str, List[str]]]] = None
    skills: Optional[List[dict]] = None


class ResolvedProfile(BaseModel):
    categories: List[PortfolioCategory]
    portfolioItems: List[PortfolioItem]
    cvSettings: CvSettings
    homeContent: HomeContent
    footerContent: FooterContent
    siteTitle: str
    sidebarTitle: str
    cvSummary: Optional[List[Union[str, List[str]]]] = None
    routeSkills: Optional[List[SkillGroup]] = None
    lang: Lang


# ==
# CV
# ==
class ExperienceEntry(ContentModel):
    type: str = ""
    organisation: str = ""
    role: str = ""
    begin: str = ""
    end: str = ""
    description: str = ""
    relatedWorks: List[str] = []
    showDefault: bool = True
    showGroups: List[str] = []
    tags: List[str] = []

class ExperienceDataset(ContentModel):
    typeOrder: List[str] = []
    entries: List[ExperienceEntry] = []

class ExperienceRow(BaseModel):
    entry: ExperienceEntry
    dateRange: str
    duration: Optional[str] = None

class ExperienceGroup(BaseModel):
    type: str
    items: List[ExperienceRow]

class PublicationItem(BaseModel):
    title: str
    type: str = ""
    description: str = ""
    link: Optional[str] = None
    relatedWorks: List[str] = []

class PublicationGroup(BaseModel):
    title: str
    items: List[PublicationItem]

class PublishEntryRow(BaseModel):
    text: str
    type: str
    link: Optional[str] = None

class PublishBucketRow(BaseModel):
    code: Optional[str] = None
    workName: Optional[str] = None
    entries: List[PublishEntryRow]

class PublishCategoryRow(BaseModel):
    title: str
    tags: List[str]
    totalRows: int
    buckets: List[PublishBucketRow]


# =====
# Admin
# =====
class SaveFileRequest(BaseModel):
    content: str
    baseVersion: Optional[str] = Field(default=None, description="ETag the edit was based on")

class ValidationResult(BaseModel):
    valid: bool
    message: Optional[str] = None
