"""
Wedding invite microsite Pydantic models
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Union


class Theme(BaseModel):
    """Microsite colors, each a CSS color string"""
    titleColor: str = ""
    nameColor: str = ""
    buttonColor: str = ""
    buttonHoverColor: str = ""

    @classmethod
    def single_color(cls, color: str) -> "Theme":
        return cls(titleColor=color, nameColor=color, buttonColor=color, buttonHoverColor=color)


class InviteSection(BaseModel):
    """Hero section of the microsite"""
    title: str = ""
    names: str = ""
    leftImage: str = ""
    rightImage: str = ""
    linkHref: str = ""
    linkText: str = ""


class Person(BaseModel):
    model_config = ConfigDict(extra="allow")
    name: str = ""
    description: str = ""
    image: str = ""
    socials: Dict[str, str] = {}  # {network: url}


class AboutSection(BaseModel):
    subtitle: str = ""
    title: str = ""
    groom: Person = Person()
    bride: Person = Person()
    coupleImage: str = ""


class WeddingDay(BaseModel):
    backgroundColor: str = ""
    headingTop: str = ""
    headingMain: str = ""
    date: str = ""
    images: List[str] = Field(default_factory=list, max_length=3)
    createdOn: Optional[str] = None
    updatedOn: Optional[str] = None


class LoveStoryItem(BaseModel):
    id: Union[int, str]
    date: str = ""
    title: str = ""
    description: str = ""
    image: str = ""


class LoveStorySection(BaseModel):
    sectionTitle: str = ""
    sectionSubtitle: str = ""
    stories: List[LoveStoryItem] = []


class EventItem(BaseModel):
    """A single ceremony/reception entry in the planning section"""
    model_config = ConfigDict(extra="allow")
    id: Union[int, str]
    type: str = ""
    date: str = ""
    venue: str = ""
    time: str = ""
    phone: str = ""
    icon: str = ""


class PlanningSection(BaseModel):
    mapIframeUrl: str = ""
    title: str = ""
    subtitle: str = ""
    events: List[EventItem] = []


class RsvpSection(BaseModel):
    """RSVP page chrome"""
    backgroundImage: str = ""


class FooterSection(BaseModel):
    backgroundImage: str = ""
    coupleNames: str = ""
    subtitle: str = ""
    socials: Dict[str, str] = {}


class WeddingInvite(BaseModel):
    """Full wedding microsite content document"""
    model_config = ConfigDict(extra="ignore")
    id: Optional[str] = None
    theme: Theme = Theme()
    invite: InviteSection = InviteSection()
    about: AboutSection = AboutSection()
    weddingDay: WeddingDay = WeddingDay()
    loveStory: LoveStorySection = LoveStorySection()
    planning: PlanningSection = PlanningSection()
    rsvp: RsvpSection = RsvpSection()
    footer: FooterSection = FooterSection()
    isEnabled: bool = True


class InviteStatusUpdate(BaseModel):
    isEnabled: bool


class InviteThemeUpdate(BaseModel):
    theme: Theme


class InviteEventUpdate(BaseModel):
    """Replace the event at eventIndex, or append when no index is given"""
    eventData: EventItem
    eventIndex: Optional[int] = None
