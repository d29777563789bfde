# Models package
from .invite import (
    WeddingInvite, Theme, InviteSection, Person, AboutSection, WeddingDay,
    LoveStoryItem, LoveStorySection, EventItem, PlanningSection,
    RsvpSection, FooterSection,
    InviteStatusUpdate, InviteThemeUpdate, InviteEventUpdate
)
from .rsvp import RsvpStatus, RsvpResponse, RsvpStatusChange, RsvpStats
