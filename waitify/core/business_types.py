"""
Per-industry feature panels.

Each business type carries a fixed list of feature cards shown on the
dashboard and the industry features page. Unknown types fall back to
GENERIC.
"""
from enum import Enum
from typing import TypedDict


class FeatureCard(TypedDict):
    title: str
    description: str
    icon: str


class BusinessType(str, Enum):
    RESTAURANT = "restaurant"
    SALON = "salon"
    CLINIC = "clinic"
    GENERIC = "generic"

    @classmethod
    def resolve(cls, value: str | None) -> "BusinessType":
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.GENERIC

    @property
    def features(self) -> list[FeatureCard]:
        return BUSINESS_FEATURES[self]


BUSINESS_FEATURES: dict[BusinessType, list[FeatureCard]] = {
    BusinessType.RESTAURANT: [
        {
            "title": "Table Management",
            "description": "Design your floor plan and track table status in real time",
            "icon": "utensils",
        },
        {
            "title": "Digital Waitlist",
            "description": "Let guests join by QR code and wait from anywhere",
            "icon": "list-ordered",
        },
        {
            "title": "Customer Notifications",
            "description": "Tell guests the moment their table is ready",
            "icon": "bell",
        },
    ],
    BusinessType.SALON: [
        {
            "title": "Appointment Scheduling",
            "description": "Online booking for every service you offer",
            "icon": "calendar",
        },
        {
            "title": "Stylist Management",
            "description": "Manage stylist schedules and specialties",
            "icon": "scissors",
        },
        {
            "title": "Client History",
            "description": "Keep preferences and past visits at hand",
            "icon": "history",
        },
    ],
    BusinessType.CLINIC: [
        {
            "title": "Patient Management",
            "description": "Patient records, history and prescriptions in one place",
            "icon": "stethoscope",
        },
        {
            "title": "Appointment Scheduling",
            "description": "Book patients with the right practitioner",
            "icon": "calendar",
        },
        {
            "title": "Digital Queue",
            "description": "Replace the waiting room with a live queue",
            "icon": "users",
        },
    ],
    BusinessType.GENERIC: [
        {
            "title": "Queue Management",
            "description": "Run walk-in queues without paper lists",
            "icon": "list-ordered",
        },
        {
            "title": "Customer Management",
            "description": "Know who visits and how often",
            "icon": "users",
        },
        {
            "title": "Notifications",
            "description": "Reach customers by email or SMS",
            "icon": "bell",
        },
    ],
}
