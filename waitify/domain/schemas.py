from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, List
from datetime import datetime

ENTRY_STATUS = r'^(waiting|notified|seated|cancelled)$'
TABLE_STATUS = r'^(available|occupied|reserved)$'
APPOINTMENT_STATUS = r'^(scheduled|completed|cancelled|no-show)$'
INVOICE_STATUS = r'^(draft|sent|paid|overdue|cancelled)$'
ROLE = r'^(admin|business|customer)$'
TIME_OF_DAY = r'^\d{2}:\d{2}(:\d{2})?$'


# ============================================
# Profile Schemas
# ============================================

class ProfileCreate(BaseModel):
    """Completes registration for a freshly signed-up auth user."""
    role: str = Field(default="customer", pattern=r'^(business|customer)$')
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    business_name: Optional[str] = None
    business_type: Optional[str] = None


class ProfileUpdate(BaseModel):
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    business_name: Optional[str] = None
    business_type: Optional[str] = None


class ProfileResponse(BaseModel):
    id: str
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    avatar_url: Optional[str] = None
    role: str
    business_name: Optional[str] = None
    business_type: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RoleUpdate(BaseModel):
    role: str = Field(..., pattern=ROLE)


# ============================================
# Waitlist Schemas
# ============================================

class WaitlistCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    max_capacity: Optional[int] = Field(default=None, ge=1)
    is_active: bool = True


class WaitlistUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    max_capacity: Optional[int] = Field(default=None, ge=1)
    is_active: Optional[bool] = None


class WaitlistEntryCreate(BaseModel):
    """Entry added by the business (walk-in) or by a signed-in customer."""
    user_id: Optional[str] = None
    guest_name: Optional[str] = None
    guest_phone: Optional[str] = None
    guest_party_size: Optional[int] = Field(default=None, ge=1, le=20)
    estimated_wait_time: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


class WaitlistEntryUpdate(BaseModel):
    status: Optional[str] = Field(default=None, pattern=ENTRY_STATUS)
    estimated_wait_time: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


class GuestJoin(BaseModel):
    """Public join form on /join-waitlist/:id."""
    name: str = Field(..., min_length=2, max_length=100)
    party_size: int = Field(default=1, ge=1, le=20)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


# ============================================
# Notification Schemas
# ============================================

class NotificationSend(BaseModel):
    """Body of POST /notifications/send (camelCase as sent by the web app)."""
    model_config = ConfigDict(populate_by_name=True)

    action: Optional[str] = None
    user_id: str = Field(..., alias="userId")
    message: Optional[str] = None
    type: str = "general"
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    subject: Optional[str] = None
    waitlist_id: Optional[str] = Field(default=None, alias="waitlistId")
    entry_id: Optional[str] = Field(default=None, alias="entryId")


# ============================================
# Billing Schemas
# ============================================

class CheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    plan_id: str = Field(..., alias="planId")


class UrlResponse(BaseModel):
    url: str


# ============================================
# Restaurant Schemas
# ============================================

class TableCreate(BaseModel):
    number: int = Field(..., ge=1)
    capacity: int = Field(..., ge=1)
    shape: str = Field(default="square", pattern=r'^(square|round|rectangle)$')
    x: float = 0
    y: float = 0
    width: float = 80
    height: float = 80
    rotation: float = 0


class TableUpdate(BaseModel):
    number: Optional[int] = Field(default=None, ge=1)
    capacity: Optional[int] = Field(default=None, ge=1)
    shape: Optional[str] = Field(default=None, pattern=r'^(square|round|rectangle)$')
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    rotation: Optional[float] = None
    status: Optional[str] = Field(default=None, pattern=TABLE_STATUS)


class ReservationCreate(BaseModel):
    table_id: str
    customer_name: str = Field(..., min_length=1)
    date: str
    time: str = Field(..., pattern=TIME_OF_DAY)
    party_size: int = Field(..., ge=1)
    notes: Optional[str] = None


# ============================================
# Clinic Schemas
# ============================================

class DayAvailability(BaseModel):
    start: str = Field(..., pattern=TIME_OF_DAY)
    end: str = Field(..., pattern=TIME_OF_DAY)
    isAvailable: bool = True


class PractitionerCreate(BaseModel):
    name: str = Field(..., min_length=1)
    specialization: Optional[str] = None
    bio: Optional[str] = None
    availability: dict[str, DayAvailability] = {}


class PractitionerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    specialization: Optional[str] = None
    bio: Optional[str] = None
    availability: Optional[dict[str, DayAvailability]] = None


class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    duration: int = Field(default=30, ge=1)
    price: float = Field(default=0, ge=0)


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=1)
    price: Optional[float] = Field(default=None, ge=0)


class PatientCreate(BaseModel):
    """Clinic record for an existing customer profile."""
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[str] = None
    medical_history: Optional[str] = None
    allergies: Optional[str] = None
    emergency_contact: Optional[str] = None
    preferred_practitioner_id: Optional[str] = None
    notes: Optional[str] = None


class PatientUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[str] = None
    medical_history: Optional[str] = None
    allergies: Optional[str] = None
    emergency_contact: Optional[str] = None
    preferred_practitioner_id: Optional[str] = None
    notes: Optional[str] = None


class AppointmentCreate(BaseModel):
    patient_id: str
    practitioner_id: str
    service_id: str
    date: str
    start_time: str = Field(..., pattern=TIME_OF_DAY)
    end_time: Optional[str] = Field(default=None, pattern=TIME_OF_DAY)
    notes: Optional[str] = None


class AppointmentBooking(BaseModel):
    """A signed-in customer booking for themselves."""
    business_id: str
    practitioner_id: str
    service_id: str
    date: str
    start_time: str = Field(..., pattern=TIME_OF_DAY)
    notes: Optional[str] = None


class AppointmentUpdate(BaseModel):
    practitioner_id: Optional[str] = None
    service_id: Optional[str] = None
    date: Optional[str] = None
    start_time: Optional[str] = Field(default=None, pattern=TIME_OF_DAY)
    end_time: Optional[str] = Field(default=None, pattern=TIME_OF_DAY)
    notes: Optional[str] = None
    prescription_notes: Optional[str] = None


class AppointmentStatusUpdate(BaseModel):
    status: str = Field(..., pattern=APPOINTMENT_STATUS)


class InvoiceItem(BaseModel):
    description: str
    quantity: int = Field(default=1, ge=1)
    unit_price: float = Field(..., ge=0)


class InvoiceCreate(BaseModel):
    patient_id: str
    patient_name: Optional[str] = None
    invoice_date: str
    due_date: Optional[str] = None
    items: List[InvoiceItem] = Field(..., min_length=1)
    status: str = Field(default="draft", pattern=INVOICE_STATUS)
    notes: Optional[str] = None


class InvoiceStatusUpdate(BaseModel):
    status: str = Field(..., pattern=INVOICE_STATUS)


# ============================================
# Location & Staff Schemas
# ============================================

class LocationCreate(BaseModel):
    name: str = Field(..., min_length=1)
    address: Optional[str] = None
    phone: Optional[str] = None


class LocationUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    address: Optional[str] = None
    phone: Optional[str] = None


class StaffCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    role: str = "staff"
    phone: Optional[str] = None
    location_id: Optional[str] = None


class StaffUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    role: Optional[str] = None
    phone: Optional[str] = None
    location_id: Optional[str] = None


# ============================================
# QR & Routing Schemas
# ============================================

class QRCodeResponse(BaseModel):
    url: str
    qr_code: str  # PNG data URL


class QRResolveRequest(BaseModel):
    payload: str


class RouteResolveResponse(BaseModel):
    action: str
    shell: str
    redirect_to: Optional[str] = None
