# disaster_response/models.py
# ------------------------------------------------------------
# Core domain models for the disaster response backend
# ------------------------------------------------------------

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime, timezone
from enum import Enum
import uuid


# -------------------------------
# Shared helpers
# -------------------------------
def utcnow() -> datetime:
    """
    Always return timezone-aware UTC datetime.
    """
    return datetime.now(timezone.utc)


def epoch_ms(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def new_alert_id(now: datetime) -> str:
    """
    Timestamp plus random suffix.
    Example: alert-1760870400000-3f9a1c2b7
    """
    return f"alert-{epoch_ms(now)}-{uuid.uuid4().hex[:9]}"


def new_report_id(now: datetime) -> str:
    """
    Example: DR-1760870400000-A3F91C
    """
    return f"DR-{epoch_ms(now)}-{uuid.uuid4().hex[:6].upper()}"


# numeric models accept finite values only (no NaN / Infinity)
FINITE = ConfigDict(allow_inf_nan=False)


# -------------------------------
# Closed enumerations
# -------------------------------
class SensorType(str, Enum):
    SEISMIC = "seismic"
    WEATHER = "weather"
    AIR_QUALITY = "air_quality"
    WATER_LEVEL = "water_level"
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    PRESSURE = "pressure"
    WIND_SPEED = "wind_speed"


class SensorStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"
    ERROR = "error"


class ReadingQuality(str, Enum):
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class Classification(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class AlertType(str, Enum):
    EARTHQUAKE = "earthquake"
    FLOOD = "flood"
    STORM = "storm"
    FIRE = "fire"
    POLLUTION = "pollution"
    HEATWAVE = "heatwave"
    OTHER = "other"


class AlertSeverity(str, Enum):
    # moderate/info exist for manually created alerts only
    CRITICAL = "critical"
    WARNING = "warning"
    MODERATE = "moderate"
    INFO = "info"


class TeamAssignmentStatus(str, Enum):
    DISPATCHED = "dispatched"
    ENROUTE = "enroute"
    ONSCENE = "onscene"
    COMPLETED = "completed"


class TeamType(str, Enum):
    FIRE = "fire"
    MEDICAL = "medical"
    RESCUE = "rescue"
    POLICE = "police"
    HAZMAT = "hazmat"
    COORDINATION = "coordination"


class TeamStatus(str, Enum):
    AVAILABLE = "available"
    DEPLOYED = "deployed"
    BUSY = "busy"
    MAINTENANCE = "maintenance"


class AssignmentPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ReportType(str, Enum):
    EARTHQUAKE = "earthquake"
    FLOOD = "flood"
    FIRE = "fire"
    STORM = "storm"
    LANDSLIDE = "landslide"
    ACCIDENT = "accident"
    BUILDING_COLLAPSE = "building_collapse"
    GAS_LEAK = "gas_leak"
    WATER_LOGGING = "water_logging"
    TREE_FALL = "tree_fall"
    POWER_OUTAGE = "power_outage"
    ROAD_BLOCK = "road_block"
    OTHER = "other"


class ReportSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ReportStatus(str, Enum):
    REPORTED = "reported"
    VERIFIED = "verified"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    FALSE_ALARM = "false_alarm"


class ReportResponseType(str, Enum):
    UPDATE = "update"
    QUESTION = "question"
    RESOLUTION = "resolution"


class ReportTeamStatus(str, Enum):
    ASSIGNED = "assigned"
    DISPATCHED = "dispatched"
    ON_SITE = "on_site"
    COMPLETED = "completed"


# -------------------------------
# Location
# -------------------------------
class Coordinates(BaseModel):
    model_config = FINITE

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class SensorLocation(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    coordinates: Coordinates


# -------------------------------
# Sensor
# -------------------------------
class Thresholds(BaseModel):
    """
    critical is expected to be >= warning, but that is not enforced.
    """

    model_config = FINITE

    warning: float
    critical: float


class Reading(BaseModel):
    model_config = FINITE

    value: float
    timestamp: datetime = Field(default_factory=utcnow)
    # informational only, never affects classification
    quality: ReadingQuality = ReadingQuality.GOOD


class CurrentReading(BaseModel):
    model_config = FINITE

    value: float
    timestamp: datetime
    status: Classification = Classification.NORMAL


class Calibration(BaseModel):
    model_config = FINITE

    last_calibrated: Optional[datetime] = None
    calibration_factor: float = 1.0


class SensorConfig(BaseModel):
    """
    A configured source of periodic readings.
    Only `active` sensors take part in the simulation tick.
    """

    sensor_id: str = Field(min_length=3, max_length=30)
    type: SensorType
    unit: str = Field(min_length=1, max_length=20)
    thresholds: Thresholds
    location: SensorLocation

    status: SensorStatus = SensorStatus.ACTIVE
    current_reading: Optional[CurrentReading] = None
    calibration: Calibration = Field(default_factory=Calibration)

    created_at: datetime = Field(default_factory=utcnow)


# -------------------------------
# Alert
# -------------------------------
class SensorData(BaseModel):
    model_config = FINITE

    value: float
    unit: str
    sensor_id: str


class AlertCreationCommand(BaseModel):
    """
    Everything needed to persist a freshly derived alert.
    """

    id: str
    type: AlertType
    severity: AlertSeverity
    message: str
    location: str
    coordinates: Coordinates
    estimated_impact: int = 0
    sensor_data: Optional[SensorData] = None
    created_at: datetime


class TeamAssignment(BaseModel):
    team_id: str
    assigned_at: datetime = Field(default_factory=utcnow)
    status: TeamAssignmentStatus = TeamAssignmentStatus.DISPATCHED


class Alert(AlertCreationCommand):
    """
    A stored alert. Mutated only by acknowledge / resolve / team assignment.
    """

    acknowledged: bool = False
    acknowledged_at: Optional[datetime] = None

    resolved: bool = False
    resolved_at: Optional[datetime] = None
    resolution: Optional[str] = None

    response_teams: List[TeamAssignment] = Field(default_factory=list)


# -------------------------------
# Response team
# -------------------------------
class TeamMember(BaseModel):
    name: str = Field(min_length=1)
    role: str = Field(min_length=1)
    contact_number: Optional[str] = None
    certification: List[str] = Field(default_factory=list)
    is_leader: bool = False


class TeamPosition(BaseModel):
    address: Optional[str] = None
    coordinates: Coordinates


class TeamLocation(BaseModel):
    base: str = Field(min_length=1)
    current: Optional[TeamPosition] = None


class CurrentAssignment(BaseModel):
    alert_id: str
    assigned_at: datetime
    estimated_duration_min: Optional[int] = Field(default=None, ge=0)
    priority: AssignmentPriority = AssignmentPriority.MEDIUM


class TeamPerformance(BaseModel):
    model_config = FINITE

    total_missions: int = 0
    successful_missions: int = 0
    average_response_time_min: float = 0.0
    last_mission_date: Optional[datetime] = None


class Team(BaseModel):
    """
    A dispatchable response unit.
    Only `available` teams can be assigned; assignment marks the team
    `deployed` until the mission is completed.
    """

    team_id: str = Field(min_length=2, max_length=30)
    name: str = Field(min_length=1, max_length=100)
    type: TeamType
    status: TeamStatus = TeamStatus.AVAILABLE
    location: TeamLocation
    members: List[TeamMember] = Field(default_factory=list)
    equipment: List[str] = Field(default_factory=list)
    specializations: List[str] = Field(default_factory=list)
    contact: Optional[str] = None

    current_assignment: Optional[CurrentAssignment] = None
    performance: TeamPerformance = Field(default_factory=TeamPerformance)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# -------------------------------
# Disaster report
# -------------------------------
class AffectedPeople(BaseModel):
    estimated: Optional[int] = Field(default=None, ge=0)
    confirmed: Optional[int] = Field(default=None, ge=0)


class ReportLocation(BaseModel):
    address: str = Field(min_length=1)
    coordinates: Coordinates
    landmark: Optional[str] = None
    city: Optional[str] = None


class ReportResponse(BaseModel):
    message: str = Field(min_length=1, max_length=500)
    type: ReportResponseType = ReportResponseType.UPDATE
    responder: Optional[str] = None
    timestamp: datetime = Field(default_factory=utcnow)


class ReportTeamAssignment(BaseModel):
    team_id: str
    assigned_at: datetime = Field(default_factory=utcnow)
    status: ReportTeamStatus = ReportTeamStatus.ASSIGNED


class DisasterReport(BaseModel):
    """
    Citizen-submitted incident report.
    `priority` is derived and recomputed on every save.
    """

    report_id: str
    type: ReportType
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=1000)
    severity: ReportSeverity = ReportSeverity.MEDIUM
    location: ReportLocation

    status: ReportStatus = ReportStatus.REPORTED
    affected_people: AffectedPeople = Field(default_factory=AffectedPeople)
    priority: int = Field(default=5, ge=1, le=10)
    admin_notes: Optional[str] = None
    responses: List[ReportResponse] = Field(default_factory=list)
    assigned_teams: List[ReportTeamAssignment] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# -------------------------------
# Request bodies
# -------------------------------
class ReadingIn(BaseModel):
    model_config = FINITE

    value: float
    quality: ReadingQuality = ReadingQuality.GOOD


class ThresholdsUpdate(BaseModel):
    model_config = FINITE

    warning: float
    critical: float


class ResolveRequest(BaseModel):
    resolution: Optional[str] = None


class AssignTeamRequest(BaseModel):
    team_id: str = Field(min_length=1)
    priority: AssignmentPriority = AssignmentPriority.MEDIUM


class ReportIn(BaseModel):
    type: ReportType
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=1000)
    severity: ReportSeverity = ReportSeverity.MEDIUM
    location: ReportLocation
    affected_people: AffectedPeople = Field(default_factory=AffectedPeople)


class ReportStatusUpdate(BaseModel):
    status: ReportStatus
    admin_notes: Optional[str] = None


class ReportResponseIn(BaseModel):
    message: str = Field(min_length=1, max_length=500)
    type: ReportResponseType = ReportResponseType.UPDATE
    responder: Optional[str] = Field(default=None, max_length=100)


class TeamIn(BaseModel):
    team_id: str = Field(min_length=2, max_length=30)
    name: str = Field(min_length=1, max_length=100)
    type: TeamType
    location: TeamLocation
    members: List[TeamMember] = Field(default_factory=list)
    equipment: List[str] = Field(default_factory=list)
    specializations: List[str] = Field(default_factory=list)
    contact: Optional[str] = None


class TeamDispatchRequest(BaseModel):
    alert_id: str = Field(min_length=1)
    estimated_duration_min: Optional[int] = Field(default=None, ge=0)
    priority: AssignmentPriority = AssignmentPriority.MEDIUM


class MissionCompleteRequest(BaseModel):
    successful: bool = True
    notes: Optional[str] = Field(default=None, max_length=500)


class TeamStatusUpdate(BaseModel):
    status: TeamStatus


class NearbyTeamsRequest(BaseModel):
    coordinates: Coordinates
    max_distance_m: float = Field(default=50_000, gt=0, allow_inf_nan=False)
    type: Optional[TeamType] = None


class ReportAssignTeamRequest(BaseModel):
    team_id: str = Field(min_length=1)
