from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from enum import Enum
import time


class ComponentType(str, Enum):
    ORCHESTRATOR = "BoundaryOrchestrator"
    CLASSIFIER = "ColorApiClassifier"
    NAME_SERVICE = "NameService"


class EventType(str, Enum):
    RUN_STARTED = "Run_Started"
    SAMPLES_RESOLVED = "Samples_Resolved"
    WINDOW_LAUNCHED = "Window_Launched"
    SEGMENT_EMITTED = "Segment_Emitted"
    STATE_TRANSITION = "State_Transition"
    RUN_COMPLETED = "Run_Completed"
    RUN_CANCELLED = "Run_Cancelled"
    RUN_FAILED = "Run_Failed"


class LogEntry(BaseModel):
    run_id: str
    timestamp: float = Field(default_factory=time.time)
    component: ComponentType
    event_type: EventType
    payload_hash: Optional[str] = None
    metrics: Dict[str, Any] = Field(default_factory=dict)
    message: Optional[str] = None


class ColorApiName(BaseModel):
    """`name` block of a TheColorAPI /id response (only `value` is used)."""
    value: str
    closest_named_hex: Optional[str] = None
    exact_match_name: Optional[bool] = None
    distance: Optional[int] = None


class ColorApiResponse(BaseModel):
    name: ColorApiName


class ColorValue(BaseModel):
    hsl: List[float]
    rgb: List[int]
    hex: str


class NamedColor(BaseModel):
    """A named colour as shown to users: the label plus its first swatch."""
    name: str
    color: ColorValue
    index: Optional[int] = None
