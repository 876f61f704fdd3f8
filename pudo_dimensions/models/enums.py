"""
Enumeration definitions for the PUDO Dimensions backend.

All enums inherit from both `str` and `Enum` to ensure JSON serialization
compatibility with Pydantic models and FastAPI responses.
"""

from enum import Enum


class DataType(str, Enum):
    """
    Metric family selectable by the filtered endpoint.

    Values: 'recent-history' | 'live'

    - recent-history: 28-day rolling peak volume and package size mix
    - live: current backlog volume against the historical peak
    """
    RECENT_HISTORY = "recent-history"
    LIVE = "live"


class ExecutionPhase(str, Enum):
    """
    Phase of an engine call in which a failure happened.

    - connect: the engine could not be reached or no connection was available
    - submit: the query could not be handed to the client library (our bug)
    - engine-reject: the engine refused or failed the query (syntax, permissions)
    - transport: the response was lost, timed out or came back malformed
    """
    CONNECT = "connect"
    SUBMIT = "submit"
    ENGINE_REJECT = "engine-reject"
    TRANSPORT = "transport"


class PackageSize(str, Enum):
    """
    Package size classes computed by the recent-history query.

    Thresholds live in the SQL template (weight in kg, volume in cm³).
    """
    P = "P"
    M = "M"
    G = "G"
    GG = "GG"
