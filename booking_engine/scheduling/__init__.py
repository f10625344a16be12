from booking_engine.scheduling.clients import ClientClassifier
from booking_engine.scheduling.decision import BookingDecisionEngine, DecisionStage
from booking_engine.scheduling.intervals import TimeInterval, overlaps, parse_instant
from booking_engine.scheduling.slots import SlotEnumerator

__all__ = [
    "BookingDecisionEngine",
    "DecisionStage",
    "ClientClassifier",
    "SlotEnumerator",
    "TimeInterval",
    "overlaps",
    "parse_instant",
]
