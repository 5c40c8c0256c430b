from observation_tracker.models.audit_event import AuditEvent
from observation_tracker.models.framework import Framework
from observation_tracker.models.observation import Observation
from observation_tracker.models.scheduled_observation import ScheduledObservation
from observation_tracker.models.teacher import Teacher
from observation_tracker.models.user import User

__all__ = [ "AuditEvent", "Framework", "Observation",
           "ScheduledObservation", "Teacher", "User" ]
