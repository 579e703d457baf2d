"""
Models package for the Forma client.
Contains data models for records fetched from the gym-management API.
"""

from .auth import Gym, User
from .membership import LatestPayment, MembershipRecord, MembershipStatus
from .payment import MemberProfile, PaymentRecord, PaymentStatus
from .workout import DailyWorkout, WorkoutElement

__all__ = [
    'DailyWorkout',
    'Gym',
    'LatestPayment',
    'MemberProfile',
    'MembershipRecord',
    'MembershipStatus',
    'PaymentRecord',
    'PaymentStatus',
    'User',
    'WorkoutElement',
]
