from enum import Enum

class Gender(str, Enum):
    male = "male"
    female = "female"
    other = "other"

class InterestStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"

class InterestAction(str, Enum):
    accept = "accept"
    reject = "reject"

class InterestListType(str, Enum):
    sent = "sent"
    received = "received"
    all = "all"

class NotificationType(str, Enum):
    interest_received = "interest_received"
    interest_accepted = "interest_accepted"
    favorited = "favorited"
    new_message = "new_message"

class NotifiableKind(str, Enum):
    interest = "interest"
    favorite = "favorite"
    message = "message"
