# --------------------------------------------------
# MATCHING
# --------------------------------------------------

# How many candidates the "suggested" feed returns
SUGGESTED_MATCH_LIMIT = 10

# Rows fetched per round-trip while streaming candidates
CANDIDATE_BATCH_SIZE = 100

# --------------------------------------------------
# MESSAGING
# --------------------------------------------------

MESSAGE_LIST_LIMIT = 50

# Characters of the message body copied into a new_message notification
MESSAGE_PREVIEW_LENGTH = 50

# --------------------------------------------------
# NOTIFICATIONS
# --------------------------------------------------

NOTIFICATION_LIST_LIMIT = 50
