# Inbound, client initiated
SIGNALING_TYPE_JOIN = "join-event"
SIGNALING_TYPE_LEAVE = "leave-event"
SIGNALING_TYPE_OFFER = "offer-event"
SIGNALING_TYPE_ANSWER = "answer-event"
SIGNALING_TYPE_CANDIDATE = "candidate-event"

# Outbound, synthesized by the relay
SIGNALING_TYPE_NEW_PEER = "new-peer-event"  # someone joined, sent to members already in the room
SIGNALING_TYPE_RESP_JOIN = "join-resp-event"  # tells the joiner who is already there
SIGNALING_TYPE_PEER_LEAVE = "leave-peer-event"  # someone left, sent to the remaining members
SIGNALING_TYPE_MEMBER_FULL = "SIGNALING_TYPE_MEMBER_FULL"

RELAY_EVENTS = (SIGNALING_TYPE_OFFER, SIGNALING_TYPE_ANSWER, SIGNALING_TYPE_CANDIDATE)

# Fields each inbound command must carry
REQUIRED_FIELDS = {
    SIGNALING_TYPE_JOIN: ("uid", "roomId"),
    SIGNALING_TYPE_LEAVE: ("uid", "roomId"),
    SIGNALING_TYPE_OFFER: ("uid", "roomId", "remoteUid"),
    SIGNALING_TYPE_ANSWER: ("uid", "roomId", "remoteUid"),
    SIGNALING_TYPE_CANDIDATE: ("uid", "roomId", "remoteUid"),
}

MEMBER_FULL_TEXT = "The room already has {capacity} participants, please use another room!"
