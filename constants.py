import os

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 5000))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)

# A room is a two-party rendezvous; raising this turns it into a small mesh
ROOM_CAPACITY = int(os.getenv("ROOM_CAPACITY", 2))

# Treat an abrupt websocket close as an implicit leave-event
LEAVE_ON_DISCONNECT = os.getenv("LEAVE_ON_DISCONNECT", "true").lower() in ("1", "true", "yes")

# Plain text sent to every new connection before any signaling, empty disables it
WELCOME_MESSAGE = os.getenv("WELCOME_MESSAGE", "")

RELOAD = os.getenv("RELOAD", "false").lower() in ("1", "true", "yes")
