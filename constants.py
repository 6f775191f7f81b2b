import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8081))
RELOAD = os.getenv("RELOAD", "false").lower() == "true"

STATIC_DIR = os.getenv("STATIC_DIR", os.path.join(BASE_DIR, "www"))
ROOM_POLICY_FILE = os.getenv("ROOM_POLICY_FILE", os.path.join(BASE_DIR, "room_pwd.json"))

# Per-connection outbound queue bound; overflowing it disconnects the peer
OUTBOUND_QUEUE_SIZE = int(os.getenv("OUTBOUND_QUEUE_SIZE", 256))

ROOM_ID_MAX_LENGTH = 32
RESERVED_PATH_SEGMENTS = {"ws"}
INTERNAL_ROOM_KEY = "internal"
ID_MAX_ATTEMPTS = 100
