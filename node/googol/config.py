# env vars + constants
import os

NODE_ID = os.getenv("NODE_ID", "googol")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))

STATE_FILE = os.getenv("STATE_FILE", "counter.json")
VIEW_DIR = os.getenv("VIEW_DIR", "view")

TICK_INTERVAL = float(os.getenv("TICK_INTERVAL", "0.25"))
BROADCAST_BUFFER = int(os.getenv("BROADCAST_BUFFER", "100"))
MAX_MESSAGE_SIZE = int(os.getenv("MAX_MESSAGE_SIZE", "512"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "info").lower()
SSL_CERTFILE = os.getenv("SSL_CERTFILE", "")
SSL_KEYFILE = os.getenv("SSL_KEYFILE", "")

# 10 ^ 100
ONE_GOOGOL = 10**100

# 300s at 4 ticks per second
POLL_DURATION = 1200
POLL_FAST_STEP = 4
POLL_SLOW_STEP = 1
