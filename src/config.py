
import os
from dotenv import load_dotenv

load_dotenv()

# Collector endpoint that receives submitted field definitions
COLLECTOR_URL = os.getenv("FB_COLLECTOR_URL", "https://www.mocky.io/v2/566061f21200008e3aabd919")

# HTTP timeouts (seconds) for the submission transport
HTTP_TIMEOUT = float(os.getenv("FB_HTTP_TIMEOUT", "10"))
CONNECT_TIMEOUT = float(os.getenv("FB_CONNECT_TIMEOUT", "5"))

# --- Transport retry behaviour ---
TRANSPORT_RETRIES = int(os.getenv("FB_TRANSPORT_RETRIES", "1"))   # extra attempts on connection errors
TRANSPORT_MAX_WORKERS = 1                                          # one submission in flight at a time

# Headless mode skips the Tk window and goes straight to the console editor
HEADLESS = os.getenv("HEADLESS", "false").lower() == "true"

# --- Instrumentation / diagnostics ---
LOG_MODE = os.getenv("FB_LOG_MODE", "live").lower()  # live | debug | trace
LOG_RATE_LIMITS_S = {
    "CHOICE.buffer": 1.0,
    "UI.render": 0.5,
}

# --- Output ---
DUMP_SUBMISSIONS = os.getenv("FB_DUMP_SUBMISSIONS", "false").lower() == "true"
RUNS_DIR = os.getenv("FB_RUNS_DIR", "runs")
SPECS_DIR = os.getenv("FB_SPECS_DIR", "src/specs")

# Field rules
MAX_CHOICES = 50

# Wire values for the only supported variants
MULTI_SELECT_WIRE = "Multi-Select"
ALPHABETICAL_ORDER_WIRE = "Display Choices in Alphabetical Order"
