# src/habithub/config.py
import os
from dotenv import load_dotenv

load_dotenv()

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# "supabase" or "memory"
STORE_BACKEND = os.getenv("HABITHUB_STORE", "supabase").strip().lower()

# every "now"-relative computation is anchored to this zone
TIMEZONE = os.getenv("HABITHUB_TIMEZONE", "Asia/Kolkata")

SCHEDULER_ENABLED = os.getenv("HABITHUB_SCHEDULER", "on").strip().lower() not in {"off", "false", "0", "no"}

ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:5173").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))

DEFAULT_COLOR = "#0ea5e9"
TITLE_MAX_LENGTH = 100
HISTORY_PAGE_SIZE = 10
STATS_WEEKS = 8

# Sunday 00:05 in the anchor zone
NEW_WEEK_CRON = {"day_of_week": "sun", "hour": 0, "minute": 5}
