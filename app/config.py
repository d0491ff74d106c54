import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./gym_lifecycle.db")

# Firebase Configuration
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# Resend Email Configuration (used for the "email" notification channel)
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "Gym Console <noreply@gymconsole.app>")

# Channel used for trainer notifications: "app", "email" or "both"
NOTIFICATION_CHANNEL = os.getenv("NOTIFICATION_CHANNEL", "app")

# Fallbacks applied when a gym_settings column is NULL
DEFAULT_DAYS_TO_FIRST_FOLLOWUP = int(os.getenv("DEFAULT_DAYS_TO_FIRST_FOLLOWUP", "7"))
DEFAULT_PACKAGE_CONFIRMATION_DAYS = int(os.getenv("DEFAULT_PACKAGE_CONFIRMATION_DAYS", "30"))
DEFAULT_CUSTOM_PLAN_CONFIRMATION_DAYS = int(
    os.getenv("DEFAULT_CUSTOM_PLAN_CONFIRMATION_DAYS", "45")
)
DEFAULT_REQUIRE_TEMPLATE_ASSIGNMENT = (
    os.getenv("DEFAULT_REQUIRE_TEMPLATE_ASSIGNMENT", "true").lower() == "true"
)

# Frontend base URL, used in notification messages and CORS defaults
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
