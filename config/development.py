import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "college_portal"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Attendance can be corrected for this many minutes after submission
EDIT_WINDOW_MINUTES = int(os.getenv("EDIT_WINDOW_MINUTES", "120"))
EMAIL_DOMAIN = os.getenv("EMAIL_DOMAIN", "aliet.ac.in")
BRANCHES = ["CIVIL", "EEE", "MECH", "ECE", "CSE", "IT", "CSM", "CSD"]

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also create the demo admin/faculty/HOD accounts on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
