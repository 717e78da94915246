import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "college_portal_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

EDIT_WINDOW_MINUTES = 120
EMAIL_DOMAIN = "aliet.ac.in"
BRANCHES = ["CIVIL", "EEE", "MECH", "ECE", "CSE", "IT", "CSM", "CSD"]

AUTO_INIT_DB = False
AUTO_SEED_DB = False
